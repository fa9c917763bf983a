# app/streamlit_app.py
"""
GA4 Audit: Streamlit UI entry point.

Flow:
1) Configure logging + load config.
2) Audit tab: upload a configuration bundle, run the audit, show score,
   priority recommendations, trend and checklist; allow CSV/JSON export.
3) Website tab: scan one page for GTM/GA4 signals.
4) Sidebar: config and stored score history.

Run:
    streamlit run app/streamlit_app.py
"""
from __future__ import annotations
# --- ensure project root is on sys.path ---
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]  # one level up from /app
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ------------------------------------------

import logging

import streamlit as st

from app.components import sidebar_config, sidebar_history
from core.errors import ScanNavigationError
from infra.config_loader import load_config
from infra.logging_config import configure_logging
from infra.storage import JsonFileStore
from services.history import ScoreHistoryTracker
from services.orchestrator import AuditOrchestrator
from services.page_capture import PlaywrightPageCollector
from ui import (
    bundle_uploader,
    downloads,
    recommendations_panel,
    results_table,
    scan_panel,
    score_panel,
    url_input,
)


@st.cache_resource
def _tracker(path: str, key: str) -> ScoreHistoryTracker:
    return ScoreHistoryTracker(JsonFileStore(path), key=key)


@st.cache_resource
def _orchestrator(path: str, key: str) -> AuditOrchestrator:
    # Shared across sessions so the per-property in-flight guard sees every trigger.
    return AuditOrchestrator(_tracker(path, key), collector=PlaywrightPageCollector())


def audit_tab(orchestrator: AuditOrchestrator) -> None:
    bundle = bundle_uploader()
    run_clicked = st.button("Run audit", type="primary", disabled=bundle is None)

    if run_clicked and bundle is not None:
        outcome = orchestrator.run_audit(bundle)
        if outcome is None:
            st.warning("An audit for this property is already running.")
            return
        # Keep the result across reruns triggered by the table filters.
        st.session_state.outcome = outcome

    outcome = st.session_state.get("outcome")
    if outcome is None:
        return

    st.divider()
    score_panel(outcome)
    recommendations_panel(outcome.compliance.recommendations)
    df = results_table(outcome.report)
    downloads(df, outcome)


def website_tab(orchestrator: AuditOrchestrator, log: logging.Logger) -> None:
    url = url_input()
    if not st.button("Analyze website", disabled=url is None):
        return
    with st.spinner("Loading page…"):
        try:
            result = orchestrator.scan_website(url)
        except ScanNavigationError as exc:
            log.warning("Website scan failed: %s", exc)
            st.error(f"Analysis failed: {exc.reason}. Check the URL and try again.")
            return
    scan_panel(result)


def main():
    st.set_page_config(page_title="GA4 Audit: Configuration Checker", layout="wide")
    cfg = load_config()
    configure_logging(cfg.get("log_level", "INFO"), cfg.get("log_dir"))
    log = logging.getLogger("app")

    st.title("GA4 Audit: Configuration Checker")
    st.caption("Compliance score and checklist for a Google Analytics 4 property")

    tracker = _tracker(cfg["history_path"], cfg["history_key"])
    orchestrator = _orchestrator(cfg["history_path"], cfg["history_key"])

    tab_audit, tab_site = st.tabs(["Property audit", "Website scan"])
    with tab_audit:
        audit_tab(orchestrator)
    with tab_site:
        website_tab(orchestrator, log)

    sidebar_config(cfg)
    if sidebar_history(tracker.entries()):
        tracker.clear_history()
        st.sidebar.success("Score history cleared.")
        st.rerun()


if __name__ == "__main__":
    main()
