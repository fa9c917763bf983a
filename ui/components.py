# ui/components.py
"""
Streamlit UI helpers (pure rendering/inputs; no business logic).

Functions:
- bundle_uploader() -> Optional[ConfigurationBundle]
- url_input()       -> Optional[str]
- score_panel(outcome)
- recommendations_panel(recommendations)
- results_table(report) -> pandas.DataFrame
- downloads(df, outcome)
- scan_panel(result)
"""

from __future__ import annotations

import json
from typing import Iterable, Optional

import pandas as pd
import streamlit as st

from core.models import AuditReport, ConfigurationBundle, PriorityRecommendation, RecommendationTag, Status, WebsiteScanResult
from infra.exporters import outcome_to_plain

# Presentation-only mapping; the core only knows symbolic tags.
_TAG_ICONS = {
    RecommendationTag.DATA_RETENTION: ":material/schedule:",
    RecommendationTag.PROPERTY_SETTINGS: ":material/calendar_month:",
    RecommendationTag.KEY_EVENTS: ":material/trending_up:",
    RecommendationTag.ADVERTISING: ":material/link:",
    RecommendationTag.CUSTOM_DEFINITIONS: ":material/database:",
    RecommendationTag.SEARCH: ":material/search:",
}

_STATUS_ORDER = {s.value: i for i, s in enumerate(
    [Status.CRITICAL, Status.MISSING, Status.WARNING, Status.UNKNOWN, Status.GOOD]
)}


# -------- Inputs --------

def bundle_uploader() -> Optional[ConfigurationBundle]:
    """
    Upload the configuration bundle JSON exported by the GA4 collector.
    Returns None until a valid file is provided.
    """
    uploaded = st.file_uploader("GA4 configuration bundle (.json)", type=["json"])
    if uploaded is None:
        return None
    try:
        payload = json.loads(uploaded.getvalue().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        st.error(f"Could not read bundle: {exc}")
        return None
    if not isinstance(payload, dict):
        st.error("Bundle must be a JSON object.")
        return None
    return ConfigurationBundle.from_dict(payload)


def url_input() -> Optional[str]:
    return st.text_input(
        "Website URL",
        placeholder="https://example.com",
        help="A single page is loaded in a headless browser and inspected for GTM/GA4 tags.",
    ).strip() or None


# -------- Results rendering --------

def score_panel(outcome) -> None:
    c = outcome.compliance
    cmp = outcome.comparison
    st.subheader(f"{outcome.property_name}: GA4 Fundamentals Compliance")

    delta = None
    if cmp.score_change is not None:
        delta = f"{cmp.score_change:+d} since {cmp.last_audit_date}"

    dq = outcome.data_quality
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Score", f"{c.score}%", delta=delta)
    c2.metric("Checks passed", f"{c.satisfied} / {c.total}")
    c3.metric("Critical items", outcome.report.count(Status.CRITICAL))
    c4.metric("Data quality", f"{dq.score}%", help=dq.message)
    st.progress(c.score / 100, text=c.label)
    if cmp.days_since_last_audit is not None:
        st.caption(f"Last audit {cmp.days_since_last_audit} day(s) ago.")
    if outcome.property_id is None:
        st.caption("This bundle names no property, so the score was not saved to history.")


def recommendations_panel(recommendations: Iterable[PriorityRecommendation]) -> None:
    st.subheader("Priority recommendations")
    recs = list(recommendations)
    if not recs:
        st.success("No priority issues found.")
        return
    for r in recs:
        icon = _TAG_ICONS.get(r.tag)
        if r.priority.value == "critical":
            st.error(r.text, icon=icon)
        else:
            st.warning(r.text, icon=icon)


def _report_to_df(report: AuditReport) -> pd.DataFrame:
    rows = [{
        "Category": item.category.value,
        "Check": item.label,
        "Status": item.status.value,
        "Value": item.value,
        "Recommendation": item.recommendation,
        "Quota": item.quota or "",
        "Warnings": "; ".join(item.warnings),
    } for item in report.items()]
    df = pd.DataFrame(rows)
    if not df.empty:
        df = (
            df.assign(_order=df["Status"].map(_STATUS_ORDER))
            .sort_values(["_order", "Category", "Check"])
            .drop(columns="_order")
            .reset_index(drop=True)
        )
    return df


def results_table(report: AuditReport) -> pd.DataFrame:
    """
    Render the checklist table with simple filters.
    Returns the filtered DataFrame (for export).
    """
    df = _report_to_df(report)
    if df.empty:
        st.info("No results to show.")
        return df

    with st.expander("Checklist (filters)", expanded=False):
        cols = st.columns(3)
        statuses = sorted(df["Status"].unique(), key=lambda s: _STATUS_ORDER.get(s, 99))
        sel_status = cols[0].multiselect("Status", options=statuses, default=statuses)
        categories = sorted(df["Category"].unique())
        sel_cat = cols[1].multiselect("Category", options=categories, default=categories)
        substr = cols[2].text_input("Text filter", value="")

    mask = df["Status"].isin(sel_status) & df["Category"].isin(sel_cat)
    if substr:
        s = substr.lower()
        mask &= (
            df["Check"].str.lower().str.contains(s, na=False)
            | df["Value"].str.lower().str.contains(s, na=False)
            | df["Recommendation"].str.lower().str.contains(s, na=False)
        )
    fdf = df[mask]
    st.dataframe(fdf, use_container_width=True)
    return fdf


def downloads(df: pd.DataFrame, outcome) -> None:
    if df.empty:
        return
    csv = df.to_csv(index=False).encode("utf-8")
    payload = json.dumps(outcome_to_plain(outcome), ensure_ascii=False, indent=2).encode("utf-8")
    c1, c2 = st.columns(2)
    c1.download_button("Download CSV", data=csv, file_name="ga4_audit_items.csv", mime="text/csv")
    c2.download_button("Download JSON", data=payload, file_name="ga4_audit.json", mime="application/json")


def scan_panel(result: WebsiteScanResult) -> None:
    st.subheader(f"Website signals: {result.domain}")
    c1, c2, c3 = st.columns(3)
    c1.metric("GTM containers", len(result.gtm_containers))
    c2.metric("GA4 measurement IDs", len(result.ga4_properties))
    c3.metric("GA4 hits", result.collect_requests)

    st.dataframe(pd.DataFrame([
        {"Signal": "Tag Manager", "Detected": result.gtm_installed, "Detail": ", ".join(result.gtm_containers)},
        {"Signal": "GA4", "Detected": result.ga4_connected, "Detail": ", ".join(result.ga4_properties)},
        {"Signal": "Cross-domain tracking", "Detected": result.cross_domain_tracking, "Detail": ""},
        {"Signal": "Consent mode", "Detected": result.consent_mode, "Detail": ""},
        {"Signal": "Debug mode", "Detected": result.debug_mode, "Detail": ""},
        {"Signal": "Enhanced ecommerce", "Detected": result.enhanced_ecommerce, "Detail": ""},
    ]), use_container_width=True, hide_index=True)

    if result.recommendations:
        st.markdown("**Recommendations**")
        for i, text in enumerate(result.recommendations, start=1):
            st.write(f"{i}. {text}")
