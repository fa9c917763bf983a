from typing import List

import pandas as pd
import streamlit as st

from core.models import ScoreHistoryEntry


def sidebar_config(cfg: dict) -> None:
    st.sidebar.header("Config")
    st.sidebar.write("**Scan timeout:**", f"{cfg.get('scan_timeout_ms', 0) / 1000:.0f} s")
    st.sidebar.write("**History file:**", cfg.get("history_path", ""))
    st.sidebar.write("**Log level:**", cfg.get("log_level", "INFO"))


def sidebar_history(entries: List[ScoreHistoryEntry]) -> bool:
    """
    Show stored scores (latest per property) and a clear button.
    Returns True if the user asked to clear the history.
    """
    st.sidebar.header("Score history")
    if not entries:
        st.sidebar.caption("No audits recorded yet.")
        return False

    df = pd.DataFrame([{"Property": e.property_name, "Score": e.score, "Date": e.date} for e in entries])
    st.sidebar.dataframe(df, hide_index=True, use_container_width=True)
    return st.sidebar.button("Clear history", help="Deletes every stored score. This cannot be undone.")
