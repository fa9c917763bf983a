# ui/__init__.py
"""
UI package convenience exports.

    from ui import bundle_uploader, score_panel, results_table
"""

from __future__ import annotations

from .components import (
    bundle_uploader,
    url_input,
    score_panel,
    recommendations_panel,
    results_table,
    downloads,
    scan_panel,
)

__all__ = [
    "bundle_uploader",
    "url_input",
    "score_panel",
    "recommendations_panel",
    "results_table",
    "downloads",
    "scan_panel",
]
