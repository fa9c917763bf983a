# core/errors.py
"""
Error taxonomy.

Hard errors propagate to the caller (the UI shows them as a dismissible
message). Soft problems never raise out of the core:
- missing bundle data becomes "missing"/"unknown" audit items;
- a corrupt history record is reported as MalformedHistoryError inside the
  tracker and handled there as an empty history.
"""

from __future__ import annotations

from typing import Optional


class AuditError(Exception):
    """Base class for errors raised by this app."""


class ScanNavigationError(AuditError):
    """
    The page could not be loaded (timeout, unreachable host, blocked by the
    site). No partial scan result exists when this is raised.
    """

    def __init__(self, url: str, reason: str, timeout_ms: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.timeout_ms = timeout_ms
        super().__init__(f"Could not load {url}: {reason}")


class MalformedHistoryError(AuditError):
    """Stored score history could not be parsed."""
