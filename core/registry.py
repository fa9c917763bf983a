# core/registry.py
"""
Plugin registry for audit checks.

Usage pattern:
- Each check module creates its instances and calls register_check(...) at
  import time (see checks/*_checks.py).
- The evaluator asks this registry for all checks and runs them in
  registration order, which keeps the checklist order stable.

A check is identified by (category, key), the same pair that addresses its
item in an AuditReport. Registering a second check under a taken pair is a
no-op, so importing a check module twice cannot duplicate checklist rows.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .interfaces import Check
from .models import AuditCategory

# Insertion-ordered: registration order == checklist order.
_CHECKS: Dict[Tuple[AuditCategory, str], Check] = {}


def register_check(c: Check) -> bool:
    """
    Register a check instance. Returns False if (category, key) is taken.
    """
    ident = (c.category(), c.key())
    if ident in _CHECKS:
        return False
    _CHECKS[ident] = c
    return True


def checks(category: Optional[AuditCategory] = None) -> List[Check]:
    """Registered checks, optionally limited to one category (a fresh list)."""
    return [c for (cat, _), c in _CHECKS.items() if category is None or cat == category]


def clear_registry() -> None:
    """
    Testing helper: wipe current registrations.
    Not intended for use in the running app.
    """
    _CHECKS.clear()
