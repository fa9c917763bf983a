# services/evaluator.py
"""
Audit Item Evaluator: runs every registered check against a bundle and
groups the resulting AuditItems by category.

Importing this module imports the check modules so they self-register.
Unexpected check exceptions are converted into "unknown" items; missing data
never reaches this path because checks encode it as missing/unknown.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import checks  # noqa: F401  (registers every check)

from core.interfaces import Check
from core.models import AuditItem, AuditReport, ConfigurationBundle, Status
from core.registry import checks as registered_checks

log = logging.getLogger(__name__)


def evaluate(bundle: ConfigurationBundle, checks: Optional[Iterable[Check]] = None) -> AuditReport:
    """
    Evaluate all checks (registration order) and return an AuditReport.
    Pass `checks` to run a specific subset.
    """
    report = AuditReport()
    for chk in (registered_checks() if checks is None else checks):
        report.add(_safe_run_check(chk, bundle))
    log.debug(
        "Evaluated %d items for %s (%d critical)",
        len(report.items()), bundle.property_id, report.count(Status.CRITICAL),
    )
    return report


def _safe_run_check(chk: Check, bundle: ConfigurationBundle) -> AuditItem:
    """
    Run a check; if it crashes, record an "unknown" item under the check's key.
    """
    try:
        return chk.run(bundle)
    except Exception as exc:
        log.exception("Check %s raised", chk.key())
        return AuditItem(
            key=chk.key(),
            category=chk.category(),
            label=chk.label(),
            status=Status.UNKNOWN,
            value="Check failed",
            recommendation="This setting could not be evaluated.",
            details=f"{exc.__class__.__name__}: {exc}",
        )
