# services/orchestrator.py
"""
High-level coordinator: evaluates a bundle, scores it, compares the score with
the previous audit and records the new score.

This module deliberately depends only on:
- core.interfaces + core.models (abstractions)
- the evaluator/scorer/extractor services
- a ScoreHistoryTracker and a PageCollector passed in by the caller

At most one audit per property is in flight. A second request for the same
property while one is running is suppressed (returns None), not queued.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Set, Tuple

from core.interfaces import PageCollector
from core.models import (
    AuditReport,
    ComplianceResult,
    ConfigurationBundle,
    DataQualityResult,
    ScoreComparison,
    WebsiteScanResult,
)

from .evaluator import evaluate
from .history import ScoreHistoryTracker
from .scorer import data_quality, score_bundle
from .signal_extractor import extract_signals

log = logging.getLogger(__name__)

# on_stage(stage_name); lets the UI show what is running
StageFn = Callable[[str], None]


@dataclass(frozen=True)
class AuditOutcome:
    property_id: Optional[str]      # None for a bundle that names no property
    property_name: str
    audited_at_utc: datetime
    report: AuditReport
    compliance: ComplianceResult
    comparison: ScoreComparison
    data_quality: DataQualityResult


class AuditOrchestrator:
    """
    Usage:
        orchestrator = AuditOrchestrator(tracker, collector=PlaywrightPageCollector())
        outcome = orchestrator.run_audit(bundle)
        scan = orchestrator.scan_website("https://example.com")
    """

    def __init__(
        self,
        tracker: ScoreHistoryTracker,
        collector: Optional[PageCollector] = None,
        on_stage: Optional[StageFn] = None,
    ) -> None:
        self._tracker = tracker
        self._collector = collector
        self._on_stage = on_stage
        self._lock = threading.Lock()
        self._in_flight: Set[str] = set()

    def run_audit(self, bundle: ConfigurationBundle) -> Optional[AuditOutcome]:
        """
        Evaluate + score + compare + save. Returns None when an audit for the
        same property is already running.

        A bundle with neither a resource name nor a display name is audited
        without history: nothing is compared, saved or guarded, so anonymous
        bundles cannot overwrite or block each other.
        """
        property_id = bundle.identity
        if property_id is None:
            log.warning("Bundle names no property; auditing without score history")
            report, compliance = self._evaluate(bundle)
            return self._outcome(None, bundle, report, compliance, ScoreComparison(current_score=compliance.score))

        if not self._claim(property_id):
            log.warning("Audit already running for property %s; request ignored", property_id)
            return None

        try:
            report, compliance = self._evaluate(bundle)

            self._stage("Comparing with previous audit")
            comparison = self._tracker.get_score_comparison(property_id, compliance.score)
            self._tracker.save_score(property_id, bundle.property_name, compliance.score)
        finally:
            self._release(property_id)

        log.info(
            "Audit finished for %s: score=%d (%d/%d), previous=%s",
            property_id, compliance.score, compliance.satisfied, compliance.total, comparison.previous_score,
        )
        return self._outcome(property_id, bundle, report, compliance, comparison)

    def scan_website(self, url: str) -> WebsiteScanResult:
        """
        Load the page via the collector and extract signals.
        ScanNavigationError propagates to the caller.
        """
        if self._collector is None:
            raise RuntimeError("No page collector configured")
        self._stage(f"Loading {url}")
        scan = self._collector.capture(url)
        self._stage("Extracting signals")
        result = extract_signals(scan)
        log.info(
            "Scan of %s: %d container(s), %d GA4 id(s), %d recommendation(s)",
            result.domain, len(result.gtm_containers), len(result.ga4_properties), len(result.recommendations),
        )
        return result

    def is_running(self, property_id: str) -> bool:
        with self._lock:
            return property_id in self._in_flight

    # ---------- helpers ----------

    def _evaluate(self, bundle: ConfigurationBundle) -> Tuple[AuditReport, ComplianceResult]:
        self._stage("Evaluating configuration")
        report = evaluate(bundle)
        self._stage("Scoring")
        return report, score_bundle(bundle)

    @staticmethod
    def _outcome(property_id, bundle, report, compliance, comparison) -> AuditOutcome:
        return AuditOutcome(
            property_id=property_id,
            property_name=bundle.property_name,
            audited_at_utc=datetime.now(timezone.utc),
            report=report,
            compliance=compliance,
            comparison=comparison,
            data_quality=data_quality(bundle),
        )

    def _claim(self, property_id: str) -> bool:
        with self._lock:
            if property_id in self._in_flight:
                return False
            self._in_flight.add(property_id)
            return True

    def _release(self, property_id: str) -> None:
        with self._lock:
            self._in_flight.discard(property_id)

    def _stage(self, name: str) -> None:
        if self._on_stage:
            self._on_stage(name)
