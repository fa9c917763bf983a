# checks/collection_checks.py
"""
Data collection checks:
1) Data retention       -> critical unless FOURTEEN_MONTHS (absent included).
                           The two-month default silently drops data from
                           explorations after 60 days.
2) Data streams         -> critical if none configured, missing if not fetched.
3) Enhanced measurement -> derived per stream from its flag set; the item takes
                           the worst stream status. No stream data -> unknown.
4) Google signals       -> good when enabled, missing otherwise.
5) PII exposure         -> page paths scanned for personal data in URL parameters.

Each check registers itself at import time.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from core.interfaces import Check
from core.models import (
    AuditCategory,
    AuditItem,
    ConfigurationBundle,
    EnhancedMeasurementSettings,
    Status,
)
from core.registry import register_check

from .policies import (
    DEFAULT_RETENTION,
    GOOGLE_SIGNALS_ENABLED,
    PII_PATTERNS,
    REQUIRED_RETENTION,
    RETENTION_LABELS,
)

# Worst first; used to fold per-stream statuses into one item.
_SEVERITY_RANK = {
    Status.CRITICAL: 0,
    Status.MISSING: 1,
    Status.WARNING: 2,
    Status.UNKNOWN: 3,
    Status.GOOD: 4,
}

_FEATURE_LABELS = {
    "scrollsEnabled": "Scrolls",
    "outboundClicksEnabled": "Outbound clicks",
    "siteSearchEnabled": "Site search",
    "videoEngagementEnabled": "Video engagement",
    "fileDownloadsEnabled": "File downloads",
    "formInteractionsEnabled": "Form interactions",
    "pageChangesEnabled": "Page changes",
}


class DataRetentionCheck(Check):
    def key(self) -> str:
        return "dataRetention"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "Data retention"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        retention = bundle.event_data_retention
        if retention == REQUIRED_RETENTION:
            return self.item(
                Status.GOOD,
                RETENTION_LABELS[REQUIRED_RETENTION],
                "Event data is kept for the maximum standard period.",
            )
        if retention is None:
            value = "Unknown (defaults to 2 months)"
        else:
            value = RETENTION_LABELS.get(retention, retention)
            if retention == DEFAULT_RETENTION:
                value += " (default)"
        return self.item(
            Status.CRITICAL,
            value,
            "Change event data retention to 14 months in Admin > Data Settings > Data Retention.",
            details="Explorations can only query data inside the retention window.",
        )


class DataStreamsCheck(Check):
    def key(self) -> str:
        return "dataStreams"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "Data streams"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        streams = bundle.data_streams
        if streams is None:
            return self.item(Status.MISSING, "Not available", "Data streams could not be read for this property.")
        if not streams:
            return self.item(Status.CRITICAL, "0 streams", "Create at least one data stream to start collecting data.")
        names = [s.display_name or s.name or "Unnamed stream" for s in streams]
        return self.item(
            Status.GOOD,
            f"{len(streams)} stream(s)",
            "Data collection is configured.",
            details=", ".join(names),
        )


def stream_status(stream: EnhancedMeasurementSettings) -> Status:
    """Status for one stream's enhanced measurement flag set."""
    enabled = stream.stream_enabled
    if stream.flags is None or enabled is None:
        return Status.UNKNOWN
    return Status.GOOD if enabled else Status.WARNING


def disabled_features(stream: EnhancedMeasurementSettings) -> List[str]:
    if not stream.flags:
        return []
    return [_FEATURE_LABELS.get(name, name) for name, on in stream.flags if name != "streamEnabled" and not on]


class EnhancedMeasurementCheck(Check):
    def key(self) -> str:
        return "enhancedMeasurement"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "Enhanced measurement"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        streams = bundle.enhanced_measurement
        if not streams:
            return self.item(
                Status.UNKNOWN,
                "No stream data",
                "Enhanced measurement settings were not available; check each web stream in Admin > Data Streams.",
            )

        statuses = [stream_status(s) for s in streams]
        worst = min(statuses, key=_SEVERITY_RANK.__getitem__)
        enabled = sum(1 for s in statuses if s == Status.GOOD)

        warnings: List[str] = []
        for s, st in zip(streams, statuses):
            name = s.stream_name or s.stream_id or "Unnamed stream"
            if st == Status.WARNING:
                warnings.append(f"{name}: enhanced measurement is turned off")
            elif st == Status.UNKNOWN:
                warnings.append(f"{name}: settings unavailable")
            off = disabled_features(s)
            if st == Status.GOOD and off:
                warnings.append(f"{name}: disabled features: {', '.join(off)}")

        recommendation = (
            "Enhanced measurement is active on every stream."
            if worst == Status.GOOD
            else "Turn on enhanced measurement for automatic scroll, click, search and download events."
        )
        return self.item(
            worst,
            f"{enabled} of {len(streams)} stream(s) enabled",
            recommendation,
            warnings=tuple(warnings),
        )


class GoogleSignalsCheck(Check):
    def key(self) -> str:
        return "googleSignals"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "Google signals"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        if bundle.google_signals_state == GOOGLE_SIGNALS_ENABLED:
            return self.item(Status.GOOD, "Enabled", "Cross-device reporting is available.")
        return self.item(
            Status.MISSING,
            "Disabled" if bundle.google_signals_state else "Not available",
            "Enable Google signals after a privacy review for cross-device and demographic reports.",
        )


def find_pii(paths: Sequence[str]) -> Dict[str, List[str]]:
    """
    Return {pii kind: [matching page paths]} for every PII pattern that hits.
    Kinds keep the PII_PATTERNS order; paths keep input order.
    """
    found: Dict[str, List[str]] = {}
    for pattern in PII_PATTERNS:
        hits = [p for p in paths if pattern.pattern.search(p)]
        if hits:
            found[pattern.kind] = hits
    return found


_SEVERITY_ORDER = ("critical", "high", "medium")


def pii_severity(found: Dict[str, List[str]]) -> Optional[str]:
    """Highest severity among the detected PII kinds; None when nothing was found."""
    kinds = {p.kind: p.severity for p in PII_PATTERNS}
    present = {kinds[kind] for kind in found}
    return next((s for s in _SEVERITY_ORDER if s in present), None)


class PiiExposureCheck(Check):
    def key(self) -> str:
        return "piiRedaction"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "PII in page URLs"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        paths = bundle.page_paths
        if paths is None:
            return self.item(
                Status.UNKNOWN,
                "Not checked",
                "Page paths were not provided, so URLs could not be checked for personal data.",
            )

        found = find_pii(paths)
        if not found:
            return self.item(
                Status.GOOD,
                f"No PII in {len(paths)} URL(s)",
                "No personal data detected in URL parameters.",
            )

        descriptions = {p.kind: p.description for p in PII_PATTERNS}
        critical = pii_severity(found) == "critical"
        affected = {p for hits in found.values() for p in hits}
        warnings = tuple(
            f"{descriptions[kind]} ({len(hits)} URL(s), e.g. {_shorten(hits[0])})"
            for kind, hits in found.items()
        )
        return self.item(
            Status.CRITICAL if critical else Status.WARNING,
            f"{len(affected)} of {len(paths)} URL(s) expose PII",
            "Configure data redaction in Admin > Data Settings > Data Collection and stop sending personal data in URLs.",
            warnings=warnings,
        )


def _shorten(url: str, limit: int = 100) -> str:
    return url if len(url) <= limit else url[:limit] + "..."


# Register on import
register_check(DataRetentionCheck())
register_check(DataStreamsCheck())
register_check(EnhancedMeasurementCheck())
register_check(GoogleSignalsCheck())
register_check(PiiExposureCheck())
