# checks/definition_checks.py
"""
Key events and custom definitions:
1) Key events         -> critical at 0, warning at exactly 1 (single point of
                         failure), good otherwise. Quota n / 50.
2) Custom dimensions  -> warning below 3, good otherwise. Quota n / 50.
3) Custom metrics     -> missing at 0 (optional feature), good otherwise.

Absent lists (collector could not read them) are reported as missing.
"""

from __future__ import annotations

from core.interfaces import Check
from core.models import AuditCategory, AuditItem, ConfigurationBundle, Status
from core.registry import register_check

from .policies import (
    CUSTOM_DIMENSION_QUOTA,
    CUSTOM_METRIC_QUOTA,
    KEY_EVENT_QUOTA,
    MIN_CUSTOM_DIMENSIONS,
    SINGLE_KEY_EVENT,
)


class KeyEventsCheck(Check):
    def key(self) -> str:
        return "keyEvents"

    def category(self) -> AuditCategory:
        return AuditCategory.KEY_EVENTS

    def label(self) -> str:
        return "Key events"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        events = bundle.key_events
        if events is None:
            return self.item(Status.MISSING, "Not available", "Key events could not be read for this property.")

        n = len(events)
        quota = f"{n} / {KEY_EVENT_QUOTA}"
        if n == 0:
            return self.item(
                Status.CRITICAL,
                "0 configured",
                "Mark 1-2 primary conversion events as key events.",
                quota=quota,
            )

        names = ", ".join(e.event_name for e in events)
        no_method = tuple(
            f"{e.event_name}: counting method not set" for e in events if not e.counting_method
        )
        if n == SINGLE_KEY_EVENT:
            return self.item(
                Status.WARNING,
                f"1 configured ({names})",
                "Add a second key event so conversion reporting does not depend on a single tag.",
                quota=quota,
                warnings=no_method,
            )
        return self.item(
            Status.GOOD,
            f"{n} configured",
            "Key events are configured.",
            details=names,
            quota=quota,
            warnings=no_method,
        )


class CustomDimensionsCheck(Check):
    def key(self) -> str:
        return "customDimensions"

    def category(self) -> AuditCategory:
        return AuditCategory.CUSTOM_DEFINITIONS

    def label(self) -> str:
        return "Custom dimensions"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        dims = bundle.custom_dimensions
        if dims is None:
            return self.item(Status.MISSING, "Not available", "Custom dimensions could not be read for this property.")

        n = len(dims)
        quota = f"{n} / {CUSTOM_DIMENSION_QUOTA}"
        if n < MIN_CUSTOM_DIMENSIONS:
            return self.item(
                Status.WARNING,
                f"{n} configured",
                f"Register at least {MIN_CUSTOM_DIMENSIONS} custom dimensions for business-specific reporting.",
                quota=quota,
            )
        return self.item(
            Status.GOOD,
            f"{n} configured",
            "Custom dimensions are in use.",
            details=", ".join(d.display_name or d.parameter_name or "?" for d in dims),
            quota=quota,
        )


class CustomMetricsCheck(Check):
    def key(self) -> str:
        return "customMetrics"

    def category(self) -> AuditCategory:
        return AuditCategory.CUSTOM_DEFINITIONS

    def label(self) -> str:
        return "Custom metrics"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        metrics = bundle.custom_metrics
        n = len(metrics) if metrics else 0
        quota = f"{n} / {CUSTOM_METRIC_QUOTA}"
        if n == 0:
            return self.item(
                Status.MISSING,
                "None configured" if metrics is not None else "Not available",
                "Add custom metrics if you need to measure business-specific values.",
                quota=quota,
            )
        return self.item(Status.GOOD, f"{n} configured", "Custom metrics are in use.", quota=quota)


# Register on import
register_check(KeyEventsCheck())
register_check(CustomDimensionsCheck())
register_check(CustomMetricsCheck())
