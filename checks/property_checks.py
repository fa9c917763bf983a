# checks/property_checks.py
"""
Property settings checks:
1) Timezone set          -> critical if unset.
2) Currency set          -> critical if unset.
3) Industry category set -> warning if unset (affects benchmarking only).

Each check registers itself at import time.
"""

from __future__ import annotations

from core.interfaces import Check
from core.models import AuditCategory, AuditItem, ConfigurationBundle, Status
from core.registry import register_check


class TimezoneCheck(Check):
    def key(self) -> str:
        return "timezone"

    def category(self) -> AuditCategory:
        return AuditCategory.PROPERTY_SETTINGS

    def label(self) -> str:
        return "Timezone"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        tz = bundle.property_settings.time_zone
        if not tz:
            return self.item(
                Status.CRITICAL,
                "Not set",
                "Set the reporting timezone in Admin > Property Settings so daily reports line up with your business day.",
            )
        return self.item(Status.GOOD, tz, "Timezone is configured.")


class CurrencyCheck(Check):
    def key(self) -> str:
        return "currency"

    def category(self) -> AuditCategory:
        return AuditCategory.PROPERTY_SETTINGS

    def label(self) -> str:
        return "Currency"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        currency = bundle.property_settings.currency_code
        if not currency:
            return self.item(
                Status.CRITICAL,
                "Not set",
                "Set the reporting currency in Admin > Property Settings for accurate revenue tracking.",
            )
        return self.item(Status.GOOD, currency, "Currency is configured.")


class IndustryCategoryCheck(Check):
    def key(self) -> str:
        return "industryCategory"

    def category(self) -> AuditCategory:
        return AuditCategory.PROPERTY_SETTINGS

    def label(self) -> str:
        return "Industry category"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        industry = bundle.property_settings.industry_category
        if not industry:
            return self.item(
                Status.WARNING,
                "Not set",
                "Choose an industry category to enable relevant benchmarks.",
            )
        return self.item(Status.GOOD, industry.replace("_", " ").title(), "Industry category is configured.")


# Register on import
register_check(TimezoneCheck())
register_check(CurrencyCheck())
register_check(IndustryCategoryCheck())
