# checks/integration_checks.py
"""
Integration checks:
1) Google Ads, Search Console, BigQuery, Merchant Center links
   -> good when at least one link exists, missing otherwise (absent field
      included). No partial states.
2) Attribution model -> good for data-driven, warning for any other model,
   missing when unset.
"""

from __future__ import annotations

from typing import Optional, Tuple

from core.interfaces import Check
from core.models import AuditCategory, AuditItem, ConfigurationBundle, ExternalLink, Status
from core.registry import register_check

from .policies import DATA_DRIVEN_ATTRIBUTION


class _LinkCheck(Check):
    """Shared presence rule; concrete subclasses name the link list."""

    _key = ""
    _label = ""
    _connect_hint = ""

    def key(self) -> str:
        return self._key

    def category(self) -> AuditCategory:
        return AuditCategory.INTEGRATIONS

    def label(self) -> str:
        return self._label

    def links(self, bundle: ConfigurationBundle) -> Optional[Tuple[ExternalLink, ...]]:
        raise NotImplementedError

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        links = self.links(bundle)
        if not links:
            return self.item(Status.MISSING, "Not linked", self._connect_hint)
        names = [link.name for link in links if link.name]
        return self.item(
            Status.GOOD,
            f"Linked ({len(links)})",
            f"{self._label} is connected.",
            details=", ".join(names) or None,
        )


class GoogleAdsLinkCheck(_LinkCheck):
    _key = "googleAds"
    _label = "Google Ads"
    _connect_hint = "Link Google Ads to import conversions and build remarketing audiences."

    def links(self, bundle):
        return bundle.google_ads_links


class SearchConsoleLinkCheck(_LinkCheck):
    _key = "searchConsole"
    _label = "Search Console"
    _connect_hint = "Link Search Console to see organic search queries next to on-site behaviour."

    def links(self, bundle):
        return bundle.search_console_links


class BigQueryLinkCheck(_LinkCheck):
    _key = "bigQuery"
    _label = "BigQuery"
    _connect_hint = "Consider a BigQuery export for raw event data and long-term storage."

    def links(self, bundle):
        return bundle.bigquery_links


class MerchantCenterLinkCheck(_LinkCheck):
    _key = "merchantCenter"
    _label = "Merchant Center"
    _connect_hint = "Link Merchant Center for product-level ecommerce insights."

    def links(self, bundle):
        return bundle.merchant_center_links


class AttributionModelCheck(Check):
    def key(self) -> str:
        return "attribution"

    def category(self) -> AuditCategory:
        return AuditCategory.INTEGRATIONS

    def label(self) -> str:
        return "Attribution model"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        model = bundle.attribution_model
        if not model:
            return self.item(
                Status.MISSING,
                "Not available",
                "Review the reporting attribution model in Admin > Attribution Settings.",
            )
        pretty = model.replace("_", " ").title()
        if model == DATA_DRIVEN_ATTRIBUTION:
            return self.item(Status.GOOD, pretty, "Data-driven attribution is in use.")
        return self.item(
            Status.WARNING,
            pretty,
            "Switch to data-driven attribution unless you have a specific reason for another model.",
        )


# Register on import
register_check(GoogleAdsLinkCheck())
register_check(SearchConsoleLinkCheck())
register_check(BigQueryLinkCheck())
register_check(MerchantCenterLinkCheck())
register_check(AttributionModelCheck())
