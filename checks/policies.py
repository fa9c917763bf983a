# checks/policies.py
"""
Policy tables for the GA4 audit (kept as data so the rule set itself can be
inspected and tested without running a check).

Contents:
- thresholds used by the item checks (retention, key events, custom definitions)
- SCORE_RUBRIC: the fixed 8-point compliance rubric (equal weight, no partial credit)
- PRIORITY_RULES: ordered (predicate -> recommendation) entries
- PII_PATTERNS: URL-parameter patterns used by the PII exposure check
- referral and site-search tables used by the data-quality checks
- DATA_QUALITY_PENALTIES: deductions for the combined data-quality score

Every predicate takes a ConfigurationBundle and treats absent fields as
"not satisfied". Predicates never raise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from core.models import ConfigurationBundle, Priority, RecommendationTag

# ---------- thresholds ----------

REQUIRED_RETENTION = "FOURTEEN_MONTHS"
DEFAULT_RETENTION = "TWO_MONTHS"

RETENTION_LABELS = {
    "TWO_MONTHS": "2 months",
    "FOURTEEN_MONTHS": "14 months",
    "TWENTY_SIX_MONTHS": "26 months",
    "THIRTY_EIGHT_MONTHS": "38 months",
    "FIFTY_MONTHS": "50 months",
}

KEY_EVENT_QUOTA = 50
CUSTOM_DIMENSION_QUOTA = 50
CUSTOM_METRIC_QUOTA = 50

# 0 key events is critical, exactly this many is a single point of failure.
SINGLE_KEY_EVENT = 1

# Heuristic minimum for business-specific tracking.
MIN_CUSTOM_DIMENSIONS = 3

DATA_DRIVEN_ATTRIBUTION = "PAID_AND_ORGANIC_CHANNELS_DATA_DRIVEN"
GOOGLE_SIGNALS_ENABLED = "GOOGLE_SIGNALS_ENABLED"

MAX_PRIORITY_RECOMMENDATIONS = 4

# (min score, label), checked top-down
SCORE_LABELS: Tuple[Tuple[int, str], ...] = (
    (90, "Excellent Setup"),
    (70, "Good Foundation"),
    (0, "Needs Critical Fixes"),
)


# ---------- predicates ----------

Predicate = Callable[[ConfigurationBundle], bool]


def count(values: Optional[Sequence]) -> int:
    """Length of an optional bundle list; absent counts as zero."""
    return len(values) if values else 0


def has_property_config(b: ConfigurationBundle) -> bool:
    return bool(b.property_settings.time_zone and b.property_settings.currency_code)


def has_full_retention(b: ConfigurationBundle) -> bool:
    return b.event_data_retention == REQUIRED_RETENTION


def has_enhanced_measurement(b: ConfigurationBundle) -> bool:
    return count(b.enhanced_measurement) > 0


def has_key_events(b: ConfigurationBundle) -> bool:
    return count(b.key_events) >= 1


def has_custom_dimensions(b: ConfigurationBundle) -> bool:
    return count(b.custom_dimensions) > 0


def has_google_ads(b: ConfigurationBundle) -> bool:
    return count(b.google_ads_links) > 0


def has_search_console(b: ConfigurationBundle) -> bool:
    return count(b.search_console_links) > 0


def has_attribution_model(b: ConfigurationBundle) -> bool:
    return bool(b.attribution_model)


# ---------- compliance rubric ----------

@dataclass(frozen=True)
class RubricEntry:
    key: str
    label: str
    satisfied: Predicate


SCORE_RUBRIC: Tuple[RubricEntry, ...] = (
    RubricEntry("propertyConfig", "Property configuration", has_property_config),
    RubricEntry("dataRetention", "Data retention", has_full_retention),
    RubricEntry("enhancedMeasurement", "Enhanced measurement", has_enhanced_measurement),
    RubricEntry("keyEvents", "Key events", has_key_events),
    RubricEntry("customDefinitions", "Custom definitions", has_custom_dimensions),
    RubricEntry("googleAds", "Google Ads link", has_google_ads),
    RubricEntry("searchConsole", "Search Console link", has_search_console),
    RubricEntry("attributionModel", "Attribution model", has_attribution_model),
)


# ---------- priority recommendations ----------

@dataclass(frozen=True)
class PriorityRule:
    applies: Predicate
    priority: Priority
    text: str
    tag: RecommendationTag


PRIORITY_RULES: Tuple[PriorityRule, ...] = (
    PriorityRule(
        lambda b: not has_full_retention(b),
        Priority.CRITICAL,
        "Change data retention from 2 months to 14 months immediately",
        RecommendationTag.DATA_RETENTION,
    ),
    PriorityRule(
        lambda b: not b.property_settings.time_zone,
        Priority.CRITICAL,
        "Set property timezone for accurate daily reporting",
        RecommendationTag.PROPERTY_SETTINGS,
    ),
    PriorityRule(
        lambda b: count(b.key_events) == 0,
        Priority.CRITICAL,
        "Configure key events for conversion tracking",
        RecommendationTag.KEY_EVENTS,
    ),
    PriorityRule(
        lambda b: not has_google_ads(b),
        Priority.IMPORTANT,
        "Link Google Ads for conversion import and Smart Bidding",
        RecommendationTag.ADVERTISING,
    ),
    PriorityRule(
        lambda b: count(b.custom_dimensions) < MIN_CUSTOM_DIMENSIONS,
        Priority.IMPORTANT,
        "Add custom dimensions for business-specific tracking",
        RecommendationTag.CUSTOM_DEFINITIONS,
    ),
    PriorityRule(
        lambda b: not has_search_console(b),
        Priority.IMPORTANT,
        "Connect Search Console for organic search insights",
        RecommendationTag.SEARCH,
    ),
)

# Evaluation order of priority groups.
PRIORITY_ORDER: Tuple[Priority, ...] = (Priority.CRITICAL, Priority.IMPORTANT)


# ---------- PII exposure ----------

@dataclass(frozen=True)
class PiiPattern:
    kind: str
    severity: str           # critical | high | medium
    pattern: "re.Pattern[str]"
    description: str


PII_PATTERNS: Tuple[PiiPattern, ...] = (
    PiiPattern(
        "email", "critical",
        re.compile(r"(?:[?&]|^)([^=&]*(?:email|e-?mail|user-?email)[^=&]*)=([^&]*@[^&]*)", re.I),
        "Email addresses in URL parameters",
    ),
    PiiPattern(
        "phone", "critical",
        re.compile(
            r"(?:[?&]|^)([^=&]*(?:phone|tel|mobile|cell)[^=&]*)="
            r"([^&]*(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}[^&]*)",
            re.I,
        ),
        "Phone numbers in URL parameters",
    ),
    PiiPattern(
        "ssn", "critical",
        re.compile(r"(?:[?&]|^)([^=&]*(?:ssn|social|security)[^=&]*)=([^&]*\d{3}-?\d{2}-?\d{4}[^&]*)", re.I),
        "Social Security Numbers in URL parameters",
    ),
    PiiPattern(
        "creditCard", "critical",
        re.compile(
            r"(?:[?&]|^)([^=&]*(?:card|cc|credit)[^=&]*)="
            r"([^&]*(?:4\d{3}|5[1-5]\d{2}|3[47]\d{2}|6011)[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}[^&]*)",
            re.I,
        ),
        "Credit card numbers in URL parameters",
    ),
    PiiPattern(
        "userId", "high",
        re.compile(r"(?:[?&]|^)([^=&]*(?:user[-_]?id|customer[-_]?id|member[-_]?id|uid)[^=&]*)=([^&]*\d+[^&]*)", re.I),
        "User/Customer IDs in URL parameters",
    ),
    PiiPattern(
        "names", "high",
        re.compile(r"(?:[?&]|^)([^=&]*(?:name|first[-_]?name|last[-_]?name|full[-_]?name|fname|lname)[^=&]*)=([^&]{2,})", re.I),
        "Personal names in URL parameters",
    ),
    PiiPattern(
        "addresses", "medium",
        re.compile(r"(?:[?&]|^)([^=&]*(?:address|street|zip|postal|city)[^=&]*)=([^&]{5,})", re.I),
        "Address information in URL parameters",
    ),
)


# ---------- referral traffic ----------

REFERRAL_MEDIUM = "referral"

# Checkout services that should be on the unwanted-referrals list.
PAYMENT_PROCESSORS: Tuple[str, ...] = (
    "paypal.com", "stripe.com", "square.com", "checkout.com",
    "authorize.net", "braintreepayments.com", "dwolla.com",
    "affirm.com", "klarna.com", "afterpay.com", "sezzle.com",
    "shop.app", "shopify.com", "amazon.com", "ebay.com",
)

# Referral hosts that usually belong to the site itself.
SELF_REFERRAL_MARKERS: Tuple[str, ...] = ("www.", "shop.", "blog.", "app.", "portal.")

# A referral that almost never bounces and has real volume looks like the
# same session continuing on another of the site's domains.
SELF_REFERRAL_MAX_BOUNCE = 0.1
SELF_REFERRAL_MIN_SESSIONS = 5


# ---------- site search ----------

NOT_SET = "(not set)"


@dataclass(frozen=True)
class SearchParamPattern:
    param: str
    pattern: "re.Pattern[str]"
    category: str


def _param(name: str, category: str) -> SearchParamPattern:
    return SearchParamPattern(name, re.compile(rf"[?&]({re.escape(name)})=([^&]+)", re.I), category)


def _path(name: str, segment: str) -> SearchParamPattern:
    return SearchParamPattern(name, re.compile(rf"/{segment}/([^/?&]+)", re.I), "path_based")


# Search parameters outside the ones enhanced measurement reads by default
# (q, s, search, query, keyword).
CUSTOM_SEARCH_PARAMS: Tuple[SearchParamPattern, ...] = (
    _param("search_term", "custom"),
    _param("searchterm", "custom"),
    _param("SearchTerm", "camelCase"),
    _param("search-term", "hyphenated"),
    _param("kw", "abbreviated"),
    _param("k", "abbreviated"),
    _param("word", "alternative"),
    _param("find", "alternative"),
    _param("lookup", "alternative"),
    _param("filter", "filtering"),
    _param("criteria", "advanced"),
    _param("product_search", "ecommerce"),
    _param("item_search", "ecommerce"),
    _param("catalog_search", "ecommerce"),
    _param("wp_search", "wordpress"),
    _param("drupal_search", "drupal"),
    _param("shopify_search", "shopify"),
    _path("path_search", "search"),
    _path("search_path", "find"),
    _path("lookup_path", "lookup"),
)


class SiteSearchState(Enum):
    OPTIMAL = "optimal"                         # terms captured, no custom parameters
    PARTIAL = "partial"                         # terms or events, but something is missed
    NEEDS_CONFIG = "needs_config"               # events, no terms, custom parameters in URLs
    MISSED_OPPORTUNITY = "missed_opportunity"   # custom parameters only
    NONE = "none"                               # no search activity at all
    UNKNOWN = "unknown"                         # collector supplied none of the inputs


# ---------- combined data-quality score ----------

DATA_QUALITY_PENALTIES = {
    "pii_critical": 25,
    "pii_high": 15,
    "pii_medium": 5,
    "unwanted_referrals": 20,
    "cross_domain": 10,
    SiteSearchState.MISSED_OPPORTUNITY: 10,
    SiteSearchState.NEEDS_CONFIG: 15,
}
