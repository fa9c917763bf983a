# checks/quality_checks.py
"""
Data-quality checks over report data the collector adds to the bundle:
1) Unwanted referrals     -> critical when payment processors show up as
                             referral sources (checkout returns start a new
                             session and steal the conversion).
2) Cross-domain referrals -> warning when the site's own hosts show up as
                             referrals.
3) Site search            -> compares captured search terms and
                             view_search_results counts with search
                             parameters found in page paths.

Absent inputs give an "unknown" item. Each check registers itself at import time.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence
from urllib.parse import unquote

from core.interfaces import Check
from core.models import AuditCategory, AuditItem, ConfigurationBundle, Status, TrafficSource
from core.registry import register_check

from .policies import (
    CUSTOM_SEARCH_PARAMS,
    NOT_SET,
    PAYMENT_PROCESSORS,
    REFERRAL_MEDIUM,
    SELF_REFERRAL_MARKERS,
    SELF_REFERRAL_MAX_BOUNCE,
    SELF_REFERRAL_MIN_SESSIONS,
    SiteSearchState,
)

_UNWANTED_REFERRALS_PATH = "Admin > Data Streams > [Stream] > Configure tag settings > List unwanted referrals"
_CROSS_DOMAIN_PATH = "Admin > Data Streams > [Stream] > Configure tag settings > Configure your domains"
_SITE_SEARCH_PATH = "Admin > Data Streams > [Stream] > Enhanced measurement > Site search"


# ---------- referral helpers ----------

def _is_referral(source: TrafficSource) -> bool:
    return (source.medium or "").lower() == REFERRAL_MEDIUM


def payment_referrals(sources: Sequence[TrafficSource]) -> List[TrafficSource]:
    return [
        s for s in sources
        if _is_referral(s) and any(p in s.source.lower() for p in PAYMENT_PROCESSORS)
    ]


def self_referrals(sources: Sequence[TrafficSource]) -> List[TrafficSource]:
    """
    Referral rows that look like the site's own hosts. Rows already counted
    as payment referrals are left out.
    """
    payments = set(payment_referrals(sources))
    out = []
    for s in sources:
        if not _is_referral(s) or s in payments:
            continue
        host = s.source.lower()
        looks_internal = any(m in host for m in SELF_REFERRAL_MARKERS)
        continues_session = s.bounce_rate < SELF_REFERRAL_MAX_BOUNCE and s.sessions > SELF_REFERRAL_MIN_SESSIONS
        if looks_internal or continues_session:
            out.append(s)
    return out


def _sessions(sources: Sequence[TrafficSource]) -> int:
    return sum(s.sessions for s in sources)


class UnwantedReferralsCheck(Check):
    def key(self) -> str:
        return "unwantedReferrals"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "Unwanted referrals"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        sources = bundle.traffic_sources
        if sources is None:
            return self.item(Status.UNKNOWN, "Not checked", "Traffic sources were not provided.")

        found = payment_referrals(sources)
        if not found:
            return self.item(Status.GOOD, "None detected", "No payment processor referrals detected.")
        return self.item(
            Status.CRITICAL,
            f"{len(found)} payment processor(s), {_sessions(found)} session(s)",
            f"Add these domains to the unwanted referrals list in {_UNWANTED_REFERRALS_PATH}.",
            details=", ".join(s.source for s in found),
        )


class CrossDomainReferralsCheck(Check):
    def key(self) -> str:
        return "crossDomainReferrals"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "Self-referrals"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        sources = bundle.traffic_sources
        if sources is None:
            return self.item(Status.UNKNOWN, "Not checked", "Traffic sources were not provided.")

        found = self_referrals(sources)
        if not found:
            return self.item(Status.GOOD, "None detected", "No obvious cross-domain tracking issues detected.")
        return self.item(
            Status.WARNING,
            f"{len(found)} suspicious referral(s), {_sessions(found)} session(s)",
            f"If these are your own domains, set up cross-domain tracking in {_CROSS_DOMAIN_PATH}.",
            details=", ".join(s.source for s in found),
        )


# ---------- site search ----------

def custom_search_params(paths: Sequence[str]) -> Dict[str, int]:
    """
    {parameter: occurrences} for search parameters enhanced measurement does
    not read by default, most frequent first.
    """
    counts: Dict[str, int] = {}
    for path in paths:
        for entry in CUSTOM_SEARCH_PARAMS:
            for m in entry.pattern.finditer(path):
                value = unquote(m.groups()[-1] or "")
                if value and value != NOT_SET:
                    counts[entry.param] = counts.get(entry.param, 0) + 1
    return dict(sorted(counts.items(), key=lambda kv: -kv[1]))


def site_search_state(bundle: ConfigurationBundle) -> SiteSearchState:
    if bundle.search_terms is None and bundle.site_search_events is None and bundle.page_paths is None:
        return SiteSearchState.UNKNOWN

    has_terms = any(t.term != NOT_SET for t in bundle.search_terms or ())
    has_events = (bundle.site_search_events or 0) > 0
    has_custom = bool(custom_search_params(bundle.page_paths or ()))

    if has_terms:
        return SiteSearchState.PARTIAL if has_custom else SiteSearchState.OPTIMAL
    if has_events and has_custom:
        return SiteSearchState.NEEDS_CONFIG
    if has_custom:
        return SiteSearchState.MISSED_OPPORTUNITY
    if has_events:
        return SiteSearchState.PARTIAL
    return SiteSearchState.NONE


class SiteSearchCheck(Check):
    def key(self) -> str:
        return "siteSearch"

    def category(self) -> AuditCategory:
        return AuditCategory.DATA_COLLECTION

    def label(self) -> str:
        return "Site search tracking"

    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        state = site_search_state(bundle)
        if state == SiteSearchState.UNKNOWN:
            return self.item(
                Status.UNKNOWN,
                "Not checked",
                "Search terms, search events and page paths were not provided.",
            )

        params = list(custom_search_params(bundle.page_paths or ()))
        terms = [t for t in bundle.search_terms or () if t.term != NOT_SET]
        top = ", ".join(params[:3])
        warnings = tuple(f"Custom search parameter: {p}" for p in params[:5])

        if state == SiteSearchState.OPTIMAL:
            return self.item(
                Status.GOOD,
                f"{len(terms)} search term(s) captured",
                "Search tracking is working; no custom search parameters detected.",
            )
        if state == SiteSearchState.NONE:
            return self.item(
                Status.GOOD,
                "No search activity",
                "No search activity detected; this is normal for a site without search.",
            )
        if state == SiteSearchState.PARTIAL and terms:
            value = f"{len(terms)} term(s), {len(params)} untracked parameter(s)"
            recommendation = f"Add the custom search parameters ({top}) to site search in {_SITE_SEARCH_PATH}."
        elif state == SiteSearchState.PARTIAL:
            value = f"{bundle.site_search_events} search event(s), no terms"
            recommendation = f"Search events arrive without search terms; check the query parameters in {_SITE_SEARCH_PATH}."
        elif state == SiteSearchState.NEEDS_CONFIG:
            value = f"{bundle.site_search_events} search event(s), no terms"
            recommendation = f"Add the custom search parameters ({top}) in {_SITE_SEARCH_PATH} or track them with a custom event."
        else:
            value = f"{len(params)} untracked parameter(s)"
            recommendation = f"Turn on site search in {_SITE_SEARCH_PATH} with the parameters {top}, or add custom event tracking."
        return self.item(Status.WARNING, value, recommendation, details=state.value, warnings=warnings)


def referral_summary(sources: Optional[Sequence[TrafficSource]]) -> Dict[str, int]:
    """Counts used by the data-quality score; zero when no traffic rows exist."""
    sources = sources or ()
    return {
        "unwanted_referrals": len(payment_referrals(sources)),
        "cross_domain": len(self_referrals(sources)),
    }


# Register on import
register_check(UnwantedReferralsCheck())
register_check(CrossDomainReferralsCheck())
register_check(SiteSearchCheck())
