# core/models.py
"""
Plain data shapes for the app (no UI, no API clients, no I/O).
These are the "contracts" that checks, the scorer and the UI speak.

Design goals:
- Minimal and framework-agnostic (easy to test and reason about).
- Immutable where it matters: a bundle is a snapshot taken at audit time and
  every re-audit builds a new one.
- Absent data is represented as None, never as an exception. A list field that
  was fetched but came back empty is an empty tuple.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Status(Enum):
    """
    Outcome of a single audit item. The UI styles these consistently
    (good in green, warning in amber, critical/missing in red).
    """
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    MISSING = "missing"
    UNKNOWN = "unknown"


class AuditCategory(Enum):
    PROPERTY_SETTINGS = "propertySettings"
    DATA_COLLECTION = "dataCollection"
    CUSTOM_DEFINITIONS = "customDefinitions"
    KEY_EVENTS = "keyEvents"
    INTEGRATIONS = "integrations"


class Priority(Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"


class RecommendationTag(Enum):
    """
    Symbolic category attached to a priority recommendation.
    The rendering layer maps tags to icons; the core never references visuals.
    """
    DATA_RETENTION = "data_retention"
    PROPERTY_SETTINGS = "property_settings"
    KEY_EVENTS = "key_events"
    ADVERTISING = "advertising"
    CUSTOM_DEFINITIONS = "custom_definitions"
    SEARCH = "search"


# ---------------- configuration bundle ----------------

@dataclass(frozen=True)
class PropertySettings:
    display_name: Optional[str] = None
    name: Optional[str] = None              # resource name, e.g. "properties/123"
    time_zone: Optional[str] = None
    currency_code: Optional[str] = None
    industry_category: Optional[str] = None


@dataclass(frozen=True)
class DataStream:
    name: Optional[str] = None
    display_name: Optional[str] = None
    type: Optional[str] = None
    default_uri: Optional[str] = None


@dataclass(frozen=True)
class EnhancedMeasurementSettings:
    """
    Enhanced measurement flags for one data stream.
    `flags` is None when the collector returned the stream without settings.
    """
    stream_id: Optional[str] = None
    stream_name: Optional[str] = None
    flags: Optional[Tuple[Tuple[str, bool], ...]] = None

    @property
    def stream_enabled(self) -> Optional[bool]:
        if self.flags is None:
            return None
        return dict(self.flags).get("streamEnabled")


@dataclass(frozen=True)
class KeyEvent:
    event_name: str
    counting_method: Optional[str] = None
    create_time: Optional[str] = None


@dataclass(frozen=True)
class CustomDefinition:
    display_name: Optional[str] = None
    parameter_name: Optional[str] = None
    scope: Optional[str] = None


@dataclass(frozen=True)
class ExternalLink:
    """One linked product (Google Ads account, BigQuery project, ...)."""
    name: Optional[str] = None
    raw: Tuple[Tuple[str, Any], ...] = ()


@dataclass(frozen=True)
class TrafficSource:
    """One session source / medium row (last 30 days)."""
    source: str
    medium: Optional[str] = None
    sessions: int = 0
    bounce_rate: float = 0.0
    avg_session_duration: float = 0.0


@dataclass(frozen=True)
class SearchTerm:
    term: str
    users: int = 0


@dataclass(frozen=True)
class ConfigurationBundle:
    """
    Read-only snapshot of one GA4 property's settings at audit time.

    Built once per audit run from the collector's JSON (see from_dict).
    Every optional field follows the same rule: None means "the collector did
    not provide it", an empty tuple means "provided, and there are none".
    """
    property_settings: PropertySettings = field(default_factory=PropertySettings)
    event_data_retention: Optional[str] = None
    user_data_retention: Optional[str] = None
    data_streams: Optional[Tuple[DataStream, ...]] = None
    enhanced_measurement: Optional[Tuple[EnhancedMeasurementSettings, ...]] = None
    key_events: Optional[Tuple[KeyEvent, ...]] = None
    custom_dimensions: Optional[Tuple[CustomDefinition, ...]] = None
    custom_metrics: Optional[Tuple[CustomDefinition, ...]] = None
    google_ads_links: Optional[Tuple[ExternalLink, ...]] = None
    search_console_links: Optional[Tuple[ExternalLink, ...]] = None
    bigquery_links: Optional[Tuple[ExternalLink, ...]] = None
    merchant_center_links: Optional[Tuple[ExternalLink, ...]] = None
    attribution_model: Optional[str] = None
    google_signals_state: Optional[str] = None
    page_paths: Optional[Tuple[str, ...]] = None
    traffic_sources: Optional[Tuple[TrafficSource, ...]] = None
    search_terms: Optional[Tuple[SearchTerm, ...]] = None
    site_search_events: Optional[int] = None     # view_search_results count

    @property
    def property_id(self) -> Optional[str]:
        """Numeric id from the resource name ("properties/123" -> "123")."""
        name = self.property_settings.name
        if not name:
            return None
        return name.rsplit("/", 1)[-1]

    @property
    def identity(self) -> Optional[str]:
        """Key for history and the in-flight guard; None when the bundle names no property."""
        return self.property_id or self.property_settings.display_name

    @property
    def property_name(self) -> str:
        return self.property_settings.display_name or self.property_id or "Unnamed property"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ConfigurationBundle":
        """
        Build a bundle from the collector's camelCase JSON. Never raises for
        missing keys; unexpected shapes (e.g. a dict where a list belongs) are
        treated as absent.
        """
        payload = payload or {}
        prop = _mapping(payload.get("property"))
        retention = _mapping(payload.get("dataRetention"))
        attribution = _mapping(payload.get("attribution"))
        signals = _mapping(payload.get("googleSignals"))

        return cls(
            property_settings=PropertySettings(
                display_name=_text(prop.get("displayName")),
                name=_text(prop.get("name")),
                time_zone=_text(prop.get("timeZone")),
                currency_code=_text(prop.get("currencyCode")),
                industry_category=_text(prop.get("industryCategory")),
            ),
            event_data_retention=_text(retention.get("eventDataRetention")),
            user_data_retention=_text(retention.get("userDataRetention")),
            data_streams=_records(payload.get("dataStreams"), _stream),
            enhanced_measurement=_records(payload.get("enhancedMeasurement"), _enhanced),
            key_events=_records(payload.get("keyEvents"), _key_event),
            custom_dimensions=_records(payload.get("customDimensions"), _definition),
            custom_metrics=_records(payload.get("customMetrics"), _definition),
            google_ads_links=_records(payload.get("googleAdsLinks"), _link),
            search_console_links=_search_console(payload),
            bigquery_links=_records(payload.get("bigQueryLinks"), _link),
            merchant_center_links=_records(payload.get("merchantCenterLinks"), _link),
            attribution_model=_text(attribution.get("reportingAttributionModel")),
            google_signals_state=_text(signals.get("state")),
            page_paths=_strings(payload.get("pagePaths")),
            traffic_sources=_records(payload.get("trafficSources"), _traffic_source),
            search_terms=_search_terms(payload.get("searchTerms")),
            site_search_events=_count(payload.get("siteSearchEvents")),
        )


# ---------------- audit output ----------------

@dataclass(frozen=True)
class AuditItem:
    """
    Outcome of evaluating one dimension of a bundle.

    Fields:
    - key: stable identifier inside its category (e.g. "dataRetention").
    - value: the observed setting as display text.
    - recommendation: advisory text for the user.
    - details/quota/warnings: optional extras the checklist can show.
    """
    key: str
    category: AuditCategory
    label: str
    status: Status
    value: str
    recommendation: str
    details: Optional[str] = None
    quota: Optional[str] = None
    warnings: Tuple[str, ...] = ()


@dataclass
class AuditReport:
    """
    Items grouped by category. Mutable while the evaluator fills it,
    in check registration order.
    """
    categories: Dict[AuditCategory, Dict[str, AuditItem]] = field(default_factory=dict)

    def add(self, item: AuditItem) -> None:
        self.categories.setdefault(item.category, {})[item.key] = item

    def items(self) -> List[AuditItem]:
        return [item for group in self.categories.values() for item in group.values()]

    def get(self, category: AuditCategory, key: str) -> Optional[AuditItem]:
        return self.categories.get(category, {}).get(key)

    def count(self, status: Status) -> int:
        return sum(1 for item in self.items() if item.status == status)


@dataclass(frozen=True)
class PriorityRecommendation:
    priority: Priority
    text: str
    tag: RecommendationTag


@dataclass(frozen=True)
class ComplianceResult:
    score: int
    label: str
    satisfied: int
    total: int
    recommendations: Tuple[PriorityRecommendation, ...] = ()


@dataclass(frozen=True)
class DataQualityResult:
    """Combined data-quality score: 100 minus the penalties of the issues found."""
    score: int
    critical_issues: int
    warnings: int
    status: Status
    message: str


# ---------------- website scan ----------------

@dataclass(frozen=True)
class ScriptSource:
    source_url: Optional[str] = None
    text_content: Optional[str] = None


@dataclass(frozen=True)
class PageScan:
    """What the page-capture collector saw while loading a single page."""
    url: str
    document_scripts: Tuple[ScriptSource, ...] = ()
    data_layer_events: Tuple[Mapping[str, Any], ...] = ()
    network_request_urls: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WebsiteScanResult:
    domain: str
    gtm_containers: Tuple[str, ...] = ()
    ga4_properties: Tuple[str, ...] = ()
    cross_domain_tracking: bool = False
    consent_mode: bool = False
    debug_mode: bool = False
    enhanced_ecommerce: bool = False
    collect_requests: int = 0
    recommendations: Tuple[str, ...] = ()

    @property
    def gtm_installed(self) -> bool:
        return bool(self.gtm_containers)

    @property
    def ga4_connected(self) -> bool:
        return bool(self.ga4_properties)


# ---------------- score history ----------------

@dataclass(frozen=True)
class ScoreHistoryEntry:
    property_id: str
    property_name: str
    score: int
    timestamp: int      # ms since epoch
    date: str           # human readable, e.g. "Oct 19, 2026, 03:16 PM"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertyId": self.property_id,
            "propertyName": self.property_name,
            "score": self.score,
            "timestamp": self.timestamp,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ScoreHistoryEntry":
        # KeyError/TypeError/ValueError bubble up; the tracker treats them as corruption.
        return cls(
            property_id=str(raw["propertyId"]),
            property_name=str(raw.get("propertyName") or ""),
            score=int(raw["score"]),
            timestamp=int(raw["timestamp"]),
            date=str(raw.get("date") or ""),
        )


@dataclass(frozen=True)
class ScoreComparison:
    current_score: int
    previous_score: Optional[int] = None
    score_change: Optional[int] = None
    improvement: Optional[bool] = None
    last_audit_date: Optional[str] = None
    days_since_last_audit: Optional[int] = None


# -------- helpers (module-internal) --------

def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _records(value: Any, build) -> Optional[Tuple[Any, ...]]:
    if not isinstance(value, (list, tuple)):
        return None
    return tuple(build(_mapping(v)) for v in value)


def _strings(value: Any) -> Optional[Tuple[str, ...]]:
    if not isinstance(value, (list, tuple)):
        return None
    return tuple(str(v) for v in value if v is not None)


def _stream(raw: Mapping[str, Any]) -> DataStream:
    web = _mapping(raw.get("webStreamData"))
    return DataStream(
        name=_text(raw.get("name")),
        display_name=_text(raw.get("displayName")),
        type=_text(raw.get("type")),
        default_uri=_text(web.get("defaultUri")),
    )


def _enhanced(raw: Mapping[str, Any]) -> EnhancedMeasurementSettings:
    settings = raw.get("settings")
    flags = None
    if isinstance(settings, Mapping) and settings:
        flags = tuple(sorted((str(k), bool(v)) for k, v in settings.items() if v is not None))
    return EnhancedMeasurementSettings(
        stream_id=_text(raw.get("streamId")),
        stream_name=_text(raw.get("streamName")),
        flags=flags,
    )


def _key_event(raw: Mapping[str, Any]) -> KeyEvent:
    return KeyEvent(
        event_name=_text(raw.get("eventName")) or "(unnamed)",
        counting_method=_text(raw.get("countingMethod")),
        create_time=_text(raw.get("createTime")),
    )


def _definition(raw: Mapping[str, Any]) -> CustomDefinition:
    return CustomDefinition(
        display_name=_text(raw.get("displayName")),
        parameter_name=_text(raw.get("parameterName")),
        scope=_text(raw.get("scope")),
    )


def _link(raw: Mapping[str, Any]) -> ExternalLink:
    name = raw.get("name") or raw.get("customerId") or raw.get("project") or raw.get("siteUrl")
    return ExternalLink(
        name=_text(name),
        raw=tuple(sorted((str(k), v) for k, v in raw.items() if isinstance(v, (str, int, float, bool)))),
    )


def _search_console(payload: Mapping[str, Any]) -> Optional[Tuple[ExternalLink, ...]]:
    """
    Search Console arrives either as a plain link list or as the dashboard's
    status object {isLinked, linkDetails}.
    """
    links = _records(payload.get("searchConsoleLinks"), _link)
    if links is not None:
        return links
    status = payload.get("searchConsoleDataStatus")
    if not isinstance(status, Mapping):
        return None
    if not status.get("isLinked"):
        return ()
    details = _records(status.get("linkDetails"), _link)
    return details or (ExternalLink(name="search-console"),)


def _number(value: Any, cast, default):
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


def _count(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    n = _number(value, int, None)
    return None if n is None or n < 0 else n


def _traffic_source(raw: Mapping[str, Any]) -> TrafficSource:
    return TrafficSource(
        source=_text(raw.get("source")) or "(not set)",
        medium=_text(raw.get("medium")),
        sessions=_number(raw.get("sessions"), int, 0),
        bounce_rate=_number(raw.get("bounceRate"), float, 0.0),
        avg_session_duration=_number(raw.get("avgSessionDuration"), float, 0.0),
    )


def _search_terms(value: Any) -> Optional[Tuple[SearchTerm, ...]]:
    """Accepts [{"term", "users"}] rows or bare strings."""
    if not isinstance(value, (list, tuple)):
        return None
    out = []
    for v in value:
        if isinstance(v, Mapping):
            term = _text(v.get("term") or v.get("searchTerm"))
            users = _number(v.get("users"), int, 0)
        else:
            term, users = _text(v), 0
        if term:
            out.append(SearchTerm(term=term, users=users))
    return tuple(out)
