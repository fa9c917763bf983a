# services/signal_extractor.py
"""
Website Signal Extractor: infers tag-manager / GA4 installation signals from
what a single page loaded (scripts, data layer, network requests).

Each detector is independent and order-insensitive. Recommendations come from
SCAN_RULES, a fixed ordered checklist; every applicable entry is returned
(this path is advisory and not scored, so there is no cap).

No I/O here: the page itself is loaded by services.page_capture.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Callable, Iterable, List, Tuple
from urllib.parse import parse_qs, urlparse

from core.models import PageScan, WebsiteScanResult

GTM_LOADER = "googletagmanager.com/gtm.js"
GA4_COLLECT = "google-analytics.com/g/collect"
GA4_MEASUREMENT_ID = re.compile(r"G-[A-Z0-9]{10}")

CROSS_DOMAIN_MARKERS = ("linker", "cross_domain")
CONSENT_MARKERS = ("consent_mode", "ad_storage")
DEBUG_MARKERS = ("debug_mode",)
ECOMMERCE_EVENTS = frozenset({"purchase", "add_to_cart", "view_item"})

# (applies, recommendation) evaluated top-down
SCAN_RULES: Tuple[Tuple[Callable[[WebsiteScanResult], bool], str], ...] = (
    (lambda r: not r.gtm_containers, "Install Google Tag Manager container"),
    (lambda r: not r.ga4_properties, "Configure Google Analytics 4 property"),
    (lambda r: not r.cross_domain_tracking, "Set up cross-domain tracking if needed"),
    (lambda r: not r.consent_mode, "Implement Consent Mode v2 for privacy compliance"),
    (lambda r: r.debug_mode, "Disable debug mode in production"),
    (lambda r: not r.enhanced_ecommerce, "Enable Enhanced Ecommerce tracking"),
)


def gtm_containers(scan: PageScan) -> List[str]:
    found: List[str] = []
    for script in scan.document_scripts:
        src = script.source_url or ""
        if GTM_LOADER not in src:
            continue
        for container in parse_qs(urlparse(src).query).get("id", []):
            if container:
                found.append(container)
    return _unique(found)


def ga4_measurement_ids(scan: PageScan) -> List[str]:
    found: List[str] = []
    for text in _inline_texts(scan):
        found.extend(GA4_MEASUREMENT_ID.findall(text))
    return _unique(found)


def has_marker(scan: PageScan, markers: Iterable[str]) -> bool:
    markers = tuple(markers)
    return any(m in text for text in _inline_texts(scan) for m in markers)


def has_ecommerce_events(scan: PageScan) -> bool:
    for record in scan.data_layer_events:
        name = record.get("event") if hasattr(record, "get") else None
        if name in ECOMMERCE_EVENTS:
            return True
    return False


def recommendations_for(result: WebsiteScanResult) -> Tuple[str, ...]:
    return tuple(text for applies, text in SCAN_RULES if applies(result))


def extract_signals(scan: PageScan) -> WebsiteScanResult:
    signals = WebsiteScanResult(
        domain=urlparse(scan.url).netloc or scan.url,
        gtm_containers=tuple(gtm_containers(scan)),
        ga4_properties=tuple(ga4_measurement_ids(scan)),
        cross_domain_tracking=has_marker(scan, CROSS_DOMAIN_MARKERS),
        consent_mode=has_marker(scan, CONSENT_MARKERS),
        debug_mode=has_marker(scan, DEBUG_MARKERS),
        enhanced_ecommerce=has_ecommerce_events(scan),
        collect_requests=sum(1 for u in scan.network_request_urls if GA4_COLLECT in u),
    )
    return replace(signals, recommendations=recommendations_for(signals))


# ---------- helpers ----------

def _inline_texts(scan: PageScan) -> List[str]:
    return [s.text_content for s in scan.document_scripts if s.text_content]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out
