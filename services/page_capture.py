# services/page_capture.py
"""
Page capture: loads one URL in headless Chromium (Playwright) and records what
the Website Signal Extractor needs:
- every network request URL issued while the page loaded
- document.scripts as {src, text}
- the event name of every window.dataLayer entry that has one

The page load has a hard ceiling (config "scan_timeout_ms"). A timeout, an
unreachable host or a blocked navigation raises ScanNavigationError; nothing
partial is returned.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from core.errors import ScanNavigationError
from core.models import PageScan, ScriptSource, WebsiteScanResult
from infra.config_loader import load_config

from .signal_extractor import extract_signals

log = logging.getLogger(__name__)

# Runs inside the page.
_COLLECT_JS = """
() => ({
  scripts: Array.from(document.scripts).map(s => ({src: s.src || null, text: s.textContent || null})),
  dataLayer: Array.isArray(window.dataLayer)
    ? window.dataLayer
        .filter(e => e && typeof e === 'object' && !Array.isArray(e) && typeof e.event === 'string')
        .map(e => ({event: e.event}))
    : []
})
"""


class PlaywrightPageCollector:
    """
    Usage:
        collector = PlaywrightPageCollector(timeout_ms=30_000)
        scan = collector.capture("https://example.com")
    """

    def __init__(
        self,
        timeout_ms: Optional[int] = None,
        headless: Optional[bool] = None,
        wait_until: Optional[str] = None,
        playwright_factory=sync_playwright,
    ) -> None:
        cfg = load_config()
        self.timeout_ms = int(timeout_ms if timeout_ms is not None else cfg["scan_timeout_ms"])
        self.headless = cfg["scan_headless"] if headless is None else headless
        self.wait_until = wait_until or cfg["scan_wait_until"]
        self._playwright_factory = playwright_factory

    def capture(self, url: str) -> PageScan:
        url = normalize_url(url)
        requests: List[str] = []
        log.info("Loading %s (timeout %d ms)", url, self.timeout_ms)

        # Any Playwright failure (launch, navigation, a page that navigates
        # away while being read) becomes a ScanNavigationError.
        try:
            with self._playwright_factory() as pw:
                browser = pw.chromium.launch(headless=self.headless)
                try:
                    page = browser.new_page()
                    page.on("request", lambda request: requests.append(request.url))
                    collected = self._load(page, url)
                finally:
                    browser.close()
        except PlaywrightTimeoutError as exc:
            raise ScanNavigationError(url, "timed out", self.timeout_ms) from exc
        except PlaywrightError as exc:
            raise ScanNavigationError(url, _first_line(exc)) from exc

        scripts = tuple(
            ScriptSource(source_url=s.get("src"), text_content=s.get("text"))
            for s in collected.get("scripts") or []
        )
        events = tuple(e for e in collected.get("dataLayer") or [] if isinstance(e, dict))
        log.info("Captured %s: %d scripts, %d dataLayer events, %d requests", url, len(scripts), len(events), len(requests))
        return PageScan(
            url=url,
            document_scripts=scripts,
            data_layer_events=events,
            network_request_urls=tuple(requests),
        )

    def _load(self, page, url: str) -> Dict[str, Any]:
        response = page.goto(url, wait_until=self.wait_until, timeout=self.timeout_ms)
        if response is not None and response.status >= 400:
            raise ScanNavigationError(url, f"HTTP {response.status}")
        return page.evaluate(_COLLECT_JS)


def _first_line(exc: Exception) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else "navigation failed"


def normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ScanNavigationError(url, "no URL given")
    if "://" not in url:
        url = "https://" + url
    return url


def scan_website(url: str, collector=None) -> WebsiteScanResult:
    """Capture one page and extract its tracking signals."""
    collector = collector or PlaywrightPageCollector()
    return extract_signals(collector.capture(url))
