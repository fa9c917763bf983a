# core/interfaces.py
"""
Stable abstractions the rest of the app depends on.
High-level code (the evaluator, the orchestrator, the UI) imports only these
interfaces, not concrete checks, browsers or storage backends.

Design notes (SOLID):
- SRP: Each interface has one clear purpose.
- OCP: New checks plug in by implementing Check and registering themselves.
- DIP: History logic depends on KeyValueStore, not on a file or a browser.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol

from .models import AuditCategory, AuditItem, ConfigurationBundle, PageScan

__all__ = ["Check", "KeyValueStore", "PageCollector", "OutcomeWriter"]


class Check(ABC):
    """
    A single read-only audit rule that inspects a ConfigurationBundle
    and returns an AuditItem. Keep implementations side-effect free.
    """

    @abstractmethod
    def key(self) -> str:
        """
        Stable identifier inside the category, e.g. "dataRetention".
        Used as the item key in the AuditReport and in exports.
        """
        raise NotImplementedError

    @abstractmethod
    def category(self) -> AuditCategory:
        raise NotImplementedError

    @abstractmethod
    def label(self) -> str:
        """Short human-friendly name, e.g. "Data retention"."""
        raise NotImplementedError

    @abstractmethod
    def run(self, bundle: ConfigurationBundle) -> AuditItem:
        """
        Evaluate the rule on the given bundle.
        Must not raise for absent data: encode it as a missing/unknown item.
        """
        raise NotImplementedError

    # convenience for subclasses
    def item(self, status, value: str, recommendation: str, **extra) -> AuditItem:
        return AuditItem(
            key=self.key(),
            category=self.category(),
            label=self.label(),
            status=status,
            value=value,
            recommendation=recommendation,
            **extra,
        )


class KeyValueStore(Protocol):
    """
    Durable string storage keyed by name (a local JSON file, a browser's
    localStorage bridge, a dict in tests).
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def clear(self, key: str) -> None:
        ...


class PageCollector(Protocol):
    """Loads one page and reports what it saw. Raises ScanNavigationError on failure."""

    def capture(self, url: str) -> PageScan:
        ...


class OutcomeWriter(Protocol):
    def write(self, outcome) -> None: ...
