# services/history.py
"""
Score History Tracker: remembers the latest compliance score per property and
compares a new score against it.

Persistence goes through a KeyValueStore (see infra.storage). The stored value
is a JSON array in this schema:

    [{"propertyId": str, "propertyName": str, "score": int,
      "timestamp": int (ms epoch), "date": str}]

Invariants:
- at most one entry per propertyId; saving replaces, never appends a duplicate
- a value that cannot be parsed is treated as empty history and is
  overwritten by the next save
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from core.errors import MalformedHistoryError
from core.interfaces import KeyValueStore
from core.models import ScoreComparison, ScoreHistoryEntry

log = logging.getLogger(__name__)

HISTORY_KEY = "ga4-score-history"
MS_PER_DAY = 24 * 60 * 60 * 1000

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_audit_date(moment: datetime) -> str:
    """US-style display date, e.g. "Oct 19, 2026, 03:16 PM" (local time)."""
    local = moment.astimezone()
    return f"{local:%b} {local.day}, {local:%Y}, {local:%I:%M %p}"


def parse_history(raw: Optional[str]) -> List[ScoreHistoryEntry]:
    """
    Decode a stored history value. None/empty -> [].
    Raises MalformedHistoryError for anything that is not a list of entries.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedHistoryError(f"history is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise MalformedHistoryError("history must be a JSON array")
    try:
        return [ScoreHistoryEntry.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedHistoryError(f"history entry is invalid: {exc}") from exc


class ScoreHistoryTracker:
    """
    Usage:
        tracker = ScoreHistoryTracker(JsonFileStore(path))
        comparison = tracker.get_score_comparison("123", 95)
        tracker.save_score("123", "Acme", 95)
    """

    def __init__(self, store: KeyValueStore, key: str = HISTORY_KEY, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._key = key
        self._clock = clock or _utc_now

    def entries(self) -> List[ScoreHistoryEntry]:
        try:
            return parse_history(self._store.get(self._key))
        except MalformedHistoryError as exc:
            log.warning("Discarding score history: %s", exc)
            return []

    def save_score(self, property_id: str, property_name: str, score: int) -> ScoreHistoryEntry:
        now = self._clock()
        entry = ScoreHistoryEntry(
            property_id=str(property_id),
            property_name=property_name,
            score=int(score),
            timestamp=int(now.timestamp() * 1000),
            date=format_audit_date(now),
        )
        kept = [e for e in self.entries() if e.property_id != entry.property_id]
        kept.append(entry)
        self._store.set(self._key, json.dumps([e.to_dict() for e in kept]))
        log.info("Score saved: property=%s name=%s score=%d", entry.property_id, property_name, entry.score)
        return entry

    def get_previous_score(self, property_id: str) -> Optional[ScoreHistoryEntry]:
        for entry in self.entries():
            if entry.property_id == str(property_id):
                return entry
        return None

    def get_score_comparison(self, property_id: str, current_score: int) -> ScoreComparison:
        previous = self.get_previous_score(property_id)
        if previous is None:
            return ScoreComparison(current_score=current_score)

        now_ms = int(self._clock().timestamp() * 1000)
        change = current_score - previous.score
        return ScoreComparison(
            current_score=current_score,
            previous_score=previous.score,
            score_change=change,
            improvement=change > 0,
            last_audit_date=previous.date,
            days_since_last_audit=(now_ms - previous.timestamp) // MS_PER_DAY,
        )

    def get_history_for_property(self, property_id: str) -> List[ScoreHistoryEntry]:
        return [e for e in self.entries() if e.property_id == str(property_id)]

    def clear_history(self) -> None:
        """Irreversibly drop every stored score."""
        self._store.clear(self._key)
        log.info("Score history cleared")
