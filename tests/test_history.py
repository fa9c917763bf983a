import json
import re
from datetime import timedelta

import pytest

from core.errors import MalformedHistoryError
from infra.storage import InMemoryStore
from services.history import HISTORY_KEY, ScoreHistoryTracker, format_audit_date, parse_history


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def tracker(store, clock):
    return ScoreHistoryTracker(store, clock=clock)


def test_unknown_property_has_empty_comparison(tracker):
    cmp = tracker.get_score_comparison("999", 70)
    assert cmp.current_score == 70
    assert cmp.previous_score is None
    assert cmp.score_change is None
    assert cmp.improvement is None
    assert cmp.last_audit_date is None
    assert cmp.days_since_last_audit is None


def test_save_replaces_previous_entry(tracker, store):
    tracker.save_score("123", "Acme", 80)
    tracker.save_score("123", "Acme", 95)
    stored = json.loads(store.get(HISTORY_KEY))
    assert len(stored) == 1
    assert stored[0]["score"] == 95


def test_comparison_against_saved_score(tracker, clock):
    tracker.save_score("123", "Acme", 80)
    clock.now += timedelta(days=3)
    cmp = tracker.get_score_comparison("123", 95)
    assert cmp.previous_score == 80
    assert cmp.score_change == 15
    assert cmp.improvement is True
    assert cmp.days_since_last_audit == 3


def test_unchanged_score_is_not_an_improvement(tracker):
    tracker.save_score("123", "Acme", 80)
    cmp = tracker.get_score_comparison("123", 80)
    assert cmp.score_change == 0
    assert cmp.improvement is False


def test_days_since_last_audit_rounds_down(tracker, clock):
    tracker.save_score("123", "Acme", 80)
    clock.now += timedelta(days=2, hours=23, minutes=59)
    assert tracker.get_score_comparison("123", 60).days_since_last_audit == 2


def test_properties_are_tracked_independently(tracker):
    tracker.save_score("123", "Acme", 80)
    tracker.save_score("456", "Beta", 40)
    tracker.save_score("123", "Acme", 90)
    assert {e.property_id: e.score for e in tracker.entries()} == {"123": 90, "456": 40}
    assert [e.score for e in tracker.get_history_for_property("456")] == [40]


def test_saved_entry_has_timestamp_and_display_date(tracker, clock):
    entry = tracker.save_score("123", "Acme", 80)
    assert entry.timestamp == int(clock.now.timestamp() * 1000)
    assert re.fullmatch(r"[A-Z][a-z]{2} \d{1,2}, \d{4}, \d{2}:\d{2} (AM|PM)", entry.date)
    assert tracker.get_previous_score("123") == entry


@pytest.mark.parametrize("raw", ["not json", '{"propertyId": "123"}', '[{"score": 5}]', '[1, 2]'])
def test_malformed_history_reads_as_empty(raw, clock):
    store = InMemoryStore({HISTORY_KEY: raw})
    tracker = ScoreHistoryTracker(store, clock=clock)
    assert tracker.entries() == []
    assert tracker.get_score_comparison("123", 50).previous_score is None

    tracker.save_score("123", "Acme", 50)
    assert len(json.loads(store.get(HISTORY_KEY))) == 1


def test_parse_history_raises_on_garbage():
    with pytest.raises(MalformedHistoryError):
        parse_history("{")
    assert parse_history(None) == []
    assert parse_history("") == []


def test_clear_history(tracker, store):
    tracker.save_score("123", "Acme", 80)
    tracker.clear_history()
    assert store.get(HISTORY_KEY) is None
    assert tracker.get_previous_score("123") is None


def test_custom_storage_key(store, clock):
    tracker = ScoreHistoryTracker(store, key="other", clock=clock)
    tracker.save_score("1", "One", 10)
    assert store.get("other") is not None
    assert store.get(HISTORY_KEY) is None


def test_format_audit_date_pads_hour(clock):
    text = format_audit_date(clock.now)
    assert text.count(",") == 2
    assert text.endswith(("AM", "PM"))
