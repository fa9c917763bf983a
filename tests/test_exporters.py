import csv
import json

import pytest

from infra.exporters import SCHEMA_VERSION, ItemsCsvWriter, JsonOutcomeWriter, outcome_to_plain
from infra.storage import InMemoryStore
from services.history import ScoreHistoryTracker
from services.orchestrator import AuditOrchestrator


@pytest.fixture
def outcome(clock, full_bundle):
    return AuditOrchestrator(ScoreHistoryTracker(InMemoryStore(), clock=clock)).run_audit(full_bundle)


def test_plain_outcome_shape(outcome):
    plain = outcome_to_plain(outcome)
    assert plain["schema_version"] == SCHEMA_VERSION
    assert plain["property"] == {"id": "123", "name": "Acme Store"}
    assert plain["score"] == 100
    assert plain["audit"]["dataCollection"]["dataRetention"]["status"] == "good"
    assert plain["comparison"]["previous_score"] is None
    assert plain["data_quality"] == {
        "score": 100, "status": "good", "critical_issues": 0, "warnings": 0,
        "message": "Data quality checks passed",
    }


def test_json_writer(tmp_path, outcome):
    path = tmp_path / "audit.json"
    JsonOutcomeWriter(path).write(outcome)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["label"] == "Excellent Setup"
    assert data["priority_recommendations"] == []


def test_csv_writer_has_one_row_per_item(tmp_path, outcome):
    path = tmp_path / "items.csv"
    ItemsCsvWriter(path).write(outcome)
    with path.open(newline="", encoding="utf-8") as fp:
        rows = list(csv.DictReader(fp))
    assert len(rows) == len(outcome.report.items())
    key_events = next(r for r in rows if r["Key"] == "keyEvents")
    assert key_events["Quota"] == "2 / 50"
    assert key_events["Status"] == "good"
