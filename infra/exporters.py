# infra/exporters.py
"""
Writers for an AuditOutcome.

Exports:
- JSON (schema_version "1.0-ga4-audit"): property + score + recommendations
  + categorized items + comparison with the previous audit + data quality
- CSV items table: one row per audit item

Usage:
    from infra.exporters import JsonOutcomeWriter, ItemsCsvWriter
    JsonOutcomeWriter("audit.json").write(outcome)
    ItemsCsvWriter("items.csv").write(outcome)
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

from core.interfaces import OutcomeWriter
from core.models import AuditItem
from services.orchestrator import AuditOutcome

SCHEMA_VERSION = "1.0-ga4-audit"


def item_to_plain(item: AuditItem) -> Dict[str, Any]:
    return {
        "status": item.status.value,
        "label": item.label,
        "value": item.value,
        "recommendation": item.recommendation,
        "details": item.details,
        "quota": item.quota,
        "warnings": list(item.warnings),
    }


def outcome_to_plain(outcome: AuditOutcome) -> Dict[str, Any]:
    c = outcome.compliance
    return {
        "schema_version": SCHEMA_VERSION,
        "property": {"id": outcome.property_id, "name": outcome.property_name},
        "audited_at_utc": outcome.audited_at_utc.isoformat(),
        "score": c.score,
        "label": c.label,
        "satisfied": c.satisfied,
        "total": c.total,
        "priority_recommendations": [
            {"priority": r.priority.value, "text": r.text, "tag": r.tag.value}
            for r in c.recommendations
        ],
        "audit": {
            category.value: {key: item_to_plain(item) for key, item in group.items()}
            for category, group in outcome.report.categories.items()
        },
        "comparison": asdict(outcome.comparison),
        "data_quality": {
            "score": outcome.data_quality.score,
            "status": outcome.data_quality.status.value,
            "critical_issues": outcome.data_quality.critical_issues,
            "warnings": outcome.data_quality.warnings,
            "message": outcome.data_quality.message,
        },
    }


class JsonOutcomeWriter(OutcomeWriter):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def write(self, outcome: AuditOutcome) -> None:
        payload = outcome_to_plain(outcome)
        self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


class ItemsCsvWriter(OutcomeWriter):
    """
    Writes an item-level table:
    Category,Key,Label,Status,Value,Recommendation,Quota,Warnings
    """
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def write(self, outcome: AuditOutcome) -> None:
        with self.path.open("w", newline="", encoding="utf-8") as fp:
            w = csv.writer(fp)
            w.writerow(["Category", "Key", "Label", "Status", "Value", "Recommendation", "Quota", "Warnings"])
            for item in outcome.report.items():
                w.writerow([
                    item.category.value,
                    item.key,
                    item.label,
                    item.status.value,
                    item.value,
                    item.recommendation,
                    item.quota or "",
                    "; ".join(item.warnings),
                ])
