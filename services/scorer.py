# services/scorer.py
"""
Compliance Scorer.

score = round(satisfied / 8 * 100) over the equal-weight SCORE_RUBRIC.
Every rubric entry contributes exactly one unit; there is no partial credit
and no business-impact weighting.

Priority recommendations come from PRIORITY_RULES: critical rules are
appended before important ones, then the list is cut to the first four.

Both functions are pure: the same bundle always yields the same score and
the same list, in the same order.

data_quality() is a separate 0-100 score for collected-data hygiene; it never
changes the compliance score.
"""

from __future__ import annotations

import math
from typing import List, Tuple

from checks.collection_checks import find_pii, pii_severity
from checks.policies import (
    DATA_QUALITY_PENALTIES,
    MAX_PRIORITY_RECOMMENDATIONS,
    PRIORITY_ORDER,
    PRIORITY_RULES,
    SCORE_LABELS,
    SCORE_RUBRIC,
    RubricEntry,
)
from checks.quality_checks import referral_summary, site_search_state
from core.models import (
    ComplianceResult,
    ConfigurationBundle,
    DataQualityResult,
    PriorityRecommendation,
    Status,
)


def satisfied_checks(bundle: ConfigurationBundle) -> List[RubricEntry]:
    return [entry for entry in SCORE_RUBRIC if entry.satisfied(bundle)]


def compute_score(bundle: ConfigurationBundle) -> int:
    """Integer 0-100. Halves round up (4/8 -> 50, 1/8 -> 13)."""
    satisfied = len(satisfied_checks(bundle))
    return int(math.floor(satisfied / len(SCORE_RUBRIC) * 100 + 0.5))


def score_label(score: int) -> str:
    for floor, label in SCORE_LABELS:
        if score >= floor:
            return label
    return SCORE_LABELS[-1][1]


def priority_recommendations(bundle: ConfigurationBundle) -> Tuple[PriorityRecommendation, ...]:
    out: List[PriorityRecommendation] = []
    for priority in PRIORITY_ORDER:
        for rule in PRIORITY_RULES:
            if rule.priority == priority and rule.applies(bundle):
                out.append(PriorityRecommendation(priority=rule.priority, text=rule.text, tag=rule.tag))
    return tuple(out[:MAX_PRIORITY_RECOMMENDATIONS])


def score_bundle(bundle: ConfigurationBundle) -> ComplianceResult:
    satisfied = len(satisfied_checks(bundle))
    score = compute_score(bundle)
    return ComplianceResult(
        score=score,
        label=score_label(score),
        satisfied=satisfied,
        total=len(SCORE_RUBRIC),
        recommendations=priority_recommendations(bundle),
    )


def data_quality(bundle: ConfigurationBundle) -> DataQualityResult:
    """
    Combined data-quality score from PII exposure, referral traffic and site
    search. Each issue deducts its DATA_QUALITY_PENALTIES entry; floor 0.
    Inputs the bundle lacks deduct nothing.
    """
    score, critical, warnings = 100, 0, 0

    severity = pii_severity(find_pii(bundle.page_paths or ()))
    if severity is not None:
        score -= DATA_QUALITY_PENALTIES[f"pii_{severity}"]
        if severity == "critical":
            critical += 1
        elif severity == "high":
            warnings += 1

    referrals = referral_summary(bundle.traffic_sources)
    if referrals["unwanted_referrals"]:
        score -= DATA_QUALITY_PENALTIES["unwanted_referrals"]
        critical += 1
    if referrals["cross_domain"]:
        score -= DATA_QUALITY_PENALTIES["cross_domain"]
        warnings += 1

    state = site_search_state(bundle)
    if state in DATA_QUALITY_PENALTIES:
        score -= DATA_QUALITY_PENALTIES[state]
        warnings += 1

    if critical:
        status, message = Status.CRITICAL, f"{critical} critical data quality issue(s) found"
    elif warnings:
        status, message = Status.WARNING, f"{warnings} data quality warning(s) found"
    else:
        status, message = Status.GOOD, "Data quality checks passed"
    return DataQualityResult(
        score=max(0, score),
        critical_issues=critical,
        warnings=warnings,
        status=status,
        message=message,
    )
