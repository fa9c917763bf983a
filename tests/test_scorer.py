import pytest

import services.scorer as scorer
from core.models import ConfigurationBundle, Priority, RecommendationTag, Status
from services.scorer import compute_score, data_quality, priority_recommendations, score_bundle, score_label


def test_full_bundle_scores_100(full_bundle):
    result = score_bundle(full_bundle)
    assert result.score == 100
    assert result.satisfied == result.total == 8
    assert result.label == "Excellent Setup"
    assert result.recommendations == ()


def test_empty_bundle_scores_0(empty_bundle):
    result = score_bundle(empty_bundle)
    assert result.score == 0
    assert result.label == "Needs Critical Fixes"


@pytest.mark.parametrize("payload, expected", [
    # 1 of 8 -> 12.5 rounds half up
    ({"property": {"timeZone": "UTC", "currencyCode": "EUR"}}, 13),
    # 3 of 8 -> 37.5
    ({"property": {"timeZone": "UTC", "currencyCode": "EUR"},
      "dataRetention": {"eventDataRetention": "FOURTEEN_MONTHS"},
      "keyEvents": [{"eventName": "purchase"}]}, 38),
    # 4 of 8
    ({"googleAdsLinks": [{}], "searchConsoleLinks": [{}], "customDimensions": [{}],
      "attribution": {"reportingAttributionModel": "GOOGLE_PAID_CHANNELS_LAST_CLICK"}}, 50),
])
def test_partial_scores_round_half_up(payload, expected):
    assert compute_score(ConfigurationBundle.from_dict(payload)) == expected


def test_timezone_alone_is_not_property_config():
    assert compute_score(ConfigurationBundle.from_dict({"property": {"timeZone": "UTC"}})) == 0


@pytest.mark.parametrize("score, label", [
    (100, "Excellent Setup"), (90, "Excellent Setup"), (89, "Good Foundation"),
    (70, "Good Foundation"), (69, "Needs Critical Fixes"), (0, "Needs Critical Fixes"),
])
def test_score_labels(score, label):
    assert score_label(score) == label


def test_score_is_deterministic(full_payload):
    full_payload["keyEvents"] = []
    bundle = ConfigurationBundle.from_dict(full_payload)
    assert score_bundle(bundle) == score_bundle(bundle)
    assert 0 <= score_bundle(bundle).score <= 100


def test_recommendations_are_capped_at_four(empty_bundle):
    recs = priority_recommendations(empty_bundle)
    assert len(recs) == 4
    assert [r.tag for r in recs] == [
        RecommendationTag.DATA_RETENTION,
        RecommendationTag.PROPERTY_SETTINGS,
        RecommendationTag.KEY_EVENTS,
        RecommendationTag.ADVERTISING,
    ]


def test_zero_key_events_gives_single_critical(full_payload):
    full_payload["keyEvents"] = []
    recs = priority_recommendations(ConfigurationBundle.from_dict(full_payload))
    assert len(recs) == 1
    assert recs[0].priority == Priority.CRITICAL
    assert recs[0].text == "Configure key events for conversion tracking"


def test_two_custom_dimensions_trigger_recommendation(full_payload):
    full_payload["customDimensions"] = full_payload["customDimensions"][:2]
    recs = priority_recommendations(ConfigurationBundle.from_dict(full_payload))
    assert [r.tag for r in recs] == [RecommendationTag.CUSTOM_DEFINITIONS]
    assert recs[0].priority == Priority.IMPORTANT


def test_critical_recommendations_come_first_regardless_of_rule_order(monkeypatch, full_payload):
    monkeypatch.setattr(scorer, "PRIORITY_RULES", tuple(reversed(scorer.PRIORITY_RULES)))
    full_payload["keyEvents"] = []
    del full_payload["googleAdsLinks"]
    recs = priority_recommendations(ConfigurationBundle.from_dict(full_payload))
    assert [r.priority for r in recs] == [Priority.CRITICAL, Priority.IMPORTANT]


def test_clean_bundle_has_full_data_quality(full_bundle):
    dq = data_quality(full_bundle)
    assert dq.score == 100
    assert dq.status == Status.GOOD
    assert dq.message == "Data quality checks passed"


def test_bundle_without_quality_inputs_is_not_penalised(empty_bundle):
    assert data_quality(empty_bundle).score == 100


def test_data_quality_penalties_add_up(full_payload):
    full_payload["pagePaths"] = ["/checkout?email=jane@example.com", "/r?kw=boots"]
    full_payload["searchTerms"] = []
    full_payload["siteSearchEvents"] = 12
    full_payload["trafficSources"] = [
        {"source": "paypal.com", "medium": "referral", "sessions": 9},
        {"source": "www.acme.example", "medium": "referral", "sessions": 4},
    ]
    dq = data_quality(ConfigurationBundle.from_dict(full_payload))
    # PII critical 25, payment referral 20, self-referral 10, search needs config 15
    assert dq.score == 30
    assert dq.critical_issues == 2
    assert dq.warnings == 2
    assert dq.status == Status.CRITICAL


def test_high_severity_pii_is_a_warning(full_payload):
    full_payload["pagePaths"] = ["/account?user_id=991"]
    dq = data_quality(ConfigurationBundle.from_dict(full_payload))
    assert dq.score == 85
    assert (dq.critical_issues, dq.warnings, dq.status) == (0, 1, Status.WARNING)


def test_data_quality_does_not_change_compliance_score(full_payload):
    full_payload["pagePaths"] = ["/checkout?email=jane@example.com"]
    assert score_bundle(ConfigurationBundle.from_dict(full_payload)).score == 100
