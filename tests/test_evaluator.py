from core.interfaces import Check
from core.models import AuditCategory, ConfigurationBundle, Status
from core.registry import checks
from services.evaluator import evaluate


class ExplodingCheck(Check):
    def key(self):
        return "exploding"

    def category(self):
        return AuditCategory.INTEGRATIONS

    def label(self):
        return "Exploding"

    def run(self, bundle):
        raise RuntimeError("boom")


def test_every_registered_check_produces_one_item(full_bundle):
    report = evaluate(full_bundle)
    assert len(report.items()) == len(checks()) == 19


def test_items_are_grouped_by_category(full_bundle):
    report = evaluate(full_bundle)
    assert list(report.categories) == [
        AuditCategory.PROPERTY_SETTINGS,
        AuditCategory.DATA_COLLECTION,
        AuditCategory.KEY_EVENTS,
        AuditCategory.CUSTOM_DEFINITIONS,
        AuditCategory.INTEGRATIONS,
    ]
    assert set(report.categories[AuditCategory.INTEGRATIONS]) == {
        "googleAds", "searchConsole", "bigQuery", "merchantCenter", "attribution",
    }


def test_full_bundle_has_no_critical_items(full_bundle):
    report = evaluate(full_bundle)
    assert report.count(Status.CRITICAL) == 0
    assert report.get(AuditCategory.DATA_COLLECTION, "dataRetention").status == Status.GOOD


def test_missing_link_list_is_reported_not_raised(full_payload):
    del full_payload["googleAdsLinks"]
    report = evaluate(ConfigurationBundle.from_dict(full_payload))
    assert report.get(AuditCategory.INTEGRATIONS, "googleAds").status == Status.MISSING


def test_empty_bundle_evaluates_without_error(empty_bundle):
    report = evaluate(empty_bundle)
    assert report.get(AuditCategory.PROPERTY_SETTINGS, "timezone").status == Status.CRITICAL
    assert report.get(AuditCategory.KEY_EVENTS, "keyEvents").status == Status.MISSING
    # enhanced measurement, PII, both referral checks, site search
    assert report.count(Status.UNKNOWN) == 5


def test_crashing_check_becomes_unknown_item(full_bundle):
    report = evaluate(full_bundle, checks=[ExplodingCheck()])
    item = report.get(AuditCategory.INTEGRATIONS, "exploding")
    assert item.status == Status.UNKNOWN
    assert item.value == "Check failed"
    assert item.details == "RuntimeError: boom"


def test_evaluation_is_deterministic(full_bundle):
    assert evaluate(full_bundle) == evaluate(full_bundle)
