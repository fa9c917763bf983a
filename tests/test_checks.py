import pytest

from checks.collection_checks import (
    DataRetentionCheck,
    DataStreamsCheck,
    EnhancedMeasurementCheck,
    GoogleSignalsCheck,
    PiiExposureCheck,
    find_pii,
    stream_status,
)
from checks.definition_checks import CustomDimensionsCheck, CustomMetricsCheck, KeyEventsCheck
from checks.integration_checks import (
    AttributionModelCheck,
    BigQueryLinkCheck,
    GoogleAdsLinkCheck,
    MerchantCenterLinkCheck,
    SearchConsoleLinkCheck,
)
from checks.property_checks import CurrencyCheck, IndustryCategoryCheck, TimezoneCheck
from core.models import AuditCategory, ConfigurationBundle, Status


def bundle(**payload):
    return ConfigurationBundle.from_dict(payload)


@pytest.mark.parametrize("retention, expected", [
    ("FOURTEEN_MONTHS", Status.GOOD),
    ("TWO_MONTHS", Status.CRITICAL),
    ("TWENTY_SIX_MONTHS", Status.CRITICAL),
    (None, Status.CRITICAL),
])
def test_data_retention(retention, expected):
    payload = {} if retention is None else {"dataRetention": {"eventDataRetention": retention}}
    item = DataRetentionCheck().run(bundle(**payload))
    assert item.status == expected
    assert item.category == AuditCategory.DATA_COLLECTION


def test_two_month_default_is_labelled():
    item = DataRetentionCheck().run(bundle(dataRetention={"eventDataRetention": "TWO_MONTHS"}))
    assert item.value == "2 months (default)"


def test_timezone_and_currency_unset_are_critical(empty_bundle):
    assert TimezoneCheck().run(empty_bundle).status == Status.CRITICAL
    assert CurrencyCheck().run(empty_bundle).status == Status.CRITICAL


def test_timezone_and_currency_set_are_good(full_bundle):
    assert TimezoneCheck().run(full_bundle).status == Status.GOOD
    assert CurrencyCheck().run(full_bundle).value == "USD"


def test_industry_category(empty_bundle, full_bundle):
    assert IndustryCategoryCheck().run(empty_bundle).status == Status.WARNING
    assert IndustryCategoryCheck().run(full_bundle).value == "Shopping"


@pytest.mark.parametrize("count, expected", [(0, Status.CRITICAL), (1, Status.WARNING), (2, Status.GOOD), (5, Status.GOOD)])
def test_key_event_thresholds(count, expected):
    events = [{"eventName": f"e{i}", "countingMethod": "ONCE_PER_EVENT"} for i in range(count)]
    item = KeyEventsCheck().run(bundle(keyEvents=events))
    assert item.status == expected
    assert item.quota == f"{count} / 50"


def test_key_events_absent_is_missing(empty_bundle):
    assert KeyEventsCheck().run(empty_bundle).status == Status.MISSING


def test_key_events_without_counting_method_are_flagged():
    item = KeyEventsCheck().run(bundle(keyEvents=[{"eventName": "purchase"}, {"eventName": "sign_up"}]))
    assert item.status == Status.GOOD
    assert item.warnings == ("purchase: counting method not set", "sign_up: counting method not set")


@pytest.mark.parametrize("count, expected", [(0, Status.WARNING), (2, Status.WARNING), (3, Status.GOOD), (7, Status.GOOD)])
def test_custom_dimension_minimum(count, expected):
    dims = [{"displayName": f"d{i}"} for i in range(count)]
    assert CustomDimensionsCheck().run(bundle(customDimensions=dims)).status == expected


def test_custom_metrics(empty_bundle, full_bundle):
    assert CustomMetricsCheck().run(empty_bundle).status == Status.MISSING
    assert CustomMetricsCheck().run(full_bundle).status == Status.GOOD


@pytest.mark.parametrize("check", [GoogleAdsLinkCheck(), SearchConsoleLinkCheck(), BigQueryLinkCheck(), MerchantCenterLinkCheck()])
def test_links_absent_are_missing(check, empty_bundle):
    item = check.run(empty_bundle)
    assert item.status == Status.MISSING
    assert item.category == AuditCategory.INTEGRATIONS


def test_links_present_are_good(full_bundle):
    assert GoogleAdsLinkCheck().run(full_bundle).status == Status.GOOD
    assert SearchConsoleLinkCheck().run(full_bundle).status == Status.GOOD
    assert BigQueryLinkCheck().run(full_bundle).details == "properties/123/bigQueryLinks/1"
    assert MerchantCenterLinkCheck().run(full_bundle).status == Status.MISSING


def test_attribution_model():
    assert AttributionModelCheck().run(bundle()).status == Status.MISSING
    assert AttributionModelCheck().run(
        bundle(attribution={"reportingAttributionModel": "GOOGLE_PAID_CHANNELS_LAST_CLICK"})
    ).status == Status.WARNING
    assert AttributionModelCheck().run(
        bundle(attribution={"reportingAttributionModel": "PAID_AND_ORGANIC_CHANNELS_DATA_DRIVEN"})
    ).status == Status.GOOD


def test_data_streams():
    assert DataStreamsCheck().run(bundle()).status == Status.MISSING
    assert DataStreamsCheck().run(bundle(dataStreams=[])).status == Status.CRITICAL
    assert DataStreamsCheck().run(bundle(dataStreams=[{"displayName": "Web"}])).status == Status.GOOD


def test_google_signals(empty_bundle, full_bundle):
    assert GoogleSignalsCheck().run(full_bundle).status == Status.GOOD
    assert GoogleSignalsCheck().run(empty_bundle).status == Status.MISSING


def test_enhanced_measurement_missing_data_is_unknown():
    assert EnhancedMeasurementCheck().run(bundle()).status == Status.UNKNOWN
    assert EnhancedMeasurementCheck().run(bundle(enhancedMeasurement=[])).status == Status.UNKNOWN


def test_enhanced_measurement_takes_worst_stream():
    item = EnhancedMeasurementCheck().run(bundle(enhancedMeasurement=[
        {"streamName": "Web", "settings": {"streamEnabled": True}},
        {"streamName": "Blog", "settings": {"streamEnabled": False}},
    ]))
    assert item.status == Status.WARNING
    assert item.value == "1 of 2 stream(s) enabled"
    assert item.warnings == ("Blog: enhanced measurement is turned off",)


def test_enhanced_measurement_lists_disabled_features():
    item = EnhancedMeasurementCheck().run(bundle(enhancedMeasurement=[
        {"streamName": "Web", "settings": {"streamEnabled": True, "scrollsEnabled": False}},
    ]))
    assert item.status == Status.GOOD
    assert item.warnings == ("Web: disabled features: Scrolls",)


def test_stream_status_without_toggle_is_unknown():
    b = bundle(enhancedMeasurement=[{"settings": {"scrollsEnabled": True}}])
    assert stream_status(b.enhanced_measurement[0]) == Status.UNKNOWN


def test_find_pii_kinds():
    found = find_pii([
        "/signup?email=jane@example.com",
        "/account?user_id=12345",
        "/products",
    ])
    assert found == {"email": ["/signup?email=jane@example.com"], "userId": ["/account?user_id=12345"]}


def test_pii_statuses():
    assert PiiExposureCheck().run(bundle()).status == Status.UNKNOWN
    assert PiiExposureCheck().run(bundle(pagePaths=["/", "/products?id=7"])).status == Status.GOOD
    assert PiiExposureCheck().run(bundle(pagePaths=["/a?customer_id=991"])).status == Status.WARNING
    critical = PiiExposureCheck().run(bundle(pagePaths=["/checkout?email=jane@example.com"]))
    assert critical.status == Status.CRITICAL
    assert critical.value == "1 of 1 URL(s) expose PII"
