import copy
from datetime import datetime, timezone

import pytest

from core.models import ConfigurationBundle

FULL_PAYLOAD = {
    "property": {
        "displayName": "Acme Store",
        "name": "properties/123",
        "timeZone": "America/New_York",
        "currencyCode": "USD",
        "industryCategory": "SHOPPING",
    },
    "dataRetention": {"eventDataRetention": "FOURTEEN_MONTHS", "userDataRetention": "FOURTEEN_MONTHS"},
    "dataStreams": [
        {"name": "properties/123/dataStreams/1", "displayName": "Web", "type": "WEB_DATA_STREAM",
         "webStreamData": {"defaultUri": "https://acme.example"}},
    ],
    "enhancedMeasurement": [
        {"streamId": "1", "streamName": "Web",
         "settings": {"streamEnabled": True, "scrollsEnabled": True, "siteSearchEnabled": True}},
    ],
    "keyEvents": [
        {"eventName": "purchase", "countingMethod": "ONCE_PER_EVENT"},
        {"eventName": "generate_lead", "countingMethod": "ONCE_PER_SESSION"},
    ],
    "customDimensions": [
        {"displayName": "Plan", "parameterName": "plan", "scope": "EVENT"},
        {"displayName": "Author", "parameterName": "author", "scope": "EVENT"},
        {"displayName": "Tier", "parameterName": "tier", "scope": "USER"},
    ],
    "customMetrics": [{"displayName": "Margin", "parameterName": "margin", "scope": "EVENT"}],
    "googleAdsLinks": [{"name": "properties/123/googleAdsLinks/9", "customerId": "1234567890"}],
    "searchConsoleDataStatus": {"isLinked": True, "linkDetails": [{"siteUrl": "https://acme.example"}]},
    "bigQueryLinks": [{"name": "properties/123/bigQueryLinks/1", "project": "acme-analytics"}],
    "merchantCenterLinks": [],
    "attribution": {"reportingAttributionModel": "PAID_AND_ORGANIC_CHANNELS_DATA_DRIVEN"},
    "googleSignals": {"state": "GOOGLE_SIGNALS_ENABLED"},
    "pagePaths": ["/", "/products?id=7", "/search?q=shoes"],
    "trafficSources": [
        {"source": "google", "medium": "organic", "sessions": 1200, "bounceRate": 0.42, "avgSessionDuration": 81.5},
        {"source": "news.example.org", "medium": "referral", "sessions": 40, "bounceRate": 0.55, "avgSessionDuration": 60.0},
    ],
    "searchTerms": [{"term": "shoes", "users": 30}, {"term": "(not set)", "users": 4}],
    "siteSearchEvents": 55,
}


@pytest.fixture
def full_payload():
    return copy.deepcopy(FULL_PAYLOAD)


@pytest.fixture
def full_bundle(full_payload):
    return ConfigurationBundle.from_dict(full_payload)


@pytest.fixture
def empty_bundle():
    return ConfigurationBundle.from_dict({})


class FakeClock:
    """Settable clock for history tests."""

    def __init__(self, start=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()
