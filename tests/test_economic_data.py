"""
Tests for the economic data provider and its persistence helpers.
"""

import pytest
import requests
from datetime import date, datetime, timedelta

from borrowcalc.config import Settings
from borrowcalc.db.models import EconomicIndicator
from borrowcalc.services.economic_data import (
    EconomicData,
    EconomicDataService,
    load_latest_economic_data,
    load_latest_exchange_rates,
    store_economic_data,
    store_exchange_rates,
)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Routes GETs to canned payloads keyed by URL (and FRED series id)."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, timeout=None, params=None, headers=None):
        self.calls.append((url, params, headers))
        key = url
        if params and "series_id" in params:
            key = (url, params["series_id"])
        route = self.routes.get(key)
        if route is None:
            raise requests.ConnectionError("no route")
        if isinstance(route, Exception):
            raise route
        return route


@pytest.fixture
def settings():
    return Settings(api_ninjas_key="ninja", fred_api_key="fred", economic_data_cache_minutes=5)


def live_routes(settings):
    fred = settings.fred_observations_url
    return {
        settings.api_ninjas_url: FakeResponse([{"country": "United States", "yearly_rate_pct": 3.4}]),
        (fred, "MORTGAGE30US"): FakeResponse(
            {"observations": [{"date": "2024-02-01", "value": "6.63"}]}
        ),
        (fred, "TERMCBAUTO48NS"): FakeResponse(
            {"observations": [{"value": "."}, {"value": "7.92"}]}
        ),
        (fred, "TERMCBPER24NS"): FakeResponse(
            {"observations": [{"value": "12.35"}]}
        ),
        settings.exchange_rate_url: FakeResponse(
            {"base": "USD", "rates": {"USD": 1, "EUR": 0.92, "GBP": "0.79", "JPY": None}}
        ),
    }


class TestFetching:
    """Test provider requests and response parsing."""

    def test_all_fields_live(self, settings):
        service = EconomicDataService(settings, session=FakeSession(live_routes(settings)))
        data = service.fetch_live()
        assert data.inflation == 3.4
        assert data.mortgage_rate == 6.63
        assert data.personal_rate == 12.35
        assert data.source == "api"

    def test_fred_skips_missing_observations(self, settings):
        service = EconomicDataService(settings, session=FakeSession(live_routes(settings)))
        assert service.fetch_fred_rate("TERMCBAUTO48NS") == 7.92

    def test_inflation_request_sends_key(self, settings):
        session = FakeSession(live_routes(settings))
        EconomicDataService(settings, session=session).fetch_inflation()
        url, params, headers = session.calls[0]
        assert params == {"country": "US"}
        assert headers == {"X-Api-Key": "ninja"}

    def test_no_keys_uses_fallbacks_without_requests(self):
        session = FakeSession({})
        service = EconomicDataService(Settings(api_ninjas_key="", fred_api_key=""), session=session)
        data = service.fetch_live()
        assert (data.inflation, data.mortgage_rate, data.auto_rate, data.personal_rate) == (
            3.2, 7.5, 6.5, 11.5,
        )
        assert data.source == "fallback"
        assert session.calls == []

    def test_network_error_falls_back_per_field(self, settings):
        routes = live_routes(settings)
        routes[settings.api_ninjas_url] = requests.Timeout("slow")
        routes[(settings.fred_observations_url, "TERMCBPER24NS")] = FakeResponse({}, status_code=500)
        service = EconomicDataService(settings, session=FakeSession(routes))
        data = service.fetch_live()
        assert data.inflation == 3.2
        assert data.sources["inflation"] == "fallback"
        assert data.personal_rate == 11.5
        assert data.mortgage_rate == 6.63
        assert data.source == "partial"

    @pytest.mark.parametrize(
        "payload",
        [[], {}, [{"yearly_rate_pct": "n/a"}], ValueError("not json"), [{"yearly_rate_pct": "nan"}]],
    )
    def test_malformed_inflation_payload(self, settings, payload):
        routes = {settings.api_ninjas_url: FakeResponse(payload)}
        service = EconomicDataService(settings, session=FakeSession(routes))
        assert service.fetch_inflation() is None

    def test_exchange_rates(self, settings):
        service = EconomicDataService(settings, session=FakeSession(live_routes(settings)))
        assert service.fetch_exchange_rates() == {"USD": 1.0, "EUR": 0.92, "GBP": 0.79}

    def test_exchange_rates_limit(self, settings):
        service = EconomicDataService(settings, session=FakeSession(live_routes(settings)))
        assert service.fetch_exchange_rates(limit=2) == {"USD": 1.0, "EUR": 0.92}

    def test_exchange_rates_unavailable(self, settings):
        service = EconomicDataService(settings, session=FakeSession({}))
        assert service.fetch_exchange_rates() == {}


class TestCaching:
    """Test the in-process cache."""

    def test_cached_within_ttl(self, settings):
        session = FakeSession(live_routes(settings))
        service = EconomicDataService(settings, session=session)
        first = service.get_economic_data()
        calls = len(session.calls)
        assert service.get_economic_data() is first
        assert len(session.calls) == calls

    def test_expired_cache_refetches(self, settings):
        session = FakeSession(live_routes(settings))
        service = EconomicDataService(settings, session=session)
        first = service.get_economic_data()
        cached_at, data = service._cache
        service._cache = (cached_at - timedelta(minutes=6), data)
        assert service.get_economic_data() is not first

    def test_force_refresh(self, settings):
        service = EconomicDataService(settings, session=FakeSession(live_routes(settings)))
        first = service.get_economic_data()
        assert service.get_economic_data(force_refresh=True) is not first

    def test_clear_cache(self, settings):
        service = EconomicDataService(settings, session=FakeSession(live_routes(settings)))
        first = service.get_economic_data()
        service.clear_cache()
        assert service.get_economic_data() is not first


def make_data(**sources):
    return EconomicData(
        inflation=3.4,
        mortgage_rate=6.6,
        auto_rate=7.9,
        personal_rate=12.3,
        last_updated=datetime(2024, 2, 1, 9, 30),
        sources=sources,
    )


class TestPersistence:
    """Test storing and loading indicators and exchange rates."""

    def test_only_live_fields_stored(self, db_session):
        data = make_data(
            inflation="api", mortgage_rate="api", auto_rate="fallback", personal_rate="fallback"
        )
        assert store_economic_data(db_session, data) == 2
        assert db_session.query(EconomicIndicator).count() == 2

    def test_store_then_load(self, db_session):
        data = make_data(
            inflation="api", mortgage_rate="api", auto_rate="api", personal_rate="api"
        )
        store_economic_data(db_session, data)
        loaded = load_latest_economic_data(db_session)
        assert loaded.inflation == 3.4
        assert loaded.personal_rate == 12.3
        assert loaded.source == "database"

    def test_same_day_is_upserted(self, db_session):
        data = make_data(inflation="api")
        store_economic_data(db_session, data)
        store_economic_data(db_session, data)
        assert db_session.query(EconomicIndicator).count() == 1

    def test_newest_date_wins(self, db_session):
        store_economic_data(db_session, make_data(inflation="api"), on_date=date(2024, 1, 1))
        newer = make_data(inflation="api")
        newer.inflation = 2.9
        store_economic_data(db_session, newer, on_date=date(2024, 3, 1))
        assert load_latest_economic_data(db_session).inflation == 2.9

    def test_load_empty_database(self, db_session):
        loaded = load_latest_economic_data(db_session)
        assert loaded.mortgage_rate == 7.5
        assert loaded.source == "fallback"

    def test_exchange_rates_round_trip(self, db_session):
        store_exchange_rates(db_session, {"EUR": 0.91, "GBP": 0.8}, on_date=date(2024, 1, 1))
        store_exchange_rates(db_session, {"EUR": 0.93}, on_date=date(2024, 2, 1))
        assert load_latest_exchange_rates(db_session) == {"EUR": 0.93, "GBP": 0.8}
