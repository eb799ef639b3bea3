"""
Economic data provider.

Fetches inflation from API Ninjas, consumer loan rates from FRED and exchange
rates from exchangerate-api. Any field that cannot be fetched (no API key,
network error, bad payload) falls back to a configured constant, so callers
always get a complete set of numbers.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from sqlalchemy.orm import Session
from urllib3.util.retry import Retry

from borrowcalc.config import Settings, get_settings
from borrowcalc.db.models import EconomicIndicator, ExchangeRate

logger = logging.getLogger(__name__)

INDICATOR_FIELDS = ("inflation", "mortgage_rate", "auto_rate", "personal_rate")

# FRED series for each loan rate (percent)
FRED_SERIES: Dict[str, str] = {
    "mortgage_rate": "MORTGAGE30US",  # 30-year fixed mortgage, weekly
    "auto_rate": "TERMCBAUTO48NS",  # 48-month new car loan, quarterly
    "personal_rate": "TERMCBPER24NS",  # 24-month personal loan, quarterly
}

MAX_EXCHANGE_RATES = 10


@dataclass
class EconomicData:
    """Current economic conditions, in percent."""

    inflation: float
    mortgage_rate: float
    auto_rate: float
    personal_rate: float
    last_updated: datetime
    sources: Dict[str, str] = field(default_factory=dict)  # field -> "api" | "database" | "fallback"

    @property
    def source(self) -> str:
        """Overall provenance: the single source used, "partial" if mixed."""
        kinds = {self.sources.get(name, "fallback") for name in INDICATOR_FIELDS}
        if len(kinds) == 1:
            return kinds.pop()
        return "partial"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inflation": self.inflation,
            "mortgage_rate": self.mortgage_rate,
            "auto_rate": self.auto_rate,
            "personal_rate": self.personal_rate,
            "last_updated": self.last_updated.isoformat(),
            "source": self.source,
        }


def fallback_values(settings: Settings) -> Dict[str, float]:
    """Configured stand-ins for each indicator."""
    return {
        "inflation": settings.fallback_inflation,
        "mortgage_rate": settings.fallback_mortgage_rate,
        "auto_rate": settings.fallback_auto_rate,
        "personal_rate": settings.fallback_personal_rate,
    }


def _as_rate(value: Any) -> Optional[float]:
    """Parse a provider value as a finite float, else None."""
    if value in (None, "", "."):
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    return rate if math.isfinite(rate) else None


class EconomicDataService:
    """Live economic data with per-field fallbacks and a short in-process cache."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or get_settings()
        self.timeout = self.settings.economic_data_timeout
        self.cache_ttl = timedelta(minutes=self.settings.economic_data_cache_minutes)
        self._cache: Optional[Tuple[datetime, EconomicData]] = None

        if session is None:
            session = requests.Session()
            retries = Retry(
                total=3,
                backoff_factor=0.5,
                status_forcelist=(429, 500, 502, 503, 504),
                allowed_methods=("GET",),
            )
            adapter = HTTPAdapter(max_retries=retries)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self.session = session

    def _get_json(self, url: str, **kwargs) -> Optional[Any]:
        """GET a JSON document, or None on any transport or decoding failure."""
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Economic data request to {url} failed: {e}")
            return None

    def fetch_inflation(self) -> Optional[float]:
        """Latest yearly inflation rate for the configured country."""
        if not self.settings.api_ninjas_key:
            return None

        payload = self._get_json(
            self.settings.api_ninjas_url,
            params={"country": self.settings.country_code},
            headers={"X-Api-Key": self.settings.api_ninjas_key},
        )
        if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
            return None
        return _as_rate(payload[0].get("yearly_rate_pct"))

    def fetch_fred_rate(self, series_id: str) -> Optional[float]:
        """Most recent non-missing observation of a FRED series."""
        if not self.settings.fred_api_key:
            return None

        payload = self._get_json(
            self.settings.fred_observations_url,
            params={
                "series_id": series_id,
                "api_key": self.settings.fred_api_key,
                "file_type": "json",
                "sort_order": "desc",
                "limit": 5,
            },
        )
        if not isinstance(payload, dict):
            return None
        for observation in payload.get("observations", []):
            rate = _as_rate(observation.get("value"))
            if rate is not None:
                return rate
        return None

    def fetch_exchange_rates(self, limit: int = MAX_EXCHANGE_RATES) -> Dict[str, float]:
        """First `limit` USD exchange rates, or an empty dict."""
        payload = self._get_json(self.settings.exchange_rate_url)
        if not isinstance(payload, dict) or not isinstance(payload.get("rates"), dict):
            return {}

        rates = {}
        for currency, value in payload["rates"].items():
            rate = _as_rate(value)
            if rate is None:
                continue
            rates[currency] = rate
            if len(rates) >= limit:
                break
        return rates

    def fetch_live(self) -> EconomicData:
        """Query every provider, substituting fallbacks for missing fields."""
        fetched: Dict[str, Optional[float]] = {"inflation": self.fetch_inflation()}
        for name, series_id in FRED_SERIES.items():
            fetched[name] = self.fetch_fred_rate(series_id)

        fallbacks = fallback_values(self.settings)
        values = {}
        sources = {}
        for name in INDICATOR_FIELDS:
            if fetched[name] is None:
                logger.warning(f"Using fallback {name} of {fallbacks[name]}%")
                values[name] = fallbacks[name]
                sources[name] = "fallback"
            else:
                values[name] = fetched[name]
                sources[name] = "api"

        return EconomicData(last_updated=datetime.utcnow(), sources=sources, **values)

    def get_economic_data(self, force_refresh: bool = False) -> EconomicData:
        """Cached live data; refetched once the cache is older than the TTL."""
        now = datetime.utcnow()
        if not force_refresh and self._cache is not None:
            cached_at, data = self._cache
            if now - cached_at <= self.cache_ttl:
                return data

        data = self.fetch_live()
        self._cache = (now, data)
        return data

    def clear_cache(self) -> None:
        self._cache = None


def store_economic_data(
    db: Session,
    data: EconomicData,
    country_code: str = "US",
    on_date: Optional[date] = None,
) -> int:
    """
    Upsert the live (non-fallback) fields of `data` for one day.

    Returns:
        Number of indicators written
    """
    on_date = on_date or data.last_updated.date()
    written = 0

    for name in INDICATOR_FIELDS:
        if data.sources.get(name) != "api":
            continue
        value = getattr(data, name)
        row = (
            db.query(EconomicIndicator)
            .filter(
                EconomicIndicator.indicator_type == name,
                EconomicIndicator.country_code == country_code,
                EconomicIndicator.date == on_date,
            )
            .first()
        )
        if row is None:
            db.add(
                EconomicIndicator(
                    indicator_type=name,
                    country_code=country_code,
                    date=on_date,
                    value=value,
                    source="API",
                )
            )
        else:
            row.value = value
            row.created_at = datetime.utcnow()
        written += 1

    db.commit()
    logger.info(f"Stored {written} economic indicators for {country_code} on {on_date}")
    return written


def store_exchange_rates(
    db: Session,
    rates: Dict[str, float],
    base_currency: str = "USD",
    on_date: Optional[date] = None,
) -> int:
    """Upsert a day's exchange rates. Returns the number of rates written."""
    on_date = on_date or date.today()

    for currency, rate in rates.items():
        row = (
            db.query(ExchangeRate)
            .filter(
                ExchangeRate.base_currency == base_currency,
                ExchangeRate.target_currency == currency,
                ExchangeRate.date == on_date,
            )
            .first()
        )
        if row is None:
            db.add(
                ExchangeRate(
                    base_currency=base_currency,
                    target_currency=currency,
                    rate=rate,
                    date=on_date,
                )
            )
        else:
            row.rate = rate

    db.commit()
    return len(rates)


def load_latest_economic_data(
    db: Session, settings: Optional[Settings] = None
) -> EconomicData:
    """Newest stored value per indicator, with fallbacks for gaps."""
    settings = settings or get_settings()
    fallbacks = fallback_values(settings)

    values = {}
    sources = {}
    last_updated = None
    for name in INDICATOR_FIELDS:
        row = (
            db.query(EconomicIndicator)
            .filter(
                EconomicIndicator.indicator_type == name,
                EconomicIndicator.country_code == settings.country_code,
            )
            .order_by(EconomicIndicator.date.desc())
            .first()
        )
        if row is None:
            values[name] = fallbacks[name]
            sources[name] = "fallback"
            continue
        values[name] = row.value
        sources[name] = "database"
        if last_updated is None or row.created_at > last_updated:
            last_updated = row.created_at

    return EconomicData(
        last_updated=last_updated or datetime.utcnow(),
        sources=sources,
        **values,
    )


def load_latest_exchange_rates(db: Session, base_currency: str = "USD") -> Dict[str, float]:
    """Most recent stored rate per target currency."""
    rows = (
        db.query(ExchangeRate)
        .filter(ExchangeRate.base_currency == base_currency)
        .order_by(ExchangeRate.date.asc())
        .all()
    )
    # Later dates overwrite earlier ones
    return {row.target_currency: row.rate for row in rows}


# Singleton instance
_economic_data_service: Optional[EconomicDataService] = None


def get_economic_data_service() -> EconomicDataService:
    """Get the economic data service singleton."""
    global _economic_data_service
    if _economic_data_service is None:
        _economic_data_service = EconomicDataService()
    return _economic_data_service
