"""
Economic data API endpoints.
"""

from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from borrowcalc.config import get_settings
from borrowcalc.db.database import get_db
from borrowcalc.services.economic_data import (
    EconomicDataService,
    get_economic_data_service,
    load_latest_economic_data,
    load_latest_exchange_rates,
    store_economic_data,
    store_exchange_rates,
)

router = APIRouter()
settings = get_settings()


@router.get("")
async def get_economic_data(db: Session = Depends(get_db)):
    """Latest stored indicators, with fallback constants for anything missing."""
    return load_latest_economic_data(db).to_dict()


@router.post("/refresh")
def refresh_economic_data(
    db: Session = Depends(get_db),
    service: EconomicDataService = Depends(get_economic_data_service),
):
    """Fetch from the live providers, store what was fetched and return it."""
    data = service.get_economic_data(force_refresh=True)
    stored = store_economic_data(db, data, country_code=settings.country_code)

    rates = service.fetch_exchange_rates()
    if rates:
        store_exchange_rates(db, rates)

    return {
        "data": data.to_dict(),
        "stored_indicators": stored,
        "exchange_rates": rates,
    }


@router.get("/exchange-rates")
async def get_exchange_rates(db: Session = Depends(get_db)) -> Dict[str, float]:
    """Latest stored USD exchange rates."""
    return load_latest_exchange_rates(db)
