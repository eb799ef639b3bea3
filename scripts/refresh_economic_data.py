"""
Fetch current economic data and exchange rates and store them.

Meant to run daily from cron; the API serves whatever was stored last.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from borrowcalc.config import get_settings
from borrowcalc.db.database import init_db, session_scope
from borrowcalc.services.economic_data import (
    get_economic_data_service,
    store_economic_data,
    store_exchange_rates,
)


def main():
    settings = get_settings()
    init_db()

    service = get_economic_data_service()
    data = service.get_economic_data(force_refresh=True)

    print(f"Inflation:     {data.inflation:.2f}% ({data.sources.get('inflation')})")
    print(f"Mortgage rate: {data.mortgage_rate:.2f}% ({data.sources.get('mortgage_rate')})")
    print(f"Auto rate:     {data.auto_rate:.2f}% ({data.sources.get('auto_rate')})")
    print(f"Personal rate: {data.personal_rate:.2f}% ({data.sources.get('personal_rate')})")

    rates = service.fetch_exchange_rates()

    with session_scope() as db:
        stored = store_economic_data(db, data, country_code=settings.country_code)
        print(f"Stored {stored} indicators")
        if rates:
            store_exchange_rates(db, rates)
            print(f"Stored {len(rates)} exchange rates")
        else:
            print("Exchange rates unavailable, nothing stored")


if __name__ == "__main__":
    main()
