"""
Application services module.
"""

from borrowcalc.services.economic_data import (
    EconomicData,
    EconomicDataService,
    get_economic_data_service,
)

__all__ = ["EconomicData", "EconomicDataService", "get_economic_data_service"]
