"""
Database configuration and models.
"""

from borrowcalc.db.database import engine, SessionLocal, get_db
from borrowcalc.db.models import Base, EconomicIndicator, ExchangeRate

__all__ = ["engine", "SessionLocal", "get_db", "Base", "EconomicIndicator", "ExchangeRate"]
