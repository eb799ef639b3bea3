"""
SQLAlchemy ORM models for stored economic data.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Date,
    DateTime,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class EconomicIndicator(Base):
    """One daily observation of an economic indicator."""

    __tablename__ = "economic_indicators"
    __table_args__ = (
        UniqueConstraint("indicator_type", "country_code", "date", name="uq_indicator_day"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    indicator_type = Column(String(50), nullable=False, index=True)  # inflation, mortgage_rate, ...
    country_code = Column(String(2), nullable=False, default="US")
    date = Column(Date, nullable=False)
    value = Column(Float, nullable=False)  # Percent
    source = Column(String(50), nullable=False, default="API")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ExchangeRate(Base):
    """Daily exchange rate from a base currency."""

    __tablename__ = "exchange_rates"
    __table_args__ = (
        UniqueConstraint("base_currency", "target_currency", "date", name="uq_rate_day"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    base_currency = Column(String(3), nullable=False, default="USD")
    target_currency = Column(String(3), nullable=False, index=True)
    rate = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
