"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./dev.db"

    # App settings
    app_name: str = "Borrowing Calculator"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Economic data providers
    api_ninjas_key: str = ""
    api_ninjas_url: str = "https://api.api-ninjas.com/v1/inflation"
    fred_api_key: str = ""
    fred_observations_url: str = "https://api.stlouisfed.org/fred/series/observations"
    exchange_rate_url: str = "https://api.exchangerate-api.com/v4/latest/USD"
    economic_data_timeout: float = 10.0
    economic_data_cache_minutes: int = 5
    country_code: str = "US"

    # Fallback constants (percent)
    fallback_inflation: float = 3.2
    fallback_mortgage_rate: float = 7.5
    fallback_auto_rate: float = 6.5
    fallback_personal_rate: float = 11.5

    # Monte Carlo simulator
    simulation_batch_size: int = 50
    simulation_batch_delay: float = 0.01
    simulation_min_count: int = 100
    simulation_max_count: int = 5000
    simulation_min_years: int = 5
    simulation_max_years: int = 30
    simulation_max_volatility: float = 5.0

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
