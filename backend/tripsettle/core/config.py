"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "TripSettle"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./tripsettle.db"
    DB_ECHO: bool = False

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8080"]

    # Expenses
    DEFAULT_CURRENCY: str = "KRW"
    MULTI_DAY_CATEGORIES: Union[List[str], str] = ["lodging", "transport"]  # Categories whose cost is prorated per day

    @field_validator("CORS_ORIGINS", "MULTI_DAY_CATEGORIES", mode="before")
    @classmethod
    def parse_comma_separated(cls, v):
        """Parse list settings from comma-separated string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    # Settlement
    SETTLEMENT_STRICT_VALIDATION: bool = False  # Raise on malformed expenses instead of skipping them
    SETTLEMENT_TOLERANCE: int = 1  # Balances below this (in minor units) count as zero

    # Shared dashboards
    SHARE_KEY_LENGTH: int = 12

    model_config = {"env_file": ".env", "case_sensitive": True}


settings = Settings()
