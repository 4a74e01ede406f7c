from datetime import date
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Creator Agency OS"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Database
    DATABASE_URL: str = "postgresql://agency_user:agency_pass@db:5432/agency_db"

    # CORS (frontend origins)
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Reporting
    REPORTING_TIMEZONE: str = "Europe/Rome"
    PROGRAM_INCEPTION: date = date(2024, 1, 1)  # floor for cumulative windows
    DEFAULT_PLATFORM_TAKE_PERCENT: int = 20
    AGGREGATION_MAX_WORKERS: int = 8
    MAX_BREAKDOWN_DAYS: int = 31

    # Exports
    COMPANY_NAME: str = "Creator Agency"
    CURRENCY_SYMBOL: str = "€"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
