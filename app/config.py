from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Dict, List
from functools import lru_cache
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./docgen.db"

    # Database Connection Pool Settings
    DB_POOL_SIZE: int = 10  # Base number of connections in pool
    DB_MAX_OVERFLOW: int = 20  # Extra connections allowed beyond pool_size
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for connection from pool
    DB_POOL_RECYCLE: int = 1800  # Recycle connections after 30 minutes

    # App Settings
    APP_NAME: str = "Purchase Document Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - accepts JSON string, comma-separated, or list
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3003",
        "http://localhost:5173",
    ]

    # Currency
    BASE_CURRENCY: str = "EUR"
    COMPANY_CURRENCIES: Dict[str, str] = {
        "1000": "EUR",  # Default company
        "2000": "GBP",  # UK company
        "3000": "CHF",  # Swiss company
    }
    SUPPORTED_CURRENCIES: List[str] = ["EUR", "GBP", "CHF", "USD"]
    # Used when the exchangerate table cannot be read
    FALLBACK_EXCHANGE_RATES: Dict[str, float] = {
        "EUR": 1.0,
        "GBP": 0.85,
        "CHF": 0.95,
    }
    EXCHANGE_RATE_CACHE_TTL: int = 300  # 5 minutes

    # Document numbering
    PO_NUMBER_PADDING: int = 10
    PO_NUMBER_MAX_ATTEMPTS: int = 10
    DELIVERY_NOTE_PREFIX: str = "L2BRL"
    DELIVERY_NOTE_PADDING: int = 4

    # Delivery notes
    DELIVERY_DATE_MAX_FUTURE_DAYS: int = 7
    DELIVERY_DATE_MAX_PAST_DAYS: int = 30
    DELIVERY_ITEM_STRICT_MATCHING: bool = False  # If True, never fall back to the first PO item

    # Reference data
    UNIT_LANGUAGE: str = "de"
    DEFAULT_TERMS_OF_PAYMENT_ID: int = 1

    @field_validator('CORS_ORIGINS', 'SUPPORTED_CURRENCIES', mode='before')
    @classmethod
    def parse_list(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @field_validator('BASE_CURRENCY', mode='after')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
