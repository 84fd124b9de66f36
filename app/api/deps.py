from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, system_clock
from app.database import get_db
from app.services.currency_service import CurrencyResolver, get_currency_resolver
from app.services.exchange_rate_cache import ExchangeRateCache, get_exchange_rate_cache


def get_clock() -> Clock:
    """Dependency for the clock used by time-dependent services."""
    return system_clock


def get_rate_cache() -> ExchangeRateCache:
    """Dependency for the process-wide exchange rate cache."""
    return get_exchange_rate_cache()


def get_resolver() -> CurrencyResolver:
    """Dependency for the company currency resolver."""
    return get_currency_resolver()


# Type aliases for cleaner dependency injection
DB = Annotated[AsyncSession, Depends(get_db)]
AppClock = Annotated[Clock, Depends(get_clock)]
RateCache = Annotated[ExchangeRateCache, Depends(get_rate_cache)]
Resolver = Annotated[CurrencyResolver, Depends(get_resolver)]
