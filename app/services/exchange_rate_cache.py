"""
Process-wide exchange rate cache.

Rates are read in bulk from the exchange_rates table and kept for
EXCHANGE_RATE_CACHE_TTL seconds. The base currency always has rate 1.0,
whatever the table says.

Reading the table must never fail a document creation: if the load
raises, the cache is filled with FALLBACK_EXCHANGE_RATES instead and the
error is only logged.

There is no lock around refresh(). Two requests that find the cache
stale at the same moment may both reload; both end with the same rates.

Usage:
    cache = get_exchange_rate_cache()
    rates = await cache.get()
    # {"EUR": Decimal("1"), "GBP": Decimal("0.85"), ...}
"""
import logging
from datetime import datetime
from decimal import Decimal
from functools import lru_cache
from typing import Awaitable, Callable, Dict, Iterable, Mapping, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.core.clock import Clock, system_clock
from app.models.reference_data import ExchangeRate

logger = logging.getLogger(__name__)


RateRows = Iterable[Tuple[str, Decimal]]
RateLoader = Callable[[], Awaitable[RateRows]]


def make_table_loader(session_factory: async_sessionmaker[AsyncSession]) -> RateLoader:
    """
    Build a loader that reads the exchange_rates table in its own session.

    The read runs outside the caller's write transaction, so a failing
    rate query cannot poison an order being created.
    """
    async def load() -> RateRows:
        async with session_factory() as session:
            result = await session.execute(
                select(ExchangeRate.currency, ExchangeRate.rate).order_by(ExchangeRate.currency)
            )
            return [(row.currency, row.rate) for row in result.all()]

    return load


class ExchangeRateCache:
    """Time-bounded map of currency code -> rate relative to the base currency."""

    def __init__(
        self,
        loader: RateLoader,
        ttl_seconds: int = 300,
        base_currency: str = "EUR",
        fallback_rates: Optional[Mapping[str, float]] = None,
        clock: Clock = system_clock,
    ):
        self._loader = loader
        self._ttl_seconds = ttl_seconds
        self._base_currency = base_currency
        self._fallback_rates = dict(fallback_rates or {base_currency: 1.0})
        self._clock = clock
        self._rates: Dict[str, Decimal] = {}
        self._refreshed_at: Optional[datetime] = None

    @property
    def refreshed_at(self) -> Optional[datetime]:
        return self._refreshed_at

    def is_stale(self) -> bool:
        """True when the cache is empty or older than the TTL."""
        if not self._rates or self._refreshed_at is None:
            return True
        age = (self._clock.now() - self._refreshed_at).total_seconds()
        return age >= self._ttl_seconds

    async def get(self) -> Dict[str, Decimal]:
        """Return the cached rates, reloading them first if stale."""
        if self.is_stale():
            await self.refresh()
        return dict(self._rates)

    async def refresh(self) -> Dict[str, Decimal]:
        """
        Reload rates from the source, or fall back to the static rates.

        Returns:
            The rates now held by the cache.
        """
        try:
            rows = await self._loader()
            rates: Dict[str, Decimal] = {}
            for currency, rate in rows:
                rates[currency.upper()] = Decimal(str(rate))
            rates[self._base_currency] = Decimal("1")
            self._rates = rates
            logger.info(f"Exchange rates cached: {', '.join(f'{k}={v}' for k, v in rates.items())}")
        except Exception:
            logger.warning("Failed to load exchange rates, using fallback rates", exc_info=True)
            rates = {currency: Decimal(str(rate)) for currency, rate in self._fallback_rates.items()}
            rates[self._base_currency] = Decimal("1")
            self._rates = rates

        self._refreshed_at = self._clock.now()
        return dict(self._rates)

    def invalidate(self) -> None:
        """Drop the cached rates so the next get() reloads."""
        self._rates = {}
        self._refreshed_at = None


@lru_cache()
def get_exchange_rate_cache() -> ExchangeRateCache:
    """Get the process-wide cache bound to the application database."""
    from app.database import async_session_factory

    return ExchangeRateCache(
        loader=make_table_loader(async_session_factory),
        ttl_seconds=settings.EXCHANGE_RATE_CACHE_TTL,
        base_currency=settings.BASE_CURRENCY,
        fallback_rates=settings.FALLBACK_EXCHANGE_RATES,
    )
