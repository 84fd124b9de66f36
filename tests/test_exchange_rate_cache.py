"""Tests for the exchange rate cache."""
from decimal import Decimal

from app.core.clock import FixedClock
from app.services.exchange_rate_cache import ExchangeRateCache


FALLBACK = {"EUR": 1.0, "GBP": 0.85, "CHF": 0.95}


class CountingLoader:
    """Loader returning fixed rows and counting calls."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return list(self.rows)


class FailingLoader:

    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        raise ConnectionError("exchange rate table unavailable")


def make_cache(loader, clock=None):
    return ExchangeRateCache(
        loader=loader,
        ttl_seconds=300,
        base_currency="EUR",
        fallback_rates=FALLBACK,
        clock=clock or FixedClock(),
    )


async def test_empty_cache_is_stale_and_loads():
    loader = CountingLoader([("GBP", Decimal("0.86")), ("USD", Decimal("1.1"))])
    cache = make_cache(loader)

    assert cache.is_stale()
    rates = await cache.get()

    assert loader.calls == 1
    assert rates == {"EUR": Decimal("1"), "GBP": Decimal("0.86"), "USD": Decimal("1.1")}
    assert not cache.is_stale()


async def test_base_currency_forced_to_one():
    loader = CountingLoader([("EUR", Decimal("1.5")), ("GBP", Decimal("0.85"))])
    cache = make_cache(loader)

    rates = await cache.get()
    assert rates["EUR"] == Decimal("1")


async def test_cached_within_ttl():
    clock = FixedClock()
    loader = CountingLoader([("GBP", Decimal("0.85"))])
    cache = make_cache(loader, clock)

    await cache.get()
    clock.advance(seconds=299)
    await cache.get()

    assert loader.calls == 1


async def test_expires_after_ttl():
    clock = FixedClock()
    loader = CountingLoader([("GBP", Decimal("0.85"))])
    cache = make_cache(loader, clock)

    await cache.get()
    clock.advance(seconds=300)
    assert cache.is_stale()

    loader.rows = [("GBP", Decimal("0.90"))]
    rates = await cache.get()

    assert loader.calls == 2
    assert rates["GBP"] == Decimal("0.90")


async def test_loader_failure_uses_fallback_rates():
    clock = FixedClock()
    loader = FailingLoader()
    cache = make_cache(loader, clock)

    rates = await cache.get()

    assert rates == {"EUR": Decimal("1"), "GBP": Decimal("0.85"), "CHF": Decimal("0.95")}
    assert cache.refreshed_at == clock.now()
    # Fallback counts as a refresh: no retry until the TTL passes
    await cache.get()
    assert loader.calls == 1


async def test_get_returns_a_copy():
    cache = make_cache(CountingLoader([("GBP", Decimal("0.85"))]))

    rates = await cache.get()
    rates["GBP"] = Decimal("99")

    assert (await cache.get())["GBP"] == Decimal("0.85")


async def test_invalidate_forces_reload():
    loader = CountingLoader([("GBP", Decimal("0.85"))])
    cache = make_cache(loader)

    await cache.get()
    cache.invalidate()
    assert cache.is_stale()
    assert cache.refreshed_at is None

    await cache.get()
    assert loader.calls == 2


async def test_reads_exchange_rate_table(rate_cache, reference_data):
    rates = await rate_cache.get()

    assert rates["EUR"] == Decimal("1")
    assert rates["GBP"] == Decimal("0.85")
    assert rates["CHF"] == Decimal("0.95")
