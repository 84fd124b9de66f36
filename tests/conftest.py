"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite database file. The FastAPI app is driven
in-process through httpx with the database session, exchange rate cache
and clock replaced via dependency_overrides.
"""
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.api.deps import get_clock, get_rate_cache, get_resolver
from app.config import settings
from app.core.clock import FixedClock
from app.database import Base, get_db
from app.main import app
from app.models import (
    Vendor, Recipient, Material, Unit, TaxCode, ExchangeRate,
)
from app.services.currency_service import CompanyCurrencyMap, CurrencyResolver
from app.services.exchange_rate_cache import ExchangeRateCache, make_table_loader


# 2025-01-10 12:00 UTC
NOW = datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture
async def engine(tmp_path: Path):
    """Fresh SQLite database with all tables created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def resolver() -> CurrencyResolver:
    return CurrencyResolver(
        CompanyCurrencyMap({"1000": "EUR", "2000": "GBP", "3000": "CHF"}, "EUR"),
        ["EUR", "GBP", "CHF", "USD"],
    )


@pytest.fixture
def rate_cache(session_factory, clock) -> ExchangeRateCache:
    return ExchangeRateCache(
        loader=make_table_loader(session_factory),
        ttl_seconds=300,
        base_currency="EUR",
        fallback_rates=settings.FALLBACK_EXCHANGE_RATES,
        clock=clock,
    )


@pytest.fixture
async def reference_data(session_factory) -> None:
    """Units, tax codes and exchange rates used by most tests."""
    async with session_factory() as session:
        session.add_all([
            Unit(code="ST", language="de", abbreviation="St", description="Stück"),
            Unit(code="KG", language="de", abbreviation="kg", description="Kilogramm"),
            Unit(code="PC", language="en", abbreviation="pc", description="Piece"),
            TaxCode(code="V1", company_code="1000", country="DE", rate=Decimal("0.19"),
                    scenario="default", valid_from=date(2020, 1, 1), valid_to=date(2099, 12, 31)),
            TaxCode(code="V1", company_code="2000", country="GB", rate=Decimal("0.20"),
                    scenario="default", valid_from=date(2020, 1, 1), valid_to=date(2099, 12, 31)),
            TaxCode(code="VX", company_code="1000", country="DE", rate=Decimal("0.16"),
                    scenario="default", valid_from=date(2020, 7, 1), valid_to=date(2020, 12, 31)),
            TaxCode(code="VS", company_code="1000", country="DE", rate=Decimal("0.19"),
                    scenario="special", valid_from=date(2020, 1, 1), valid_to=date(2099, 12, 31)),
            ExchangeRate(currency="EUR", rate=Decimal("1.0")),
            ExchangeRate(currency="GBP", rate=Decimal("0.85")),
            ExchangeRate(currency="CHF", rate=Decimal("0.95")),
        ])
        await session.commit()


@pytest.fixture
async def master_data(session_factory, reference_data) -> None:
    """
    Recipients 1 (company 1000), 2 (company 2000), 3 (company 3000);
    vendors 1 and 2; material 1 with material number MAT-100.
    """
    async with session_factory() as session:
        session.add_all([
            Vendor(id=1, vendor_code="1", company_code="1000", name="Muster Lieferant GmbH", country="DE"),
            Vendor(id=2, vendor_code="2", company_code="2000", name="British Supplies Ltd", country="GB"),
            Recipient(id=1, recipient_code="1000001", company_code="1000", name="Werk Berlin", country="DE"),
            Recipient(id=2, recipient_code="2000002", company_code="2000", name="Plant Leeds", country="GB"),
            Recipient(id=3, recipient_code="3000003", company_code="3000", name="Werk Basel", country="CH"),
            Material(id=1, material_number="MAT-100", description="Schraube M8", unit="ST", currency="EUR"),
        ])
        await session.commit()


@pytest.fixture
async def client(session_factory, rate_cache, resolver, clock) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with test dependencies."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_cache] = lambda: rate_cache
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def po_payload(recipient_id=1, vendor_id=2, items=None, **order_fields):
    """Create-purchase-order request body."""
    order = {
        "recipientId": recipient_id,
        "vendorId": vendor_id,
        "orderDate": "2025-01-10",
    }
    order.update(order_fields)
    if items is None:
        items = [{"netAmount": 100, "quantity": 2, "unit": "ST", "currency": "EUR"}]
    return {"order": order, "items": items}


@pytest.fixture
def make_po_payload():
    return po_payload
