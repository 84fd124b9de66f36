"""Initialize database tables and seed reference data.

Usage:
    python -m scripts.init_db

Seeds units (de/en), the standard tax codes of the three companies and
the exchange rates. Rows that already exist are left untouched.
"""
import asyncio
from datetime import date
from decimal import Decimal

from app.database import async_session_factory, init_db
from app.models import Unit, TaxCode, ExchangeRate


UNITS = [
    # code, language, abbreviation, description
    ("ST", "de", "St", "Stück"),
    ("KG", "de", "kg", "Kilogramm"),
    ("L", "de", "l", "Liter"),
    ("M", "de", "m", "Meter"),
    ("H", "de", "Std", "Stunde"),
    ("ST", "en", "pc", "Piece"),
    ("KG", "en", "kg", "Kilogram"),
    ("L", "en", "l", "Litre"),
    ("M", "en", "m", "Metre"),
    ("H", "en", "h", "Hour"),
]

VALID_FROM = date(2020, 1, 1)
VALID_TO = date(2099, 12, 31)

TAX_CODES = [
    # code, company, country, rate, description
    ("V1", "1000", "DE", Decimal("0.19"), "Vorsteuer 19%"),
    ("V2", "1000", "DE", Decimal("0.07"), "Vorsteuer 7%"),
    ("V0", "1000", "DE", Decimal("0.00"), "Steuerfrei"),
    ("V1", "2000", "GB", Decimal("0.20"), "Input VAT 20%"),
    ("V2", "2000", "GB", Decimal("0.05"), "Input VAT 5%"),
    ("V0", "2000", "GB", Decimal("0.00"), "Zero rated"),
    ("V1", "3000", "CH", Decimal("0.081"), "Vorsteuer 8.1%"),
    ("V2", "3000", "CH", Decimal("0.026"), "Vorsteuer 2.6%"),
]

EXCHANGE_RATES = [
    ("EUR", Decimal("1.000000")),
    ("GBP", Decimal("0.850000")),
    ("CHF", Decimal("0.950000")),
    ("USD", Decimal("1.080000")),
]


async def seed() -> None:
    async with async_session_factory() as session:
        for code, language, abbreviation, description in UNITS:
            if await session.get(Unit, (code, language)) is None:
                session.add(Unit(code=code, language=language, abbreviation=abbreviation, description=description))

        existing = await session.execute(TaxCode.__table__.select())
        existing_keys = {(row.code, row.company_code) for row in existing}
        for code, company_code, country, rate, description in TAX_CODES:
            if (code, company_code) not in existing_keys:
                session.add(TaxCode(
                    code=code,
                    company_code=company_code,
                    country=country,
                    rate=rate,
                    description=description,
                    scenario="default",
                    valid_from=VALID_FROM,
                    valid_to=VALID_TO,
                ))

        for currency, rate in EXCHANGE_RATES:
            if await session.get(ExchangeRate, currency) is None:
                session.add(ExchangeRate(currency=currency, rate=rate))

        await session.commit()


async def init():
    """Create all tables and seed reference data."""
    print("Creating database tables...")
    await init_db()
    print("Seeding reference data...")
    await seed()
    print("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init())
