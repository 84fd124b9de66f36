"""Existence checks against the unit and tax code reference tables.

No caching and no retries: a database error here propagates and fails the
enclosing operation.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reference_data import Unit, TaxCode


DEFAULT_TAX_SCENARIO = "default"


async def unit_exists(db: AsyncSession, code: str, language: str) -> bool:
    """Check that a unit code exists for the given language."""
    result = await db.execute(
        select(func.count())
        .select_from(Unit)
        .where(Unit.code == code, Unit.language == language)
    )
    return (result.scalar() or 0) > 0


async def tax_code_valid(
    db: AsyncSession,
    code: str,
    company_code: str,
    on_date: date,
) -> bool:
    """
    Check that a tax code exists for the company, is in the default
    scenario, and its validity window contains on_date.
    """
    result = await db.execute(
        select(func.count())
        .select_from(TaxCode)
        .where(
            TaxCode.code == code,
            TaxCode.company_code == company_code,
            TaxCode.scenario == DEFAULT_TAX_SCENARIO,
            TaxCode.valid_from <= on_date,
            TaxCode.valid_to >= on_date,
        )
    )
    return (result.scalar() or 0) > 0


async def lookup_tax_rate(db: AsyncSession, code: str, company_code: str) -> Optional[Decimal]:
    """Rate stored for a tax code and company, or None if there is none."""
    result = await db.execute(
        select(TaxCode.rate)
        .where(TaxCode.code == code, TaxCode.company_code == company_code)
        .order_by(TaxCode.valid_from.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
