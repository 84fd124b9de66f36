"""API endpoints for exchange rates."""
from typing import List

from fastapi import APIRouter
from sqlalchemy import select

from app.api.deps import DB
from app.models.reference_data import ExchangeRate
from app.schemas.reference_data import ExchangeRateResponse


router = APIRouter()


@router.get("", response_model=List[ExchangeRateResponse])
async def list_exchange_rates(db: DB):
    """Rows of the exchange rate table, ordered by currency."""
    result = await db.execute(select(ExchangeRate).order_by(ExchangeRate.currency))
    return result.scalars().all()
