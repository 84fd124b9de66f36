"""API endpoints for tax codes."""
from typing import List, Optional

from fastapi import APIRouter, Query
from sqlalchemy import select

from app.api.deps import DB, AppClock
from app.models.reference_data import TaxCode
from app.schemas.reference_data import TaxCodeResponse
from app.services.validation_service import DEFAULT_TAX_SCENARIO


router = APIRouter()


@router.get("", response_model=List[TaxCodeResponse])
async def list_tax_codes(
    db: DB,
    clock: AppClock,
    company_code: Optional[str] = Query(None, alias="companyCode"),
):
    """List tax codes valid today, optionally for one company."""
    today = clock.today()
    query = select(TaxCode).where(
        TaxCode.scenario == DEFAULT_TAX_SCENARIO,
        TaxCode.valid_from <= today,
        TaxCode.valid_to >= today,
    )
    if company_code:
        query = query.where(TaxCode.company_code == company_code)

    result = await db.execute(query.order_by(TaxCode.country, TaxCode.code))
    return result.scalars().all()
