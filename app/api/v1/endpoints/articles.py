"""API endpoints for articles (materials)."""
from decimal import Decimal
from typing import List
import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from app.api.deps import DB, AppClock, Resolver
from app.config import settings
from app.core.exceptions import InputValidationError, ReferenceDataError
from app.models.master_data import Material
from app.schemas.master_data import ArticleCreate, ArticleUpdate, ArticleResponse
from app.services.validation_service import unit_exists, tax_code_valid, lookup_tax_rate


logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_COMPANY_CODE = "1000"

# Used when a tax code has no stored rate for the company
FALLBACK_TAX_RATES = {
    "2000": Decimal("0.20"),  # UK
}
DEFAULT_FALLBACK_TAX_RATE = Decimal("0.19")


@router.get("", response_model=List[ArticleResponse])
async def list_articles(db: DB):
    """List articles ordered by description."""
    result = await db.execute(select(Material).order_by(Material.description))
    return result.scalars().all()


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    article_in: ArticleCreate,
    db: DB,
    resolver: Resolver,
    clock: AppClock,
):
    """
    Create an article.

    Unit and tax code are validated. Currency defaults to the company
    currency. A missing tax rate is taken from the tax code table.
    """
    company_code = article_in.company_code or DEFAULT_COMPANY_CODE

    if article_in.unit and not await unit_exists(db, article_in.unit, settings.UNIT_LANGUAGE):
        raise ReferenceDataError(
            f"Unit '{article_in.unit}' does not exist",
            error_code="INVALID_UNIT",
            details={"unit": article_in.unit},
        )

    if article_in.tax_code and not await tax_code_valid(db, article_in.tax_code, company_code, clock.today()):
        raise ReferenceDataError(
            f"Tax code '{article_in.tax_code}' does not exist or is not valid for company {company_code}",
            error_code="INVALID_TAX_CODE",
            details={"tax_code": article_in.tax_code, "company_code": company_code},
        )

    currency = article_in.currency or resolver.resolve_currency(company_code)

    tax_rate = article_in.tax_rate
    if article_in.tax_code and tax_rate is None:
        tax_rate = await lookup_tax_rate(db, article_in.tax_code, company_code)
        if tax_rate is None:
            tax_rate = FALLBACK_TAX_RATES.get(company_code, DEFAULT_FALLBACK_TAX_RATE)
            logger.info(f"Using fallback tax rate for company {company_code}: {tax_rate}")
        else:
            logger.info(f"Auto-fetched tax rate for {article_in.tax_code}: {tax_rate}")

    material = Material(
        **article_in.model_dump(exclude={"company_code", "currency", "tax_rate"}),
        currency=currency.upper(),
        tax_rate=tax_rate,
    )
    db.add(material)
    await db.commit()
    await db.refresh(material)

    logger.info(f"Created article {material.material_number} (id={material.id})")
    return material


@router.put("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: int,
    article_in: ArticleUpdate,
    db: DB,
):
    """Update the supplied fields of an article."""
    update_data = article_in.model_dump(exclude_unset=True)
    if not update_data:
        raise InputValidationError("No fields to update")

    material = await db.get(Material, article_id)
    if not material:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Article not found"
        )

    for field, value in update_data.items():
        setattr(material, field, value)

    await db.commit()
    await db.refresh(material)

    logger.info(f"Updated article {material.id}: {list(update_data.keys())}")
    return material
