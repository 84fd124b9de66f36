"""API endpoints for units of measure."""
from typing import List
import logging

from fastapi import APIRouter, HTTPException, status, Query
from sqlalchemy import select

from app.api.deps import DB
from app.config import settings
from app.models.reference_data import Unit
from app.schemas.reference_data import UnitCreate, UnitResponse


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[UnitResponse])
async def list_units(
    db: DB,
    lang: str = Query(settings.UNIT_LANGUAGE, min_length=2, max_length=5),
):
    """List units for a language, ordered by code."""
    result = await db.execute(
        select(Unit)
        .where(Unit.language == lang)
        .order_by(Unit.code)
    )
    units = result.scalars().all()
    logger.info(f"Found {len(units)} units for language {lang}")
    return units


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
async def create_unit(
    unit_in: UnitCreate,
    db: DB,
):
    """Create a unit for one language."""
    existing = await db.get(Unit, (unit_in.code, unit_in.language))
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Unit '{unit_in.code}' already exists for language '{unit_in.language}'"
        )

    unit = Unit(**unit_in.model_dump())
    db.add(unit)
    await db.commit()
    await db.refresh(unit)
    return unit
