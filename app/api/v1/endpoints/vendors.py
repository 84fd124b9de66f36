"""API endpoints for vendor master data."""
from typing import List
import logging

from fastapi import APIRouter, status
from sqlalchemy import select

from app.api.deps import DB
from app.models.master_data import Vendor
from app.schemas.master_data import VendorCreate, VendorResponse


logger = logging.getLogger(__name__)

router = APIRouter()


async def get_next_vendor_code(db: DB) -> str:
    """Next numeric vendor code: highest numeric code + 1."""
    result = await db.execute(select(Vendor.vendor_code))
    all_codes = result.scalars().all()

    max_num = 0
    for code in all_codes:
        try:
            num = int(code)
            if num > max_num:
                max_num = num
        except (TypeError, ValueError):
            continue

    return str(max_num + 1)


@router.get("", response_model=List[VendorResponse])
async def list_vendors(db: DB):
    """List vendors ordered by name."""
    result = await db.execute(select(Vendor).order_by(Vendor.name))
    return result.scalars().all()


@router.post("", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    vendor_in: VendorCreate,
    db: DB,
):
    """Create a new vendor with its bank details."""
    vendor_code = await get_next_vendor_code(db)

    vendor = Vendor(
        **vendor_in.model_dump(),
        vendor_code=vendor_code,
    )
    db.add(vendor)
    await db.commit()
    await db.refresh(vendor)

    logger.info(f"Created vendor {vendor.vendor_code} ({vendor.name}) for company {vendor.company_code}")
    return vendor
