"""API endpoints for recipient master data and authorised vendors."""
from typing import List
import logging
import uuid

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select, delete

from app.api.deps import DB
from app.core.exceptions import InputValidationError
from app.database import unit_of_work
from app.models.master_data import Recipient, RecipientVendor, Vendor
from app.schemas.master_data import (
    RecipientCreate,
    RecipientResponse,
    RecipientCreateResponse,
    RecipientVendorsUpdate,
    RecipientVendorsResponse,
    VendorBrief,
)


logger = logging.getLogger(__name__)

router = APIRouter()


def make_recipient_code(company_code: str, recipient_id: int) -> str:
    """Company code followed by the id padded to 3 digits, e.g. 1000007."""
    return f"{company_code}{str(recipient_id).zfill(3)}"


async def get_recipient_or_404(db: DB, recipient_id: int) -> Recipient:
    recipient = await db.get(Recipient, recipient_id)
    if not recipient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recipient not found"
        )
    return recipient


async def list_authorized_vendors(db: DB, recipient_id: int) -> List[Vendor]:
    result = await db.execute(
        select(Vendor)
        .join(RecipientVendor, RecipientVendor.vendor_id == Vendor.id)
        .where(RecipientVendor.recipient_id == recipient_id)
        .order_by(Vendor.name)
    )
    return list(result.scalars().all())


@router.get("", response_model=List[RecipientResponse])
async def list_recipients(db: DB):
    """List recipients ordered by name."""
    result = await db.execute(select(Recipient).order_by(Recipient.name))
    return result.scalars().all()


@router.post("", response_model=RecipientCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_recipient(
    recipient_in: RecipientCreate,
    db: DB,
):
    """
    Create a recipient.

    The recipient code is derived from the company code and the new id.
    Vendors listed in authorizedVendorIds are linked; unknown ids are skipped.
    """
    async with unit_of_work(db):
        recipient = Recipient(
            **recipient_in.model_dump(exclude={"authorized_vendor_ids"}),
            # Replaced once the id is known
            recipient_code=f"tmp-{uuid.uuid4().hex[:12]}",
        )
        db.add(recipient)
        await db.flush()
        recipient.recipient_code = make_recipient_code(recipient.company_code, recipient.id)

        authorized: List[Vendor] = []
        for vendor_id in dict.fromkeys(recipient_in.authorized_vendor_ids):
            vendor = await db.get(Vendor, vendor_id)
            if vendor is None:
                logger.warning(f"Skipping unknown vendor {vendor_id} for recipient {recipient.recipient_code}")
                continue
            db.add(RecipientVendor(recipient_id=recipient.id, vendor_id=vendor.id))
            authorized.append(vendor)

        await db.flush()

    logger.info(f"Created recipient {recipient.recipient_code} with {len(authorized)} authorised vendors")

    return RecipientCreateResponse(
        **RecipientResponse.model_validate(recipient).model_dump(),
        authorized_vendors=[VendorBrief.model_validate(v) for v in authorized],
    )


@router.get("/{recipient_id}/vendors", response_model=List[VendorBrief])
async def get_recipient_vendors(
    recipient_id: int,
    db: DB,
):
    """List the vendors a recipient may order from."""
    await get_recipient_or_404(db, recipient_id)
    return await list_authorized_vendors(db, recipient_id)


@router.put("/{recipient_id}/vendors", response_model=RecipientVendorsResponse)
async def replace_recipient_vendors(
    recipient_id: int,
    update_in: RecipientVendorsUpdate,
    db: DB,
):
    """
    Replace the authorised vendors of a recipient.

    If any vendor id is unknown nothing is changed.
    """
    await get_recipient_or_404(db, recipient_id)

    async with unit_of_work(db):
        await db.execute(
            delete(RecipientVendor).where(RecipientVendor.recipient_id == recipient_id)
        )

        for vendor_id in dict.fromkeys(update_in.vendor_ids):
            vendor = await db.get(Vendor, vendor_id)
            if vendor is None:
                raise InputValidationError(
                    f"Vendor with ID {vendor_id} does not exist",
                    error_code="VENDOR_NOT_FOUND",
                    details={"vendor_id": vendor_id},
                )
            db.add(RecipientVendor(recipient_id=recipient_id, vendor_id=vendor.id))

        await db.flush()

    vendors = await list_authorized_vendors(db, recipient_id)
    logger.info(f"Recipient {recipient_id} now has {len(vendors)} authorised vendors")
    return RecipientVendorsResponse(
        recipient_id=recipient_id,
        authorized_vendors=[VendorBrief.model_validate(v) for v in vendors],
    )
