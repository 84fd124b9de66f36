"""API endpoints for delivery note creation."""
import logging

from fastapi import APIRouter, status

from app.api.deps import DB, AppClock
from app.core.exceptions import DocumentError
from app.schemas.delivery import (
    DeliveryNoteCreate,
    DeliveryNoteCreateResponse,
    DeliveryNoteResponse,
    DeliveryNoteItemResponse,
)
from app.services.delivery_note_service import DeliveryNoteService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=DeliveryNoteCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_delivery_note(
    note_in: DeliveryNoteCreate,
    db: DB,
    clock: AppClock,
):
    """
    Create a delivery note with its items.

    Each item is linked to an item of the purchase order it names.
    A duplicate internal number gets a timestamp suffix. The external
    number is the next in the global sequence.
    """
    service = DeliveryNoteService(db, clock=clock)
    try:
        note, items = await service.create(note_in)
    except DocumentError as e:
        logger.warning(f"Rejected delivery note: {e.error_code} {e.message}")
        raise
    except Exception:
        logger.error(
            f"Error creating delivery note, request body: {note_in.model_dump_json(by_alias=True)}",
            exc_info=True,
        )
        raise

    return DeliveryNoteCreateResponse(
        note=DeliveryNoteResponse.model_validate(note),
        items=[DeliveryNoteItemResponse.model_validate(item) for item in items],
    )
