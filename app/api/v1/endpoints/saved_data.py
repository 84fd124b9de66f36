"""API endpoint listing the most recently saved documents."""
import re

from fastapi import APIRouter
from sqlalchemy import select

from app.api.deps import DB
from app.config import settings
from app.models.purchase import PurchaseOrder, PurchaseOrderItem
from app.models.delivery import DeliveryNote, DeliveryNoteItem
from app.schemas.purchase import PurchaseOrderResponse, PurchaseOrderItemResponse
from app.schemas.delivery import DeliveryNoteResponse, DeliveryNoteItemResponse
from app.schemas.saved_data import SavedDataResponse


router = APIRouter()

RECENT_LIMIT = 10
DEFAULT_LAST_PO_NUMBER = "4500000000"


async def _latest(db: DB, model):
    result = await db.execute(select(model).order_by(model.id.desc()).limit(RECENT_LIMIT))
    return result.scalars().all()


@router.get("", response_model=SavedDataResponse)
async def get_saved_data(db: DB):
    """
    Ten newest purchase orders, order items, delivery notes and note items,
    plus the last order number and last external delivery note number.
    """
    purchase_orders = await _latest(db, PurchaseOrder)
    purchase_order_items = await _latest(db, PurchaseOrderItem)
    delivery_notes = await _latest(db, DeliveryNote)
    delivery_note_items = await _latest(db, DeliveryNoteItem)

    last_po_number = DEFAULT_LAST_PO_NUMBER
    if purchase_orders:
        newest = purchase_orders[0].external_number
        # "4500000001-1" -> "4500000001"
        match = re.match(r"^(\d+)", newest)
        last_po_number = match.group(1) if match else newest

    last_dn_number = f"{settings.DELIVERY_NOTE_PREFIX}{'0' * settings.DELIVERY_NOTE_PADDING}"
    if delivery_notes and delivery_notes[0].external_number:
        last_dn_number = delivery_notes[0].external_number

    return SavedDataResponse(
        purchase_orders=[PurchaseOrderResponse.model_validate(o) for o in purchase_orders],
        purchase_order_items=[PurchaseOrderItemResponse.model_validate(i) for i in purchase_order_items],
        delivery_notes=[DeliveryNoteResponse.model_validate(n) for n in delivery_notes],
        delivery_note_items=[DeliveryNoteItemResponse.model_validate(i) for i in delivery_note_items],
        last_po_number=last_po_number,
        last_dn_number=last_dn_number,
    )
