"""Overview of the most recently saved documents."""
from typing import List

from pydantic import BaseModel, Field

from app.schemas.purchase import PurchaseOrderResponse, PurchaseOrderItemResponse
from app.schemas.delivery import DeliveryNoteResponse, DeliveryNoteItemResponse


class SavedDataResponse(BaseModel):
    purchase_orders: List[PurchaseOrderResponse]
    purchase_order_items: List[PurchaseOrderItemResponse]
    delivery_notes: List[DeliveryNoteResponse]
    delivery_note_items: List[DeliveryNoteItemResponse]
    last_po_number: str = Field(serialization_alias="lastPONumber")
    last_dn_number: str = Field(serialization_alias="lastDNNumber")
