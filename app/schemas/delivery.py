"""Pydantic schemas for delivery note creation."""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List

from pydantic import Field, field_validator

from app.schemas.base import BaseResponseSchema, BaseCreateSchema


class DeliveryNoteItemCreate(BaseCreateSchema):
    """
    Delivery note line as submitted.

    material_id is matched against the article numbers of the purchase
    order items; numeric values are also tried as a material id.
    """
    purchase_order_id: int = Field(..., gt=0, alias="purchaseOrderId")
    material_id: str = Field(..., min_length=1, max_length=40, alias="materialId")
    quantity: Decimal = Field(..., gt=0)
    unit: Optional[str] = Field(None, max_length=10)
    net_amount: Decimal = Field(..., alias="netAmount")
    total_amount: Decimal = Field(..., alias="totalAmount")
    currency: str = Field(..., min_length=3, max_length=3)

    @field_validator('material_id', mode='before')
    @classmethod
    def material_id_to_str(cls, v):
        if isinstance(v, int):
            return str(v)
        return v


class DeliveryNoteItemResponse(BaseResponseSchema):
    id: int
    line_number: str
    delivery_note_id: int
    purchase_order_id: int
    purchase_order_item_id: int
    net_amount: Decimal
    quantity: Decimal
    unit: Optional[str] = None
    total_amount: Decimal
    currency: str


class DeliveryNoteHeaderCreate(BaseCreateSchema):
    internal_number: str = Field(..., min_length=1, max_length=30, alias="internalNumber")
    note_type: Optional[str] = Field(None, max_length=20, alias="type")
    delivery_date: date = Field(..., alias="deliveryDate")


class DeliveryNoteCreate(BaseCreateSchema):
    note: DeliveryNoteHeaderCreate
    items: List[DeliveryNoteItemCreate] = Field(..., min_length=1)


class DeliveryNoteResponse(BaseResponseSchema):
    id: int
    internal_number: str
    external_number: str
    note_type: Optional[str] = None
    delivery_date: date
    created_at: Optional[datetime] = None


class DeliveryNoteCreateResponse(BaseResponseSchema):
    note: DeliveryNoteResponse
    items: List[DeliveryNoteItemResponse]
