"""Pydantic schemas for purchase order creation."""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List

from pydantic import Field

from app.schemas.base import BaseResponseSchema, BaseCreateSchema


# ==================== Purchase Order Item Schemas ====================

class PurchaseOrderItemCreate(BaseCreateSchema):
    """Line item as submitted. Amount and currency may be converted on save."""
    item_type: Optional[str] = Field(None, max_length=20, alias="type")
    customer_article_number: Optional[str] = Field(None, max_length=40, alias="customerArticleNumber")
    vendor_article_number: Optional[str] = Field(None, max_length=40, alias="vendorArticleNumber")
    description: Optional[str] = Field(None, max_length=255)
    tax_rate: Optional[Decimal] = Field(None, ge=0, alias="taxRate")
    tax_code: Optional[str] = Field(None, max_length=10, alias="taxCode")
    net_amount: Decimal = Field(..., alias="netAmount")
    quantity: Decimal = Field(..., gt=0)
    unit: Optional[str] = Field(None, max_length=10)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    upper_limit_amount: Optional[Decimal] = Field(None, ge=0, alias="upperLimitAmount")
    gr_expected: bool = Field(True, alias="grExpected")
    gr_post_per_gr: bool = Field(True, alias="grPostPerGr")


class PurchaseOrderItemResponse(BaseResponseSchema):
    """Persisted line item; net_amount and currency are post-conversion."""
    id: int
    purchase_order_id: int
    line_number: str
    item_type: Optional[str] = None
    customer_article_number: Optional[str] = None
    vendor_article_number: Optional[str] = None
    description: Optional[str] = None
    tax_rate: Decimal
    tax_code: Optional[str] = None
    net_amount: Decimal
    upper_limit_amount: Decimal
    quantity: Decimal
    unit: Optional[str] = None
    currency: str
    gr_expected: bool
    gr_post_per_gr: bool


# ==================== Purchase Order Schemas ====================

class PurchaseOrderHeaderCreate(BaseCreateSchema):
    """
    Order header as submitted.

    company_code is informational only: the recipient's company code is
    always used.
    """
    recipient_id: int = Field(..., gt=0, alias="recipientId")
    vendor_id: int = Field(..., gt=0, alias="vendorId")
    company_code: Optional[str] = Field(None, max_length=10, alias="companyCode")
    order_date: date = Field(..., alias="orderDate")
    external_number: Optional[str] = Field(None, max_length=20, alias="externalNumber")
    terms_of_payment_id: Optional[int] = Field(None, gt=0, alias="termsOfPaymentId")


class PurchaseOrderCreate(BaseCreateSchema):
    order: PurchaseOrderHeaderCreate
    items: List[PurchaseOrderItemCreate] = Field(..., min_length=1)


class PurchaseOrderResponse(BaseResponseSchema):
    id: int
    external_number: str
    order_date: date
    company_code: str
    recipient_id: int
    vendor_id: int
    terms_of_payment_id: int
    created_at: Optional[datetime] = None


class PurchaseOrderCreateResponse(BaseResponseSchema):
    order: PurchaseOrderResponse
    items: List[PurchaseOrderItemResponse]
