"""Pydantic schemas for vendors, recipients and articles (materials)."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import Field

from app.schemas.base import BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema


# ==================== Vendor Schemas ====================

class VendorCreate(BaseCreateSchema):
    """Vendor as submitted; vendor_code is allocated on save."""
    company_code: str = Field(..., min_length=1, max_length=10, alias="companyCode")
    name: str = Field(..., min_length=1, max_length=200)
    street: Optional[str] = Field(None, max_length=200)
    zip_code: Optional[str] = Field(None, max_length=20, alias="zipCode")
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=2)
    po_box_zip: Optional[str] = Field(None, max_length=20, alias="poBoxZip")
    vat_number: Optional[str] = Field(None, max_length=30, alias="vatNumber")
    phone: Optional[str] = Field(None, max_length=50)
    url: Optional[str] = Field(None, max_length=200)
    bank_name: Optional[str] = Field(None, max_length=200, alias="bankName")
    iban: Optional[str] = Field(None, max_length=34)
    bic: Optional[str] = Field(None, max_length=11)


class VendorResponse(BaseResponseSchema):
    id: int
    vendor_code: str
    company_code: str
    name: str
    street: Optional[str] = None
    zip_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    po_box_zip: Optional[str] = None
    vat_number: Optional[str] = None
    phone: Optional[str] = None
    url: Optional[str] = None
    bank_name: Optional[str] = None
    iban: Optional[str] = None
    bic: Optional[str] = None
    created_at: Optional[datetime] = None


class VendorBrief(BaseResponseSchema):
    """Vendor as listed under a recipient."""
    id: int
    vendor_code: str
    name: str
    company_code: str
    country: Optional[str] = None


# ==================== Recipient Schemas ====================

class RecipientCreate(BaseCreateSchema):
    """Recipient as submitted; recipient_code is derived from company code and id."""
    company_code: str = Field(..., min_length=1, max_length=10, alias="companyCode")
    name: str = Field(..., min_length=1, max_length=200)
    street: Optional[str] = Field(None, max_length=200)
    zip_code: Optional[str] = Field(None, max_length=20, alias="zipCode")
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=2)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=200)
    vat_number: Optional[str] = Field(None, max_length=30, alias="vatNumber")
    authorized_vendor_ids: List[int] = Field(default_factory=list, alias="authorizedVendorIds")


class RecipientResponse(BaseResponseSchema):
    id: int
    recipient_code: str
    company_code: str
    name: str
    street: Optional[str] = None
    zip_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    vat_number: Optional[str] = None
    created_at: Optional[datetime] = None


class RecipientCreateResponse(RecipientResponse):
    authorized_vendors: List[VendorBrief] = []


class RecipientVendorsUpdate(BaseCreateSchema):
    vendor_ids: List[int] = Field(..., alias="vendorIds")


class RecipientVendorsResponse(BaseResponseSchema):
    recipient_id: int
    authorized_vendors: List[VendorBrief]


# ==================== Article (Material) Schemas ====================

class ArticleCreate(BaseCreateSchema):
    material_number: str = Field(..., min_length=1, max_length=40, alias="materialNumber")
    description: str = Field(..., min_length=1, max_length=255)
    material_type: Optional[str] = Field(None, max_length=20, alias="type")
    tax_code: Optional[str] = Field(None, max_length=10, alias="taxCode")
    tax_rate: Optional[Decimal] = Field(None, ge=0, alias="taxRate")
    unit: Optional[str] = Field(None, max_length=10)
    net_amount: Optional[Decimal] = Field(None, alias="netAmount")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    company_code: Optional[str] = Field(None, max_length=10, alias="companyCode")


class ArticleUpdate(BaseUpdateSchema):
    """Only the fields present in the request are changed."""
    material_type: Optional[str] = Field(None, max_length=20, alias="type")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    description: Optional[str] = Field(None, max_length=255)
    unit: Optional[str] = Field(None, max_length=10)
    net_amount: Optional[Decimal] = Field(None, alias="netAmount")
    tax_rate: Optional[Decimal] = Field(None, ge=0, alias="taxRate")


class ArticleResponse(BaseResponseSchema):
    id: int
    material_number: str
    description: str
    material_type: Optional[str] = None
    tax_code: Optional[str] = None
    tax_rate: Optional[Decimal] = None
    unit: Optional[str] = None
    net_amount: Optional[Decimal] = None
    currency: str
