"""Pydantic schemas for units, tax codes and exchange rates."""
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from app.schemas.base import BaseResponseSchema, BaseCreateSchema


class UnitCreate(BaseCreateSchema):
    code: str = Field(..., min_length=1, max_length=10)
    language: str = Field(..., min_length=2, max_length=5)
    abbreviation: str = Field(..., min_length=1, max_length=20)
    description: Optional[str] = Field(None, max_length=100)


class UnitResponse(BaseResponseSchema):
    code: str
    language: str
    abbreviation: str
    description: Optional[str] = None


class TaxCodeResponse(BaseResponseSchema):
    id: int
    code: str
    company_code: str
    country: Optional[str] = None
    rate: Decimal
    description: Optional[str] = None
    valid_from: date
    valid_to: date


class ExchangeRateResponse(BaseResponseSchema):
    currency: str
    rate: Decimal
