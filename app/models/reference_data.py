"""Reference tables owned outside the document workflow.

Units, tax codes and exchange rates are read-only from the point of view
of purchase order and delivery note creation.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Numeric, Date, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Unit(Base):
    """Unit of measure, translated per language."""
    __tablename__ = "units"

    code: Mapped[str] = mapped_column(String(10), primary_key=True, comment="e.g. ST, KG")
    language: Mapped[str] = mapped_column(String(5), primary_key=True, comment="e.g. de, en")
    abbreviation: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Unit({self.code}/{self.language})>"


class TaxCode(Base):
    """Tax code valid for a company within a date window."""
    __tablename__ = "tax_codes"
    __table_args__ = (
        Index("ix_tax_codes_code_company", "code", "company_code"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(10), nullable=False)
    company_code: Mapped[str] = mapped_column(String(10), nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    rate: Mapped[Decimal] = mapped_column(Numeric(6, 4), nullable=False, comment="0.19 = 19%")
    description: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    scenario: Mapped[str] = mapped_column(String(20), nullable=False, default="default")
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<TaxCode({self.code}/{self.company_code}: {self.rate})>"


class ExchangeRate(Base):
    """Rate of a currency relative to the base currency (EUR = 1.0)."""
    __tablename__ = "exchange_rates"

    currency: Mapped[str] = mapped_column(String(3), primary_key=True)
    rate: Mapped[Decimal] = mapped_column(Numeric(12, 6), nullable=False)

    def __repr__(self) -> str:
        return f"<ExchangeRate({self.currency}: {self.rate})>"
