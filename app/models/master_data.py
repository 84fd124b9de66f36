"""Master data models: vendors, recipients and materials.

Vendors and recipients belong to a company code. A recipient's company
code decides the company (and therefore the currency) of every purchase
order raised for it.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Vendor(Base):
    """Vendor (supplier) master record with its bank details."""
    __tablename__ = "vendors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vendor_code: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
        comment="Numeric vendor number, allocated as max + 1"
    )
    company_code: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Address
    street: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    po_box_zip: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Contact / tax
    vat_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    url: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Bank
    bank_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    iban: Mapped[Optional[str]] = mapped_column(String(34), nullable=True)
    bic: Mapped[Optional[str]] = mapped_column(String(11), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Vendor({self.vendor_code}: {self.name})>"


class Recipient(Base):
    """Recipient (ordering party) master record."""
    __tablename__ = "recipients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_code: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        comment="Company code + zero padded id, e.g. 1000001"
    )
    company_code: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    street: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    vat_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Recipient({self.recipient_code}: {self.name})>"


class RecipientVendor(Base):
    """Vendors a recipient is authorised to order from."""
    __tablename__ = "recipient_vendors"

    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipients.id", ondelete="CASCADE"),
        primary_key=True
    )
    vendor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("vendors.id", ondelete="CASCADE"),
        primary_key=True
    )


class Material(Base):
    """Material (article) master record."""
    __tablename__ = "materials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    material_number: Mapped[str] = mapped_column(
        String(40),
        nullable=False,
        index=True,
        comment="Canonical article number used to match order items"
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    material_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    tax_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    tax_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 4), nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    net_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    def __repr__(self) -> str:
        return f"<Material({self.material_number}: {self.description})>"
