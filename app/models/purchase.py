"""Purchase order models.

A purchase order header and its line items are always created together
in one transaction. The external order number is unique per company
code and never changes once assigned.
"""
from datetime import datetime, date, timezone
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Integer, Numeric, Date
from sqlalchemy import UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class PurchaseOrder(Base):
    """
    Purchase Order header.
    Official order placed with a vendor on behalf of a recipient.
    """
    __tablename__ = "purchase_orders"
    __table_args__ = (
        UniqueConstraint("company_code", "external_number", name="uq_po_company_number"),
        Index("ix_po_vendor_date", "vendor_id", "order_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Identification
    external_number: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Zero padded, e.g. 4500000001"
    )
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    company_code: Mapped[str] = mapped_column(String(10), nullable=False, index=True)

    # Parties
    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    vendor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=False
    )
    terms_of_payment_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    items: Mapped[List["PurchaseOrderItem"]] = relationship(
        "PurchaseOrderItem",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.id"
    )

    def __repr__(self) -> str:
        return f"<PurchaseOrder({self.company_code}/{self.external_number})>"


class PurchaseOrderItem(Base):
    """Line items in a Purchase Order."""
    __tablename__ = "purchase_order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    purchase_order_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("purchase_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Line Number
    line_number: Mapped[str] = mapped_column(String(10), nullable=False, comment="01, 02, ...")
    item_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Article numbers used to match delivery note items
    customer_article_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    vendor_article_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Tax
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(6, 4), default=Decimal("0"))
    tax_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    # Amounts are stored after conversion into the company currency
    net_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    upper_limit_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"))
    quantity: Mapped[Decimal] = mapped_column(Numeric(14, 3), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    # Goods receipt flags
    gr_expected: Mapped[bool] = mapped_column(Boolean, default=True)
    gr_post_per_gr: Mapped[bool] = mapped_column(Boolean, default=True)

    purchase_order: Mapped["PurchaseOrder"] = relationship(
        "PurchaseOrder",
        back_populates="items"
    )

    def __repr__(self) -> str:
        return f"<PurchaseOrderItem({self.purchase_order_id}/{self.line_number})>"
