"""Delivery note models.

Every delivery note item points at the purchase order item it delivers.
That link is resolved when the note is created, never taken from the
request as-is.
"""
from datetime import datetime, date, timezone
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import String, DateTime, ForeignKey, Integer, Numeric, Date
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class DeliveryNote(Base):
    """Delivery note header."""
    __tablename__ = "delivery_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    internal_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        comment="As submitted, suffixed with -<epoch ms> on collision"
    )
    external_number: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
        comment="L2BRL0001, L2BRL0002, ..."
    )
    note_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    delivery_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    items: Mapped[List["DeliveryNoteItem"]] = relationship(
        "DeliveryNoteItem",
        back_populates="delivery_note",
        cascade="all, delete-orphan",
        order_by="DeliveryNoteItem.id"
    )

    def __repr__(self) -> str:
        return f"<DeliveryNote({self.external_number})>"


class DeliveryNoteItem(Base):
    """Line items in a Delivery Note."""
    __tablename__ = "delivery_note_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    line_number: Mapped[str] = mapped_column(String(10), nullable=False)

    delivery_note_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("delivery_notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    purchase_order_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("purchase_orders.id", ondelete="RESTRICT"),
        nullable=False
    )
    purchase_order_item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("purchase_order_items.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    net_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(14, 3), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, comment="Gross")
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    delivery_note: Mapped["DeliveryNote"] = relationship(
        "DeliveryNote",
        back_populates="items"
    )

    def __repr__(self) -> str:
        return f"<DeliveryNoteItem({self.delivery_note_id}/{self.line_number})>"
