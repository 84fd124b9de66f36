"""
Delivery Note Service

Creates a delivery note header and its items as one atomic unit.

The delivery date is checked against the accepted window
[today - DELIVERY_DATE_MAX_PAST_DAYS, today + DELIVERY_DATE_MAX_FUTURE_DAYS]
before any transaction is opened.

Each item is linked to a purchase order item of the order it names:
    1. Item whose customer or vendor article number equals material_id
    2. Item whose article number equals the material's material_number
    3. First item of the order (disabled in strict mode)
Matches in 1 and 2 prefer the most recently created item. An item that
cannot be linked fails the whole note.
"""
import logging
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.exceptions import DeliveryDateOutOfRangeError, UnresolvableLinkError
from app.database import unit_of_work
from app.models.delivery import DeliveryNote, DeliveryNoteItem
from app.models.master_data import Material
from app.models.purchase import PurchaseOrderItem
from app.schemas.delivery import DeliveryNoteCreate, DeliveryNoteItemCreate
from app.services.currency_service import quantize_amount
from app.services.document_number_service import DocumentNumberService, is_numeric

logger = logging.getLogger(__name__)

# materials.id is a 32 bit INTEGER column
MAX_MATERIAL_ID = 2**31 - 1


class PurchaseOrderItemResolver:
    """Finds the purchase order item a delivery note item delivers."""

    def __init__(self, db: AsyncSession, strict: bool = False):
        self.db = db
        self.strict = strict

    async def by_article_number(self, purchase_order_id: int, article_number: str) -> Optional[int]:
        result = await self.db.execute(
            select(PurchaseOrderItem.id)
            .where(
                PurchaseOrderItem.purchase_order_id == purchase_order_id,
                or_(
                    PurchaseOrderItem.customer_article_number == article_number,
                    PurchaseOrderItem.vendor_article_number == article_number,
                ),
            )
            .order_by(PurchaseOrderItem.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def material_number(self, material_id: str) -> Optional[str]:
        if not is_numeric(material_id) or int(material_id) > MAX_MATERIAL_ID:
            return None
        material = await self.db.get(Material, int(material_id))
        return material.material_number if material else None

    async def first_item(self, purchase_order_id: int) -> Optional[int]:
        result = await self.db.execute(
            select(PurchaseOrderItem.id)
            .where(PurchaseOrderItem.purchase_order_id == purchase_order_id)
            .order_by(PurchaseOrderItem.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def resolve(self, purchase_order_id: int, material_id: str) -> int:
        """
        Resolve the purchase order item id for a delivered material.

        Raises:
            UnresolvableLinkError: If no strategy yields an item
        """
        item_id = await self.by_article_number(purchase_order_id, material_id)
        if item_id is not None:
            logger.info(f"Found PO item {item_id} for material {material_id} in PO {purchase_order_id}")
            return item_id

        material_number = await self.material_number(material_id)
        if material_number:
            item_id = await self.by_article_number(purchase_order_id, material_number)
            if item_id is not None:
                logger.info(f"Found PO item {item_id} by material number {material_number}")
                return item_id

        if not self.strict:
            item_id = await self.first_item(purchase_order_id)
            if item_id is not None:
                logger.warning(
                    f"No article match for material {material_id} in PO {purchase_order_id}, "
                    f"using first item {item_id}"
                )
                return item_id

        raise UnresolvableLinkError(
            f"Cannot find corresponding PO item for delivery note item. "
            f"Material ID: {material_id}, PO ID: {purchase_order_id}",
            details={
                "purchase_order_id": purchase_order_id,
                "material_id": material_id,
                "strict": self.strict,
            },
        )


class DeliveryNoteService:
    """Transactional writer for delivery notes."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = system_clock,
        max_future_days: int = settings.DELIVERY_DATE_MAX_FUTURE_DAYS,
        max_past_days: int = settings.DELIVERY_DATE_MAX_PAST_DAYS,
        strict_matching: bool = settings.DELIVERY_ITEM_STRICT_MATCHING,
    ):
        self.db = db
        self.clock = clock
        self.max_future_days = max_future_days
        self.max_past_days = max_past_days
        self.numbers = DocumentNumberService(db, clock=clock)
        self.resolver = PurchaseOrderItemResolver(db, strict=strict_matching)

    def validate_delivery_date(self, delivery_date) -> None:
        """
        Reject delivery dates outside the accepted window around today.

        Raises:
            DeliveryDateOutOfRangeError: If the date is too far ahead or behind
        """
        today = self.clock.today()
        latest = today + timedelta(days=self.max_future_days)
        earliest = today - timedelta(days=self.max_past_days)

        if delivery_date > latest:
            raise DeliveryDateOutOfRangeError(
                f"Delivery date cannot be more than {self.max_future_days} days in the future",
                details={"delivery_date": delivery_date.isoformat(), "latest": latest.isoformat()},
            )
        if delivery_date < earliest:
            raise DeliveryDateOutOfRangeError(
                f"Delivery date cannot be more than {self.max_past_days} days in the past",
                details={"delivery_date": delivery_date.isoformat(), "earliest": earliest.isoformat()},
            )

    async def create(
        self,
        data: DeliveryNoteCreate,
    ) -> Tuple[DeliveryNote, List[DeliveryNoteItem]]:
        """
        Create a delivery note with its items.

        Raises:
            DeliveryDateOutOfRangeError: Delivery date outside the window
            UnresolvableLinkError: An item cannot be linked to a PO item
        """
        header = data.note
        self.validate_delivery_date(header.delivery_date)

        async with unit_of_work(self.db):
            internal_number = await self.numbers.delivery_note_internal_number(header.internal_number)
            external_number = await self.numbers.next_delivery_note_external_number()

            note = DeliveryNote(
                internal_number=internal_number,
                external_number=external_number,
                note_type=header.note_type,
                delivery_date=header.delivery_date,
            )
            self.db.add(note)
            await self.db.flush()

            items: List[DeliveryNoteItem] = []
            for index, item_data in enumerate(data.items, start=1):
                items.append(await self._add_item(note, index, item_data))

            await self.db.flush()

        logger.info(
            f"Created delivery note {note.external_number} (internal {note.internal_number}, "
            f"id={note.id}) with {len(items)} items"
        )
        return note, items

    async def _add_item(
        self,
        note: DeliveryNote,
        index: int,
        item_data: DeliveryNoteItemCreate,
    ) -> DeliveryNoteItem:
        purchase_order_item_id = await self.resolver.resolve(
            item_data.purchase_order_id, item_data.material_id
        )

        item = DeliveryNoteItem(
            line_number=str(index).zfill(2),
            delivery_note_id=note.id,
            purchase_order_id=item_data.purchase_order_id,
            purchase_order_item_id=purchase_order_item_id,
            net_amount=quantize_amount(item_data.net_amount),
            quantity=item_data.quantity,
            unit=item_data.unit,
            total_amount=quantize_amount(item_data.total_amount),
            currency=item_data.currency.upper(),
        )
        self.db.add(item)
        return item
