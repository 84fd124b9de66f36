"""
Purchase Order Service

Creates a purchase order header and its line items as one atomic unit.

Steps, in order, all inside a single transaction:
    1. Vendor and recipient must both exist (cross-company combinations are allowed)
    2. Company code is taken from the recipient, whatever the request says
    3. Target currency = company currency; line amounts are converted into it
    4. Every line's unit and tax code is validated before anything is written
    5. Order number is allocated (see DocumentNumberService)
    6. Header, then items with line numbers 01, 02, ...

Any exception rolls back the whole transaction: either the header and
every item are stored, or nothing is.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.exceptions import ReferenceNotFoundError, ReferenceDataError
from app.database import unit_of_work
from app.models.master_data import Vendor, Recipient
from app.models.purchase import PurchaseOrder, PurchaseOrderItem
from app.schemas.purchase import PurchaseOrderCreate, PurchaseOrderItemCreate
from app.services.currency_service import CurrencyResolver, convert, quantize_amount
from app.services.document_number_service import DocumentNumberService
from app.services.exchange_rate_cache import ExchangeRateCache
from app.services.validation_service import unit_exists, tax_code_valid

logger = logging.getLogger(__name__)


def format_line_number(index: int) -> str:
    return str(index).zfill(2)


class PurchaseOrderService:
    """Transactional writer for purchase orders."""

    def __init__(
        self,
        db: AsyncSession,
        rate_cache: ExchangeRateCache,
        currency_resolver: CurrencyResolver,
        clock: Clock = system_clock,
        unit_language: str = settings.UNIT_LANGUAGE,
        default_terms_of_payment_id: int = settings.DEFAULT_TERMS_OF_PAYMENT_ID,
    ):
        self.db = db
        self.rate_cache = rate_cache
        self.currency_resolver = currency_resolver
        self.clock = clock
        self.unit_language = unit_language
        self.default_terms_of_payment_id = default_terms_of_payment_id
        self.numbers = DocumentNumberService(db, clock=clock)

    async def create(
        self,
        data: PurchaseOrderCreate,
    ) -> Tuple[PurchaseOrder, List[PurchaseOrderItem]]:
        """
        Create a purchase order with its items.

        Args:
            data: Order header and line items as submitted

        Returns:
            The persisted order and its items, in submitted order

        Raises:
            ReferenceNotFoundError: Vendor or recipient does not exist
            ReferenceDataError: A line has an unknown unit or invalid tax code
            DocumentNumberExhaustedError: No free order number was found
        """
        header = data.order

        async with unit_of_work(self.db):
            recipient = await self.db.get(Recipient, header.recipient_id)
            vendor = await self.db.get(Vendor, header.vendor_id)
            if recipient is None or vendor is None:
                raise ReferenceNotFoundError(
                    "Invalid recipient-vendor combination",
                    details={
                        "recipient_id": header.recipient_id,
                        "vendor_id": header.vendor_id,
                        "recipient_found": recipient is not None,
                        "vendor_found": vendor is not None,
                    },
                )

            company_code = recipient.company_code
            if header.company_code and header.company_code != company_code:
                logger.info(
                    f"Company code {header.company_code} replaced by recipient "
                    f"{recipient.id} company code {company_code}"
                )

            target_currency = self.currency_resolver.resolve_currency(company_code)
            logger.info(f"Target currency for company {company_code}: {target_currency}")

            await self._validate_items(data.items, company_code)
            converted = await self._convert_amounts(data.items, target_currency)

            external_number = await self.numbers.next_purchase_order_number(
                company_code, header.external_number
            )

            order = PurchaseOrder(
                external_number=external_number,
                order_date=header.order_date,
                company_code=company_code,
                recipient_id=recipient.id,
                vendor_id=vendor.id,
                terms_of_payment_id=header.terms_of_payment_id or self.default_terms_of_payment_id,
            )
            self.db.add(order)
            await self.db.flush()

            items: List[PurchaseOrderItem] = []
            for index, (item_data, net_amount) in enumerate(zip(data.items, converted), start=1):
                item = PurchaseOrderItem(
                    purchase_order_id=order.id,
                    line_number=format_line_number(index),
                    item_type=item_data.item_type,
                    customer_article_number=item_data.customer_article_number,
                    vendor_article_number=item_data.vendor_article_number,
                    description=item_data.description,
                    tax_rate=item_data.tax_rate or Decimal("0"),
                    tax_code=item_data.tax_code,
                    net_amount=net_amount,
                    upper_limit_amount=quantize_amount(item_data.upper_limit_amount or 0),
                    quantity=item_data.quantity,
                    unit=item_data.unit,
                    currency=target_currency,
                    gr_expected=item_data.gr_expected,
                    gr_post_per_gr=item_data.gr_post_per_gr,
                )
                self.db.add(item)
                items.append(item)

            await self.db.flush()

        logger.info(
            f"Created purchase order {order.external_number} (id={order.id}) "
            f"for company {company_code} with {len(items)} items"
        )
        return order, items

    async def _validate_items(
        self,
        items: List[PurchaseOrderItemCreate],
        company_code: str,
    ) -> None:
        """Check unit and tax code of every line; blank values are not checked."""
        today = self.clock.today()

        for index, item in enumerate(items, start=1):
            line_number = format_line_number(index)

            if item.unit and not await unit_exists(self.db, item.unit, self.unit_language):
                raise ReferenceDataError(
                    f"Invalid unit code: {item.unit} for item {line_number}",
                    error_code="INVALID_UNIT",
                    details={"unit": item.unit, "line_number": line_number},
                )

            if item.tax_code and not await tax_code_valid(self.db, item.tax_code, company_code, today):
                raise ReferenceDataError(
                    f"Invalid tax code: {item.tax_code} for item {line_number}",
                    error_code="INVALID_TAX_CODE",
                    details={
                        "tax_code": item.tax_code,
                        "company_code": company_code,
                        "line_number": line_number,
                    },
                )

    async def _convert_amounts(
        self,
        items: List[PurchaseOrderItemCreate],
        target_currency: str,
    ) -> List[Decimal]:
        """Net amount of every line expressed in the target currency."""
        base_currency = self.currency_resolver.base_currency
        rates: Optional[dict] = None
        amounts: List[Decimal] = []

        for item in items:
            source_currency = (item.currency or base_currency).upper()
            if source_currency == target_currency:
                amounts.append(quantize_amount(item.net_amount))
                continue

            if rates is None:
                rates = await self.rate_cache.get()
            amount = convert(item.net_amount, source_currency, target_currency, rates)
            logger.info(f"Converted {item.net_amount} {source_currency} to {amount} {target_currency}")
            amounts.append(amount)

        return amounts
