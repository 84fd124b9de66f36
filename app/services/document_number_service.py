"""
Document Number Service

Generates the external identifiers of purchase orders and delivery notes.

PURCHASE ORDERS:
    - Scoped by company code
    - 10 digit zero padded: 0000000001, 0000000002, ...
    - Next number = highest numeric number of the company + 1
    - Probed for collision and bumped by one, at most PO_NUMBER_MAX_ATTEMPTS times

DELIVERY NOTES:
    - Internal number: as submitted, "-<epoch ms>" appended if already used
    - External number: global, {PREFIX}{4 digit counter}, e.g. L2BRL0001

The probe-and-bump loop is racy across concurrent requests: two writers can
both see the same free number. The loser fails on the
(company_code, external_number) unique constraint and its transaction is
rolled back.

USAGE:
    service = DocumentNumberService(db)
    po_number = await service.next_purchase_order_number("1000")
    # Returns: 0000000042
"""
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.exceptions import DocumentNumberExhaustedError
from app.models.purchase import PurchaseOrder
from app.models.delivery import DeliveryNote

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ==================== Bounded retry ====================

@dataclass(frozen=True)
class Ok(Generic[T]):
    """A free candidate was found."""
    value: T


@dataclass(frozen=True)
class Exhausted(Generic[T]):
    """Every candidate tried within the budget was taken."""
    attempts: int
    last_candidate: T


RetryResult = Union[Ok[T], Exhausted[T]]


async def bounded_retry(
    first_candidate: T,
    is_free: Callable[[T], Awaitable[bool]],
    next_candidate: Callable[[T], Optional[T]],
    max_attempts: int,
) -> RetryResult:
    """
    Probe candidates until one is free or max_attempts probes have been made.

    Args:
        first_candidate: Value probed first
        is_free: Async predicate, True when the candidate can be used
        next_candidate: Produces the next candidate; None stops early
        max_attempts: Upper bound on calls to is_free

    Returns:
        Ok(candidate) or Exhausted(attempts, last_candidate)
    """
    candidate = first_candidate
    attempts = 0
    while attempts < max_attempts:
        attempts += 1
        if await is_free(candidate):
            return Ok(candidate)
        if attempts == max_attempts:
            break

        following = next_candidate(candidate)
        if following is None:
            break
        logger.warning(f"Document number {candidate} exists, trying: {following}")
        candidate = following

    return Exhausted(attempts=attempts, last_candidate=candidate)


# ==================== Formatting helpers ====================

def format_purchase_order_number(value: int, padding: int = 10) -> str:
    return str(value).zfill(padding)


def is_numeric(value: Optional[str]) -> bool:
    """True for a non-empty string of ASCII digits only."""
    return bool(value) and re.fullmatch(r"[0-9]+", value) is not None


def increment_numeric(number: str) -> Optional[str]:
    """Next number with the same zero padding, or None if not numeric."""
    if not is_numeric(number):
        return None
    return str(int(number) + 1).zfill(len(number))


def parse_delivery_counter(value: Optional[str], prefix: str) -> Optional[int]:
    """Counter of an external delivery note number, or None if it does not match."""
    if not value:
        return None
    match = re.fullmatch(re.escape(prefix) + r"([0-9]+)", value)
    if not match:
        return None
    return int(match.group(1))


def format_delivery_number(counter: int, prefix: str, padding: int = 4) -> str:
    return f"{prefix}{str(counter).zfill(padding)}"


# ==================== Service ====================

class DocumentNumberService:
    """Allocates purchase order and delivery note numbers within a session."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = system_clock,
        po_padding: int = settings.PO_NUMBER_PADDING,
        po_max_attempts: int = settings.PO_NUMBER_MAX_ATTEMPTS,
        delivery_prefix: str = settings.DELIVERY_NOTE_PREFIX,
        delivery_padding: int = settings.DELIVERY_NOTE_PADDING,
    ):
        self.db = db
        self.clock = clock
        self.po_padding = po_padding
        self.po_max_attempts = po_max_attempts
        self.delivery_prefix = delivery_prefix
        self.delivery_padding = delivery_padding

    # ---------- Purchase orders ----------

    async def max_purchase_order_number(self, company_code: str) -> int:
        """Highest purchase order number of the company; non-numeric numbers are ignored."""
        result = await self.db.execute(
            select(PurchaseOrder.external_number)
            .where(PurchaseOrder.company_code == company_code)
        )
        max_num = 0
        for number in result.scalars().all():
            if is_numeric(number):
                max_num = max(max_num, int(number))
        return max_num

    async def purchase_order_number_taken(self, number: str, company_code: str) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(PurchaseOrder)
            .where(
                PurchaseOrder.external_number == number,
                PurchaseOrder.company_code == company_code,
            )
        )
        return (result.scalar() or 0) > 0

    async def next_purchase_order_number(
        self,
        company_code: str,
        requested: Optional[str] = None,
    ) -> str:
        """
        Get a purchase order number that is free within the company.

        Args:
            company_code: Company the order belongs to
            requested: Number supplied by the caller, if any

        Returns:
            The number to store on the order

        Raises:
            DocumentNumberExhaustedError: If every probed number was taken
        """
        requested = (requested or "").strip()
        if requested:
            first = requested
        else:
            next_value = await self.max_purchase_order_number(company_code) + 1
            first = format_purchase_order_number(next_value, self.po_padding)
            logger.info(f"Generated new PO number: {first} for company {company_code}")

        async def is_free(candidate: str) -> bool:
            return not await self.purchase_order_number_taken(candidate, company_code)

        outcome = await bounded_retry(first, is_free, increment_numeric, self.po_max_attempts)

        if isinstance(outcome, Exhausted):
            raise DocumentNumberExhaustedError(
                f"Could not generate unique PO number after {outcome.attempts} attempts",
                details={
                    "company_code": company_code,
                    "first_candidate": first,
                    "last_candidate": outcome.last_candidate,
                    "attempts": outcome.attempts,
                },
            )
        return outcome.value

    # ---------- Delivery notes ----------

    async def delivery_note_internal_number(self, requested: str) -> str:
        """
        Use the submitted internal number unless it is already taken; then
        append the current epoch milliseconds.
        """
        result = await self.db.execute(
            select(func.count())
            .select_from(DeliveryNote)
            .where(DeliveryNote.internal_number == requested)
        )
        if (result.scalar() or 0) == 0:
            return requested

        disambiguated = f"{requested}-{self.clock.epoch_millis()}"
        logger.warning(f"DN number {requested} already exists, using {disambiguated}")
        return disambiguated

    async def next_delivery_note_external_number(self) -> str:
        """Next {PREFIX}{counter} number; starts at 1 when none exists."""
        result = await self.db.execute(
            select(DeliveryNote.external_number)
            .where(DeliveryNote.external_number.like(f"{self.delivery_prefix}%"))
        )

        last_counter = 0
        for number in result.scalars().all():
            counter = parse_delivery_counter(number, self.delivery_prefix)
            if counter is not None and counter > last_counter:
                last_counter = counter

        next_number = format_delivery_number(last_counter + 1, self.delivery_prefix, self.delivery_padding)
        if last_counter:
            logger.info(f"Using next external DN number: {next_number} (incremented from: {last_counter})")
        else:
            logger.info(f"No existing external DN numbers found, starting with: {next_number}")
        return next_number
