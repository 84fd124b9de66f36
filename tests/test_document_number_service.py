"""Tests for purchase order and delivery note numbering."""
from datetime import date

import pytest

from app.core.exceptions import DocumentNumberExhaustedError
from app.models import PurchaseOrder, DeliveryNote
from app.services.document_number_service import (
    DocumentNumberService,
    Ok,
    Exhausted,
    bounded_retry,
    increment_numeric,
    is_numeric,
    parse_delivery_counter,
    format_delivery_number,
)


# ==================== bounded_retry ====================

async def test_bounded_retry_first_candidate_free():
    async def is_free(candidate):
        return True

    outcome = await bounded_retry("0000000005", is_free, increment_numeric, 10)
    assert outcome == Ok("0000000005")


async def test_bounded_retry_skips_taken_candidates():
    taken = {"0000000005", "0000000006"}
    checked = []

    async def is_free(candidate):
        checked.append(candidate)
        return candidate not in taken

    outcome = await bounded_retry("0000000005", is_free, increment_numeric, 10)

    assert outcome == Ok("0000000007")
    assert checked == ["0000000005", "0000000006", "0000000007"]


async def test_bounded_retry_exhausts_after_max_attempts():
    checked = []

    async def is_free(candidate):
        checked.append(candidate)
        return False

    outcome = await bounded_retry("0000000001", is_free, increment_numeric, 10)

    assert isinstance(outcome, Exhausted)
    assert outcome.attempts == 10
    assert outcome.last_candidate == "0000000010"
    assert len(checked) == 10


async def test_bounded_retry_never_steps_past_last_attempt():
    stepped = []

    async def is_free(candidate):
        return False

    def next_candidate(candidate):
        stepped.append(candidate)
        return increment_numeric(candidate)

    outcome = await bounded_retry("0000000001", is_free, next_candidate, 3)

    assert outcome == Exhausted(attempts=3, last_candidate="0000000003")
    assert stepped == ["0000000001", "0000000002"]


async def test_bounded_retry_stops_when_no_next_candidate():
    async def is_free(candidate):
        return False

    outcome = await bounded_retry("PO-ABC", is_free, increment_numeric, 10)
    assert outcome == Exhausted(attempts=1, last_candidate="PO-ABC")


def test_increment_numeric_keeps_padding():
    assert increment_numeric("0000000009") == "0000000010"
    assert increment_numeric("4500000001") == "4500000002"
    assert increment_numeric("45A") is None
    assert increment_numeric("4²") is None
    assert increment_numeric("") is None


@pytest.mark.parametrize("value, expected", [
    ("0042", True),
    ("", False),
    (None, False),
    ("4²", False),
    ("١٢", False),
    ("12a", False),
])
def test_is_numeric_accepts_ascii_digits_only(value, expected):
    assert is_numeric(value) is expected


def test_delivery_counter_parsing():
    assert parse_delivery_counter("L2BRL0042", "L2BRL") == 42
    assert parse_delivery_counter("L2BRL12345", "L2BRL") == 12345
    assert parse_delivery_counter("L2BRL00A1", "L2BRL") is None
    assert parse_delivery_counter("X2BRL0001", "L2BRL") is None
    assert parse_delivery_counter(None, "L2BRL") is None
    assert format_delivery_number(7, "L2BRL") == "L2BRL0007"


# ==================== Purchase order numbers ====================

async def add_order(db, number, company_code="1000"):
    db.add(PurchaseOrder(
        external_number=number,
        order_date=date(2025, 1, 10),
        company_code=company_code,
        recipient_id=1,
        vendor_id=1,
    ))
    await db.flush()


async def test_first_po_number_for_company(db, master_data, clock):
    service = DocumentNumberService(db, clock=clock)
    assert await service.next_purchase_order_number("1000") == "0000000001"


async def test_po_number_is_max_plus_one_per_company(db, master_data, clock):
    await add_order(db, "4500000007", "1000")
    await add_order(db, "4500000003", "1000")
    await add_order(db, "4500000099", "2000")
    await add_order(db, "4500000050-1", "1000")

    service = DocumentNumberService(db, clock=clock)

    assert await service.next_purchase_order_number("1000") == "4500000008"
    assert await service.next_purchase_order_number("2000") == "4500000100"
    assert await service.next_purchase_order_number("3000") == "0000000001"


async def test_requested_po_number_used_when_free(db, master_data, clock):
    service = DocumentNumberService(db, clock=clock)
    assert await service.next_purchase_order_number("1000", "4500000100") == "4500000100"


async def test_requested_po_number_bumped_on_collision(db, master_data, clock):
    await add_order(db, "4500000100")
    await add_order(db, "4500000101")

    service = DocumentNumberService(db, clock=clock)
    assert await service.next_purchase_order_number("1000", "4500000100") == "4500000102"


async def test_same_number_allowed_in_other_company(db, master_data, clock):
    await add_order(db, "4500000100", "1000")

    service = DocumentNumberService(db, clock=clock)
    assert await service.next_purchase_order_number("2000", "4500000100") == "4500000100"


async def test_po_number_exhausted(db, master_data, clock):
    for n in range(100, 110):
        await add_order(db, f"45000001{n - 100:02d}")

    service = DocumentNumberService(db, clock=clock, po_max_attempts=10)

    with pytest.raises(DocumentNumberExhaustedError) as exc_info:
        await service.next_purchase_order_number("1000", "4500000100")

    assert exc_info.value.status_code == 409
    assert exc_info.value.details["attempts"] == 10
    assert exc_info.value.details["first_candidate"] == "4500000100"
    assert exc_info.value.details["last_candidate"] == "4500000109"


async def test_non_numeric_requested_number_taken_is_exhausted(db, master_data, clock):
    await add_order(db, "PO-SPECIAL")

    service = DocumentNumberService(db, clock=clock)
    with pytest.raises(DocumentNumberExhaustedError):
        await service.next_purchase_order_number("1000", "PO-SPECIAL")


async def test_superscript_digits_are_not_numbers(db, master_data, clock):
    await add_order(db, "4500000007")
    await add_order(db, "45²")
    await add_order(db, "4500²")

    service = DocumentNumberService(db, clock=clock)

    assert await service.max_purchase_order_number("1000") == 4500000007
    with pytest.raises(DocumentNumberExhaustedError) as exc_info:
        await service.next_purchase_order_number("1000", "4500²")
    assert exc_info.value.details["attempts"] == 1


# ==================== Delivery note numbers ====================

async def add_note(db, internal, external):
    db.add(DeliveryNote(
        internal_number=internal,
        external_number=external,
        delivery_date=date(2025, 1, 10),
    ))
    await db.flush()


async def test_internal_number_kept_when_unused(db, clock):
    service = DocumentNumberService(db, clock=clock)
    assert await service.delivery_note_internal_number("LS-1") == "LS-1"


async def test_internal_number_gets_timestamp_suffix(db, clock):
    await add_note(db, "LS-1", "L2BRL0001")

    service = DocumentNumberService(db, clock=clock)
    assert await service.delivery_note_internal_number("LS-1") == f"LS-1-{clock.epoch_millis()}"


async def test_external_number_starts_at_one(db, clock):
    service = DocumentNumberService(db, clock=clock)
    assert await service.next_delivery_note_external_number() == "L2BRL0001"


async def test_external_number_uses_highest_counter(db, clock):
    await add_note(db, "A", "L2BRL0009")
    await add_note(db, "B", "L2BRL0012")
    await add_note(db, "C", "L2BRL0002")
    await add_note(db, "D", "L2BRLXYZ")
    await add_note(db, "E", "OTHER0099")

    service = DocumentNumberService(db, clock=clock)
    assert await service.next_delivery_note_external_number() == "L2BRL0013"


async def test_external_number_ignores_only_malformed_rows(db, clock):
    await add_note(db, "A", "L2BRL-OLD")

    service = DocumentNumberService(db, clock=clock)
    assert await service.next_delivery_note_external_number() == "L2BRL0001"
