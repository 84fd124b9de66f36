"""API tests for purchase order creation."""
from decimal import Decimal

import pytest
from sqlalchemy import event, select, func
from sqlalchemy.exc import OperationalError

from app.models import PurchaseOrder, PurchaseOrderItem
from app.schemas.purchase import PurchaseOrderCreate
from app.services.purchase_order_service import PurchaseOrderService


URL = "/api/v1/purchase-orders"


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def test_create_same_currency(client, make_po_payload, master_data):
    response = await client.post(URL, json=make_po_payload(recipient_id=1, vendor_id=2))

    assert response.status_code == 201
    body = response.json()
    order = body["order"]
    assert order["external_number"] == "0000000001"
    assert order["company_code"] == "1000"
    assert order["recipient_id"] == 1
    assert order["vendor_id"] == 2
    assert order["order_date"] == "2025-01-10"

    [item] = body["items"]
    assert item["line_number"] == "01"
    assert item["purchase_order_id"] == order["id"]
    assert Decimal(item["net_amount"]) == Decimal("100")
    assert item["currency"] == "EUR"
    assert item["gr_expected"] is True


async def test_amount_converted_to_company_currency(client, make_po_payload, master_data):
    payload = make_po_payload(recipient_id=2, vendor_id=1)

    response = await client.post(URL, json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["order"]["company_code"] == "2000"
    [item] = body["items"]
    assert Decimal(item["net_amount"]) == Decimal("85.00")
    assert item["currency"] == "GBP"


async def test_conversion_between_non_base_currencies(client, make_po_payload, master_data):
    items = [{"netAmount": 85, "quantity": 1, "unit": "ST", "currency": "GBP"}]

    response = await client.post(URL, json=make_po_payload(recipient_id=3, items=items))

    assert response.status_code == 201
    [item] = response.json()["items"]
    assert Decimal(item["net_amount"]) == Decimal("95.00")
    assert item["currency"] == "CHF"


async def test_item_currency_case_insensitive(client, make_po_payload, master_data):
    items = [{"netAmount": 100, "quantity": 1, "currency": "gbp"}]

    response = await client.post(URL, json=make_po_payload(recipient_id=2, items=items))

    [item] = response.json()["items"]
    assert Decimal(item["net_amount"]) == Decimal("100")
    assert item["currency"] == "GBP"


async def test_missing_item_currency_means_base_currency(client, make_po_payload, master_data):
    items = [{"netAmount": 10, "quantity": 1}]

    response = await client.post(URL, json=make_po_payload(recipient_id=2, items=items))

    [item] = response.json()["items"]
    assert Decimal(item["net_amount"]) == Decimal("8.50")
    assert item["currency"] == "GBP"


async def test_upper_limit_amount_not_converted(client, make_po_payload, master_data):
    items = [{"netAmount": 100, "quantity": 1, "currency": "EUR", "upperLimitAmount": 500}]

    response = await client.post(URL, json=make_po_payload(recipient_id=2, items=items))

    [item] = response.json()["items"]
    assert Decimal(item["upper_limit_amount"]) == Decimal("500")


async def test_same_currency_amounts_rounded_to_two_places(client, make_po_payload, master_data, session_factory):
    items = [{"netAmount": "100.555", "quantity": 1, "currency": "EUR", "upperLimitAmount": "20.004"}]

    response = await client.post(URL, json=make_po_payload(recipient_id=1, items=items))

    assert response.status_code == 201
    [item] = response.json()["items"]
    assert item["net_amount"] == "100.56"
    assert item["upper_limit_amount"] == "20.00"

    async with session_factory() as session:
        stored = (await session.execute(select(PurchaseOrderItem))).scalar_one()
    assert stored.net_amount == Decimal("100.56")


async def test_line_numbers_and_fields(client, make_po_payload, master_data):
    items = [
        {"type": "NB", "customerArticleNumber": "C-1", "vendorArticleNumber": "V-1",
         "description": "Bolt", "taxCode": "V1", "taxRate": 0.19,
         "netAmount": 10, "quantity": 5, "unit": "ST", "currency": "EUR"},
        {"netAmount": 20, "quantity": 1, "unit": "KG", "grExpected": False},
    ]

    response = await client.post(URL, json=make_po_payload(items=items))

    assert response.status_code == 201
    first, second = response.json()["items"]
    assert [first["line_number"], second["line_number"]] == ["01", "02"]
    assert first["item_type"] == "NB"
    assert first["customer_article_number"] == "C-1"
    assert first["vendor_article_number"] == "V-1"
    assert first["tax_code"] == "V1"
    assert Decimal(first["tax_rate"]) == Decimal("0.19")
    assert Decimal(second["tax_rate"]) == Decimal("0")
    assert second["gr_expected"] is False


async def test_sequential_numbers(client, make_po_payload, master_data):
    first = await client.post(URL, json=make_po_payload())
    second = await client.post(URL, json=make_po_payload())

    assert first.json()["order"]["external_number"] == "0000000001"
    assert second.json()["order"]["external_number"] == "0000000002"


async def test_numbers_are_per_company(client, make_po_payload, master_data):
    await client.post(URL, json=make_po_payload(recipient_id=1))
    response = await client.post(URL, json=make_po_payload(recipient_id=2))

    assert response.json()["order"]["external_number"] == "0000000001"


async def test_requested_number_honoured_then_bumped(client, make_po_payload, master_data):
    first = await client.post(URL, json=make_po_payload(externalNumber="4500000100"))
    second = await client.post(URL, json=make_po_payload(externalNumber="4500000100"))
    third = await client.post(URL, json=make_po_payload())

    assert first.json()["order"]["external_number"] == "4500000100"
    assert second.json()["order"]["external_number"] == "4500000101"
    assert third.json()["order"]["external_number"] == "4500000102"


async def test_number_exhausted_returns_409(client, make_po_payload, master_data, session_factory):
    await client.post(URL, json=make_po_payload(externalNumber="PO-SPECIAL"))

    response = await client.post(URL, json=make_po_payload(externalNumber="PO-SPECIAL"))

    assert response.status_code == 409
    assert response.json()["error"] == "DOCUMENT_NUMBER_EXHAUSTED"
    assert await count_rows(session_factory, PurchaseOrder) == 1


async def test_recipient_company_overrides_request(client, make_po_payload, master_data):
    response = await client.post(URL, json=make_po_payload(recipient_id=2, companyCode="1000"))

    assert response.json()["order"]["company_code"] == "2000"


async def test_terms_of_payment_default(client, make_po_payload, master_data):
    default = await client.post(URL, json=make_po_payload())
    explicit = await client.post(URL, json=make_po_payload(termsOfPaymentId=3))

    assert default.json()["order"]["terms_of_payment_id"] == 1
    assert explicit.json()["order"]["terms_of_payment_id"] == 3


async def test_unknown_vendor_returns_403(client, make_po_payload, master_data, session_factory):
    response = await client.post(URL, json=make_po_payload(vendor_id=99))

    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "REFERENCE_NOT_FOUND"
    assert body["detail"] == "Invalid recipient-vendor combination"
    assert body["details"]["vendor_found"] is False
    assert await count_rows(session_factory, PurchaseOrder) == 0


async def test_unknown_recipient_returns_403(client, make_po_payload, master_data):
    response = await client.post(URL, json=make_po_payload(recipient_id=99))

    assert response.status_code == 403
    assert response.json()["details"]["recipient_found"] is False


async def test_invalid_unit_rejects_whole_order(client, make_po_payload, master_data, session_factory):
    items = [
        {"netAmount": 10, "quantity": 1, "unit": "ST"},
        {"netAmount": 20, "quantity": 1, "unit": "XX"},
    ]

    response = await client.post(URL, json=make_po_payload(items=items))

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "INVALID_UNIT"
    assert body["details"] == {"unit": "XX", "line_number": "02"}
    assert await count_rows(session_factory, PurchaseOrder) == 0
    assert await count_rows(session_factory, PurchaseOrderItem) == 0


async def test_unit_of_other_language_rejected(client, make_po_payload, master_data):
    items = [{"netAmount": 10, "quantity": 1, "unit": "PC"}]

    response = await client.post(URL, json=make_po_payload(items=items))

    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_UNIT"


async def test_invalid_tax_code_rejects_whole_order(client, make_po_payload, master_data, session_factory):
    items = [
        {"netAmount": 10, "quantity": 1, "taxCode": "V1"},
        {"netAmount": 20, "quantity": 1, "taxCode": "VX"},
    ]

    response = await client.post(URL, json=make_po_payload(items=items))

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "INVALID_TAX_CODE"
    assert body["details"]["company_code"] == "1000"
    assert await count_rows(session_factory, PurchaseOrder) == 0


async def test_tax_code_checked_against_recipient_company(client, make_po_payload, master_data):
    # V1 exists for 1000 and 2000 but not for 3000
    items = [{"netAmount": 10, "quantity": 1, "taxCode": "V1"}]

    ok = await client.post(URL, json=make_po_payload(recipient_id=2, items=items))
    rejected = await client.post(URL, json=make_po_payload(recipient_id=3, items=items))

    assert ok.status_code == 201
    assert rejected.status_code == 422


async def test_empty_items_rejected(client, make_po_payload, master_data, session_factory):
    response = await client.post(URL, json=make_po_payload(items=[]))

    assert response.status_code == 422
    assert await count_rows(session_factory, PurchaseOrder) == 0


async def test_non_positive_quantity_rejected(client, make_po_payload, master_data):
    items = [{"netAmount": 10, "quantity": 0}]

    response = await client.post(URL, json=make_po_payload(items=items))

    assert response.status_code == 422


async def test_failure_after_header_insert_rolls_back_order(
    db, clock, rate_cache, resolver, master_data, session_factory, make_po_payload
):
    service = PurchaseOrderService(db, rate_cache, resolver, clock=clock)
    data = PurchaseOrderCreate.model_validate(make_po_payload())

    def fail_item_insert(mapper, connection, target):
        raise OperationalError("INSERT INTO purchase_order_items", {}, Exception("disk I/O error"))

    event.listen(PurchaseOrderItem, "before_insert", fail_item_insert)
    try:
        with pytest.raises(OperationalError):
            await service.create(data)
    finally:
        event.remove(PurchaseOrderItem, "before_insert", fail_item_insert)

    assert await count_rows(session_factory, PurchaseOrder) == 0
    assert await count_rows(session_factory, PurchaseOrderItem) == 0

    order, items = await service.create(data)
    assert order.external_number == "0000000001"
    assert len(items) == 1
