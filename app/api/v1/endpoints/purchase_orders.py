"""API endpoints for purchase order creation."""
import logging

from fastapi import APIRouter, status

from app.api.deps import DB, AppClock, RateCache, Resolver
from app.core.exceptions import DocumentError
from app.schemas.purchase import (
    PurchaseOrderCreate,
    PurchaseOrderCreateResponse,
    PurchaseOrderResponse,
    PurchaseOrderItemResponse,
)
from app.services.purchase_order_service import PurchaseOrderService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=PurchaseOrderCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase_order(
    po_in: PurchaseOrderCreate,
    db: DB,
    rate_cache: RateCache,
    resolver: Resolver,
    clock: AppClock,
):
    """
    Create a purchase order with its line items.

    The company code is taken from the recipient. Item amounts in another
    currency are converted into the company currency. An order number is
    generated when none is supplied.
    """
    service = PurchaseOrderService(db, rate_cache, resolver, clock=clock)
    try:
        order, items = await service.create(po_in)
    except DocumentError as e:
        logger.warning(f"Rejected purchase order: {e.error_code} {e.message}")
        raise
    except Exception:
        logger.error(
            f"Error creating purchase order, request body: {po_in.model_dump_json(by_alias=True)}",
            exc_info=True,
        )
        raise

    return PurchaseOrderCreateResponse(
        order=PurchaseOrderResponse.model_validate(order),
        items=[PurchaseOrderItemResponse.model_validate(item) for item in items],
    )
