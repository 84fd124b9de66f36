from fastapi import APIRouter

from app.api.v1.endpoints import (
    # Documents
    purchase_orders,
    delivery_notes,
    saved_data,
    # Master Data
    vendors,
    recipients,
    articles,
    # Reference Data
    units,
    tax_codes,
    exchange_rates,
)


api_router = APIRouter(prefix="/api/v1")


# ==================== Purchase Orders ====================
api_router.include_router(
    purchase_orders.router,
    prefix="/purchase-orders",
    tags=["Purchase Orders"]
)

# ==================== Delivery Notes ====================
api_router.include_router(
    delivery_notes.router,
    prefix="/delivery-notes",
    tags=["Delivery Notes"]
)

# ==================== Saved Documents ====================
api_router.include_router(
    saved_data.router,
    prefix="/saved-data",
    tags=["Saved Documents"]
)

# ==================== Vendors ====================
api_router.include_router(
    vendors.router,
    prefix="/vendors",
    tags=["Vendors"]
)

# ==================== Recipients ====================
api_router.include_router(
    recipients.router,
    prefix="/recipients",
    tags=["Recipients"]
)

# ==================== Articles (Materials) ====================
api_router.include_router(
    articles.router,
    prefix="/articles",
    tags=["Articles"]
)

# ==================== Reference Data ====================
api_router.include_router(
    units.router,
    prefix="/units",
    tags=["Reference Data"]
)
api_router.include_router(
    tax_codes.router,
    prefix="/taxcodes",
    tags=["Reference Data"]
)
api_router.include_router(
    exchange_rates.router,
    prefix="/exchangerates",
    tags=["Reference Data"]
)
