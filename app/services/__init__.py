# Services module
from app.services.currency_service import CurrencyResolver, CompanyCurrencyMap
from app.services.exchange_rate_cache import ExchangeRateCache
from app.services.document_number_service import DocumentNumberService

# Document services
from app.services.purchase_order_service import PurchaseOrderService
from app.services.delivery_note_service import DeliveryNoteService, PurchaseOrderItemResolver

__all__ = [
    "CurrencyResolver",
    "CompanyCurrencyMap",
    "ExchangeRateCache",
    "DocumentNumberService",
    # Documents
    "PurchaseOrderService",
    "DeliveryNoteService",
    "PurchaseOrderItemResolver",
]
