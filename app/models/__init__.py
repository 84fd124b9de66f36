"""ORM models. Importing this package registers every table with Base.metadata."""
from app.models.master_data import Vendor, Recipient, RecipientVendor, Material
from app.models.reference_data import Unit, TaxCode, ExchangeRate
from app.models.purchase import PurchaseOrder, PurchaseOrderItem
from app.models.delivery import DeliveryNote, DeliveryNoteItem

__all__ = [
    "Vendor",
    "Recipient",
    "RecipientVendor",
    "Material",
    "Unit",
    "TaxCode",
    "ExchangeRate",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "DeliveryNote",
    "DeliveryNoteItem",
]
