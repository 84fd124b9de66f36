"""
Error taxonomy for document creation.

Every failure that the caller can act on is a DocumentError carrying a
machine-readable error_code, an HTTP status and optional details. The
exception handler in app.main renders them as:

    {"error": "<error_code>", "detail": "<message>", "details": {...}}

Anything that is not a DocumentError (database outages, driver errors)
is logged server-side and surfaced as a generic 500.
"""
from typing import Any, Dict, Optional


class DocumentError(Exception):
    """Base exception for purchase order / delivery note workflows."""
    status_code: int = 400
    default_error_code: str = "DOCUMENT_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "detail": self.message,
            "details": self.details,
        }


class InputValidationError(DocumentError):
    """Request data is malformed or inconsistent. Nothing was written."""
    status_code = 400
    default_error_code = "INVALID_INPUT"


class DeliveryDateOutOfRangeError(InputValidationError):
    """Delivery date lies outside the accepted window around today."""
    default_error_code = "DELIVERY_DATE_OUT_OF_RANGE"


class ReferenceNotFoundError(DocumentError):
    """Recipient or vendor referenced by an order does not exist."""
    status_code = 403
    default_error_code = "REFERENCE_NOT_FOUND"


class ReferenceDataError(DocumentError):
    """A line item uses a unit or tax code that is unknown or no longer valid."""
    status_code = 422
    default_error_code = "INVALID_REFERENCE_DATA"


class DocumentNumberExhaustedError(DocumentError):
    """No free document number was found within the retry budget."""
    status_code = 409
    default_error_code = "DOCUMENT_NUMBER_EXHAUSTED"


class UnresolvableLinkError(DocumentError):
    """A delivery note item cannot be linked to any purchase order item."""
    status_code = 422
    default_error_code = "UNRESOLVABLE_ORDER_ITEM"
