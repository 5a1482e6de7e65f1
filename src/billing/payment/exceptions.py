"""Payment settlement exceptions.

Every failure of the checkout and verification flows is one of these.
``message`` is safe to return to the caller verbatim; it never contains
secrets or expected signatures.
"""


class PaymentVerificationError(Exception):
    """Base exception for payment settlement errors"""

    message = "Unknown error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class AuthorizationError(PaymentVerificationError):
    """Raised when the caller is missing or cannot be resolved"""

    message = "Unauthorized"


class SignatureMismatchError(PaymentVerificationError):
    """Raised when the gateway signature does not match the order and payment ids"""

    message = "Invalid payment signature"


class InvoiceUpdateError(PaymentVerificationError):
    """Raised when the invoice cannot be settled (unknown, not payable, or store failure)"""

    message = "Failed to update invoice"


class OrderMismatchError(PaymentVerificationError):
    """Raised when the signed order belongs to a different invoice"""

    message = "Payment order does not match invoice"


class InvoiceNotPayableError(PaymentVerificationError):
    """Raised when a checkout is requested for an invoice that is not pending"""

    message = "Invoice is not payable"


class PaymentOrderError(PaymentVerificationError):
    """Raised when the gateway refuses to open a checkout order"""

    message = "Failed to create payment order"
