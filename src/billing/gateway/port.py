"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and RazorpayGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OrderResult:
    """Result of a checkout order creation attempt."""

    success: bool
    order_id: str | None = None
    amount: int | None = None  # smallest currency unit (paise)
    currency: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    key_id: str

    @abstractmethod
    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> OrderResult:
        """Create a checkout order the client widget can pay against."""
        ...

    @abstractmethod
    def verify_payment_signature(
        self,
        order_id: str | None,
        payment_id: str | None,
        signature: str | None,
    ) -> bool:
        """Verify that a payment callback is authentically from the gateway."""
        ...
