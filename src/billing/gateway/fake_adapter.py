"""Configurable fake payment gateway for development and testing.

Order creation is simulated in memory and can be configured at runtime to
succeed or fail. Signature verification is NOT faked: it runs the real
HMAC check with the fake key secret, so tests sign callbacks with
``compute_payment_signature(gateway.key_secret, ...)`` exactly as the
gateway would.
"""

from uuid import uuid4

from billing.gateway.port import OrderResult, PaymentGateway
from billing.gateway.signature import compute_payment_signature, verify_payment_signature


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, key_id: str = "rzp_test_fake", key_secret: str = "fake_secret") -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Order creation failed"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Order creation failed") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> OrderResult:
        self.calls.append(
            {
                "method": "create_order",
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
                "notes": notes,
            }
        )

        if self.should_succeed:
            return OrderResult(
                success=True,
                order_id=f"order_{uuid4().hex[:14]}",
                amount=amount,
                currency=currency,
            )
        return OrderResult(success=False, failure_reason=self.failure_reason)

    def sign(self, order_id: str, payment_id: str) -> str:
        """Produce the signature the gateway would attach to a successful charge."""
        return compute_payment_signature(self.key_secret, order_id, payment_id)

    def verify_payment_signature(
        self,
        order_id: str | None,
        payment_id: str | None,
        signature: str | None,
    ) -> bool:
        self.calls.append({"method": "verify_payment_signature", "order_id": order_id, "payment_id": payment_id})
        return verify_payment_signature(self.key_secret, order_id, payment_id, signature)
