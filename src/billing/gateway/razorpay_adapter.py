"""Razorpay payment gateway adapter.

Orders are created through the Razorpay REST API (basic auth with the key
id and key secret). Payment callbacks are verified locally: Razorpay signs
``order_id|payment_id`` with the key secret, so no API round-trip is needed.
"""

import requests
import structlog

from billing.gateway.port import OrderResult, PaymentGateway
from billing.gateway.signature import verify_payment_signature

logger = structlog.get_logger(__name__)

RAZORPAY_API_URL = "https://api.razorpay.com/v1"


class RazorpayGateway(PaymentGateway):
    """Production Razorpay gateway adapter."""

    def __init__(
        self,
        key_id: str | None,
        key_secret: str,
        base_url: str = RAZORPAY_API_URL,
        timeout: float = 10.0,
    ) -> None:
        self.key_id = key_id or ""
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> OrderResult:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        try:
            response = requests.post(
                f"{self.base_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Razorpay order request failed", receipt=receipt, error=type(exc).__name__)
            return OrderResult(success=False, failure_reason="Gateway unreachable")

        if not response.ok:
            logger.warning(
                "Razorpay rejected order",
                receipt=receipt,
                status_code=response.status_code,
            )
            return OrderResult(success=False, failure_reason=f"Gateway returned {response.status_code}")

        data = response.json()
        return OrderResult(
            success=True,
            order_id=data["id"],
            amount=data.get("amount", amount),
            currency=data.get("currency", currency),
        )

    def verify_payment_signature(
        self,
        order_id: str | None,
        payment_id: str | None,
        signature: str | None,
    ) -> bool:
        return verify_payment_signature(self.key_secret, order_id, payment_id, signature)
