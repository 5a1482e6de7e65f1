"""Settle an invoice from a gateway payment callback.

The checkout widget hands the client three gateway tokens (order id,
payment id, signature). The client posts them here together with the
invoice id. The call is authenticated, the signature checked against the
shared secret, the invoice moved from pending to paid, and both parties
notified.

Flow:
    1. Resolve the bearer token to a user
    2. Parse the callback body
    3. Verify HMAC-SHA256(secret, "order_id|payment_id") == signature
    4. VerifyInvoicePayment: pending → paid, once
    5. Re-read the invoice and notify mechanic and customer

Settlement is conditional on the invoice still being pending. A second
valid callback for a paid invoice is reported as ``already_settled`` and
sends no notifications.
"""

import json
from dataclasses import dataclass, field

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from pydantic import BaseModel

from billing.domain import billing
from billing.gateway.port import PaymentGateway
from billing.invoice.invoice import Invoice, InvoiceStatus
from billing.payment.exceptions import (
    AuthorizationError,
    InvoiceUpdateError,
    OrderMismatchError,
    PaymentVerificationError,
    SignatureMismatchError,
)
from billing.payment.notices import send_settlement_notices
from shared.auth import extract_bearer_token
from shared.auth.port import IdentityProvider

logger = structlog.get_logger(__name__)

SETTLED = "settled"
ALREADY_SETTLED = "already_settled"


@billing.command(part_of="Invoice")
class VerifyInvoicePayment:
    """Settle an invoice with a signature-verified gateway payment."""

    invoice_id = Identifier(required=True)
    razorpay_order_id = String(max_length=255)
    razorpay_payment_id = String(required=True, max_length=255)
    razorpay_signature = String(required=True, max_length=255)


@billing.command_handler(part_of=Invoice)
class VerifyInvoicePaymentHandler:
    @handle(VerifyInvoicePayment)
    def verify_invoice_payment(self, command):
        repo = current_domain.repository_for(Invoice)
        try:
            invoice = repo.get(command.invoice_id)
        except ObjectNotFoundError as exc:
            raise InvoiceUpdateError() from exc

        # The signed order must be the one opened for this invoice, and an
        # order opened for another invoice cannot settle this one.
        if invoice.razorpay_order_id:
            if invoice.razorpay_order_id != command.razorpay_order_id:
                raise OrderMismatchError()
        else:
            owner = repo.find_by_order_id(command.razorpay_order_id)
            if owner is not None and str(owner.id) != str(invoice.id):
                raise OrderMismatchError()

        if invoice.status == InvoiceStatus.PAID.value:
            return ALREADY_SETTLED

        try:
            invoice.mark_paid(
                order_id=command.razorpay_order_id,
                payment_id=command.razorpay_payment_id,
                signature=command.razorpay_signature,
            )
        except ValidationError as exc:
            raise InvoiceUpdateError() from exc

        repo.add(invoice)
        return SETTLED


class VerificationRequest(BaseModel):
    """Callback body. Fields are only checked for presence."""

    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None
    invoice_id: str | None = None


@dataclass(frozen=True)
class VerificationResult:
    invoice_id: str
    already_settled: bool = False
    notification_ids: list[str] = field(default_factory=list)


def parse_verification_request(body: bytes | str | None) -> VerificationRequest:
    """Decode the JSON callback body. Anything but a JSON object is a generic failure."""
    try:
        payload = json.loads(body or b"{}")
    except ValueError as exc:
        raise PaymentVerificationError() from exc
    if not isinstance(payload, dict):
        raise PaymentVerificationError()

    # Non-string tokens are coerced so they simply fail the signature check.
    return VerificationRequest(
        **{
            name: None if payload.get(name) is None else str(payload[name])
            for name in VerificationRequest.model_fields
        }
    )


class InvoicePaymentVerifier:
    """Runs the verification flow for one callback.

    Must be called inside the billing domain context.
    """

    def __init__(self, gateway: PaymentGateway, identity_provider: IdentityProvider) -> None:
        self.gateway = gateway
        self.identity_provider = identity_provider

    def authenticate(self, authorization: str | None):
        if not authorization:
            raise AuthorizationError("Missing authorization header")

        user = self.identity_provider.get_user(extract_bearer_token(authorization))
        if user is None:
            raise AuthorizationError()
        return user

    def verify(self, authorization: str | None, body: bytes | str | None) -> VerificationResult:
        user = self.authenticate(authorization)
        request = parse_verification_request(body)

        order_id = request.razorpay_order_id or ""
        payment_id = request.razorpay_payment_id or ""
        signature = request.razorpay_signature or ""
        invoice_id = request.invoice_id or ""

        if not self.gateway.verify_payment_signature(order_id, payment_id, signature):
            logger.warning(
                "Payment signature rejected",
                invoice_id=invoice_id,
                order_id=order_id,
            )
            raise SignatureMismatchError()

        if not invoice_id:
            raise InvoiceUpdateError()

        try:
            outcome = current_domain.process(
                VerifyInvoicePayment(
                    invoice_id=invoice_id,
                    razorpay_order_id=order_id,
                    razorpay_payment_id=payment_id,
                    razorpay_signature=signature,
                ),
                asynchronous=False,
            )
        except PaymentVerificationError:
            raise
        except Exception as exc:
            logger.exception("Invoice settlement failed", invoice_id=invoice_id)
            raise InvoiceUpdateError() from exc

        if outcome == ALREADY_SETTLED:
            logger.info("Invoice already settled", invoice_id=invoice_id, user_id=user.id)
            return VerificationResult(invoice_id=invoice_id, already_settled=True)

        invoice = current_domain.repository_for(Invoice).get(invoice_id)
        logger.info(
            "Invoice settled",
            invoice_id=invoice_id,
            invoice_number=invoice.invoice_number,
            payment_id=payment_id,
            user_id=user.id,
        )

        notification_ids = send_settlement_notices(invoice)
        return VerificationResult(invoice_id=invoice_id, notification_ids=notification_ids)
