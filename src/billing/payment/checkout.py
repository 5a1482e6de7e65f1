"""Checkout order creation — command and handler.

Opens a gateway order for a pending invoice and remembers the order id on
the invoice, so that a later payment callback can be matched back to the
invoice it was opened for.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from billing.domain import billing
from billing.gateway import get_gateway
from billing.invoice.invoice import Invoice
from billing.payment.exceptions import (
    AuthorizationError,
    InvoiceNotPayableError,
    PaymentOrderError,
)

logger = structlog.get_logger(__name__)


@billing.command(part_of="Invoice")
class CreatePaymentOrder:
    """Open a gateway checkout order for an invoice."""

    invoice_id = Identifier(required=True)
    requested_by = Identifier(required=True)


@billing.command_handler(part_of=Invoice)
class CreatePaymentOrderHandler:
    @handle(CreatePaymentOrder)
    def create_payment_order(self, command):
        repo = current_domain.repository_for(Invoice)
        try:
            invoice = repo.get(command.invoice_id)
        except ObjectNotFoundError as exc:
            raise InvoiceNotPayableError("Invoice not found") from exc

        if str(invoice.customer_id) != str(command.requested_by):
            raise AuthorizationError()
        if not invoice.is_pending:
            raise InvoiceNotPayableError()

        gateway = get_gateway()
        result = gateway.create_order(
            amount=invoice.amount_in_subunits,
            currency=invoice.currency,
            receipt=invoice.invoice_number,
            notes={"invoice_id": str(invoice.id)},
        )
        if not result.success:
            logger.warning(
                "Gateway order creation failed",
                invoice_id=str(invoice.id),
                reason=result.failure_reason,
            )
            raise PaymentOrderError()

        invoice.attach_gateway_order(result.order_id)
        repo.add(invoice)

        logger.info("Checkout order opened", invoice_id=str(invoice.id), order_id=result.order_id)
        return {
            "order_id": result.order_id,
            "amount": result.amount,
            "currency": result.currency,
            "key_id": gateway.key_id,
        }
