"""Domain events for the Invoice aggregate.

All events are versioned, immutable facts representing invoice state changes.
"""

from protean.fields import DateTime, Float, Identifier, String

from billing.domain import billing


@billing.event(part_of="Invoice")
class InvoiceGenerated:
    """A mechanic raised an invoice for a completed service request."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    invoice_number = String(required=True)
    service_request_id = Identifier(required=True)
    mechanic_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    currency = String(required=True)
    generated_at = DateTime(required=True)


@billing.event(part_of="Invoice")
class InvoiceOrderCreated:
    """A gateway checkout order was opened for the invoice."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    razorpay_order_id = String(required=True)
    created_at = DateTime(required=True)


@billing.event(part_of="Invoice")
class InvoicePaid:
    """A verified gateway payment settled the invoice."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    invoice_number = String(required=True)
    service_request_id = Identifier(required=True)
    mechanic_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    razorpay_order_id = String(required=True)
    razorpay_payment_id = String(required=True)
    paid_at = DateTime(required=True)


@billing.event(part_of="Invoice")
class InvoiceCancelled:
    """An unpaid invoice was withdrawn."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    reason = String(required=True)
    cancelled_at = DateTime(required=True)
