"""Invoice aggregate (CQRS) — billing for a completed roadside job.

A mechanic raises an invoice once the job is done. The customer pays it
through the gateway checkout; a verified payment callback settles it.

State Machine:
    PENDING → PAID        (verified gateway payment)
    PENDING → CANCELLED   (withdrawn by the mechanic)

PAID and CANCELLED are terminal. Gateway payment id and signature stay
empty until the PAID transition.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String, Text

from billing.domain import billing
from billing.invoice.events import (
    InvoiceCancelled,
    InvoiceGenerated,
    InvoiceOrderCreated,
    InvoicePaid,
)


class InvoiceStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    InvoiceStatus.PENDING: {InvoiceStatus.PAID, InvoiceStatus.CANCELLED},
    InvoiceStatus.PAID: set(),  # Terminal
    InvoiceStatus.CANCELLED: set(),  # Terminal
}


def _money(value: float) -> float:
    return round(float(value), 2)


@billing.entity(part_of="Invoice")
class InvoiceItem:
    """A billed service or part on an invoice."""

    description = String(required=True, max_length=500)
    quantity = Float(required=True)
    unit_price = Float(required=True)
    total_price = Float(required=True)


@billing.aggregate
class Invoice:
    invoice_number = String(required=True, max_length=50)
    service_request_id = Identifier(required=True)
    mechanic_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = HasMany(InvoiceItem)
    subtotal = Float(default=0.0)
    tax_rate = Float(default=0.0)
    tax_amount = Float(default=0.0)
    total_amount = Float(default=0.0)
    currency = String(max_length=3, default="INR")
    notes = Text()
    status = String(
        choices=InvoiceStatus,
        default=InvoiceStatus.PENDING.value,
    )

    # Gateway correlation
    razorpay_order_id = String(max_length=255)
    razorpay_payment_id = String(max_length=255)
    razorpay_signature = String(max_length=255)

    paid_at = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    def _assert_can_transition(self, target_status: InvoiceStatus) -> None:
        current = InvoiceStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @classmethod
    def create(
        cls,
        service_request_id: str,
        mechanic_id: str,
        customer_id: str,
        items_data: list[dict],
        tax_rate: float = 0.0,
        currency: str = "INR",
        notes: str | None = None,
        invoice_number: str | None = None,
    ):
        """Raise a new pending invoice for a service request."""
        if not items_data:
            raise ValidationError({"items": ["An invoice needs at least one item"]})

        now = datetime.now(UTC)
        invoice_number = invoice_number or f"INV-{uuid4().hex[:8].upper()}"

        items = []
        subtotal = 0.0
        for item_data in items_data:
            item_total = _money(item_data["quantity"] * item_data["unit_price"])
            items.append(
                InvoiceItem(
                    description=item_data["description"],
                    quantity=item_data["quantity"],
                    unit_price=item_data["unit_price"],
                    total_price=item_total,
                )
            )
            subtotal += item_total

        subtotal = _money(subtotal)
        tax_amount = _money(subtotal * (tax_rate or 0.0) / 100)
        total = _money(subtotal + tax_amount)
        if total <= 0:
            raise ValidationError({"total_amount": ["Invoice total must be positive"]})

        invoice = cls(
            invoice_number=invoice_number,
            service_request_id=service_request_id,
            mechanic_id=mechanic_id,
            customer_id=customer_id,
            subtotal=subtotal,
            tax_rate=tax_rate or 0.0,
            tax_amount=tax_amount,
            total_amount=total,
            currency=currency,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            invoice.add_items(item)

        invoice.raise_(
            InvoiceGenerated(
                invoice_id=str(invoice.id),
                invoice_number=invoice_number,
                service_request_id=service_request_id,
                mechanic_id=mechanic_id,
                customer_id=customer_id,
                total_amount=total,
                currency=currency,
                generated_at=now,
            )
        )
        return invoice

    @property
    def is_pending(self) -> bool:
        return self.status == InvoiceStatus.PENDING.value

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID.value

    @property
    def amount_in_subunits(self) -> int:
        """Total in the currency's smallest unit, as the gateway expects it."""
        return int(round(self.total_amount * 100))

    def attach_gateway_order(self, order_id: str) -> None:
        """Record the checkout order opened for this invoice."""
        if not self.is_pending:
            raise ValidationError({"status": [f"Cannot open a payment order for a {self.status} invoice"]})

        now = datetime.now(UTC)
        self.razorpay_order_id = order_id
        self.updated_at = now
        self.raise_(
            InvoiceOrderCreated(
                invoice_id=str(self.id),
                razorpay_order_id=order_id,
                created_at=now,
            )
        )

    def mark_paid(self, order_id: str, payment_id: str, signature: str) -> None:
        """Settle the invoice with a verified gateway payment."""
        self._assert_can_transition(InvoiceStatus.PAID)
        now = datetime.now(UTC)
        self.status = InvoiceStatus.PAID.value
        self.razorpay_order_id = self.razorpay_order_id or order_id
        self.razorpay_payment_id = payment_id
        self.razorpay_signature = signature
        self.paid_at = now
        self.updated_at = now
        self.raise_(
            InvoicePaid(
                invoice_id=str(self.id),
                invoice_number=self.invoice_number,
                service_request_id=str(self.service_request_id),
                mechanic_id=str(self.mechanic_id),
                customer_id=str(self.customer_id),
                total_amount=self.total_amount,
                razorpay_order_id=self.razorpay_order_id,
                razorpay_payment_id=payment_id,
                paid_at=now,
            )
        )

    def cancel(self, reason: str) -> None:
        """Withdraw an unpaid invoice."""
        self._assert_can_transition(InvoiceStatus.CANCELLED)
        now = datetime.now(UTC)
        self.status = InvoiceStatus.CANCELLED.value
        self.cancelled_at = now
        self.cancellation_reason = reason
        self.updated_at = now
        self.raise_(
            InvoiceCancelled(
                invoice_id=str(self.id),
                reason=reason,
                cancelled_at=now,
            )
        )
