"""Repository for the Invoice aggregate."""

from billing.domain import billing
from billing.invoice.invoice import Invoice


@billing.repository(part_of=Invoice)
class InvoiceRepository:
    def find_by_order_id(self, order_id: str) -> Invoice | None:
        """Find the invoice a gateway checkout order was opened for."""
        if not order_id:
            return None
        invoices = self._dao.query.filter(razorpay_order_id=order_id).limit(None).all().items
        return invoices[0] if invoices else None

    def find_for_party(self, user_id: str) -> list[Invoice]:
        """Invoices where the user is the mechanic or the customer."""
        as_mechanic = self._dao.query.filter(mechanic_id=user_id).limit(None).all().items
        as_customer = self._dao.query.filter(customer_id=user_id).limit(None).all().items
        seen = {str(invoice.id): invoice for invoice in [*as_mechanic, *as_customer]}
        return sorted(seen.values(), key=lambda invoice: invoice.created_at, reverse=True)
