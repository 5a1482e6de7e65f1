"""Invoice generation — command and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from billing.domain import billing
from billing.invoice.invoice import Invoice


@billing.command(part_of="Invoice")
class GenerateInvoice:
    """Raise an invoice for a completed service request."""

    service_request_id = Identifier(required=True)
    mechanic_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {description, quantity, unit_price}
    tax_rate = Float(default=0.0)
    currency = String(max_length=3, default="INR")
    notes = Text()
    invoice_number = String(max_length=50)


@billing.command_handler(part_of=Invoice)
class GenerateInvoiceHandler:
    @handle(GenerateInvoice)
    def generate_invoice(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        invoice = Invoice.create(
            service_request_id=command.service_request_id,
            mechanic_id=command.mechanic_id,
            customer_id=command.customer_id,
            items_data=items_data,
            tax_rate=command.tax_rate or 0.0,
            currency=command.currency or "INR",
            notes=command.notes,
            invoice_number=command.invoice_number,
        )
        current_domain.repository_for(Invoice).add(invoice)
        return str(invoice.id)
