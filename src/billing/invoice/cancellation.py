"""Invoice cancellation — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from billing.domain import billing
from billing.invoice.invoice import Invoice


@billing.command(part_of="Invoice")
class CancelInvoice:
    """Withdraw an unpaid invoice."""

    invoice_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@billing.command_handler(part_of=Invoice)
class CancelInvoiceHandler:
    @handle(CancelInvoice)
    def cancel_invoice(self, command):
        repo = current_domain.repository_for(Invoice)
        invoice = repo.get(command.invoice_id)
        invoice.cancel(reason=command.reason)
        repo.add(invoice)
