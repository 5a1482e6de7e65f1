"""Billing bounded context — Invoicing and Payment Settlement.

Handles invoices raised by mechanics for completed jobs, gateway checkout
order creation, and verification of gateway payment callbacks that settle
an invoice and notify both parties.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_dir=None)

logger = get_logger(__name__)

billing = Domain(name="billing")
