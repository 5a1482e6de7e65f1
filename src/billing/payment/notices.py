"""Settlement notices for the mechanic and the customer of a paid invoice.

Notices go to the notifications context's inbox. They are recorded after
the invoice is committed and are best-effort: a failed insert is logged
and skipped, never reported back to the payer.
"""

import structlog
from notifications.domain import notifications
from notifications.notification.creation import CreateNotification

logger = structlog.get_logger(__name__)

PAYMENT_NOTIFICATION_TYPE = "payment"


def format_amount(amount) -> str:
    return f"₹{float(amount or 0):.2f}"


def _record_notice(user_id, title, message, related_request_id) -> str:
    command = CreateNotification(
        user_id=user_id,
        title=title,
        message=message,
        notification_type=PAYMENT_NOTIFICATION_TYPE,
        related_request_id=related_request_id,
    )
    with notifications.domain_context():
        return notifications.process(command, asynchronous=False)


def settlement_notices(invoice) -> list[dict]:
    """The mechanic and customer notices for a freshly paid invoice."""
    amount = format_amount(invoice.total_amount)
    related_request_id = str(invoice.service_request_id)
    return [
        {
            "user_id": str(invoice.mechanic_id),
            "title": "Payment Received!",
            "message": f"Payment of {amount} received for invoice {invoice.invoice_number}",
            "related_request_id": related_request_id,
        },
        {
            "user_id": str(invoice.customer_id),
            "title": "Payment Successful",
            "message": f"Your payment of {amount} for invoice {invoice.invoice_number} was successful",
            "related_request_id": related_request_id,
        },
    ]


def send_settlement_notices(invoice) -> list[str]:
    """Record the settlement notices in order, mechanic first.

    Returns the ids of the notifications that were recorded.
    """
    recorded = []
    for notice in settlement_notices(invoice):
        try:
            recorded.append(_record_notice(**notice))
        except Exception:
            logger.exception(
                "Settlement notice failed",
                invoice_id=str(invoice.id),
                user_id=notice["user_id"],
                title=notice["title"],
            )
    return recorded
