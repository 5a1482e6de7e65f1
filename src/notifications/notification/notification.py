"""Notification aggregate (CQRS) — one message in a user's inbox.

Notifications are append-only: once created, only the read flag changes.
"""

from datetime import UTC, datetime

from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationRead
from protean.fields import Boolean, DateTime, Identifier, String, Text


@notifications.aggregate
class Notification:
    """A message addressed to a single user."""

    # Recipient
    user_id: Identifier(required=True)

    # Content
    title: String(required=True, max_length=200)
    message: Text(required=True)
    notification_type: String(max_length=50)  # free-form tag, e.g. "payment"

    # Link back to the job the message is about
    related_request_id: Identifier()

    # Read state
    is_read: Boolean(default=False)
    read_at: DateTime()

    created_at: DateTime()

    @classmethod
    def create(
        cls,
        user_id,
        title,
        message,
        notification_type=None,
        related_request_id=None,
    ):
        """Create a new unread notification."""
        now = datetime.now(UTC)

        notification = cls(
            user_id=user_id,
            title=title,
            message=message,
            notification_type=notification_type,
            related_request_id=related_request_id,
            is_read=False,
            created_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=str(user_id),
                title=title,
                notification_type=notification_type,
                related_request_id=related_request_id,
                created_at=now,
            )
        )

        return notification

    def belongs_to(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def mark_read(self):
        """Flag the notification as read. Reading twice is a no-op."""
        if self.is_read:
            return

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now

        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                read_at=now,
            )
        )
