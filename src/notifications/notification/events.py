"""Domain events for the Notification aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, String


@notifications.event(part_of="Notification")
class NotificationCreated:
    """A notification was appended to a user's inbox."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    title: String(required=True)
    notification_type: String()
    related_request_id: Identifier()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRead:
    """The recipient opened the notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    read_at: DateTime(required=True)
