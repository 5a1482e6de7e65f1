"""Commands that mark one or all of a user's notifications as read."""

from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="Notification")
class MarkNotificationRead:
    """The recipient opened a notification."""

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkAllNotificationsRead:
    """The recipient cleared their inbox badge."""

    user_id = Identifier(required=True)


@notifications.command_handler(part_of=Notification)
class NotificationReadHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        # Someone else's notification looks exactly like a missing one.
        if not notification.belongs_to(command.user_id):
            raise ObjectNotFoundError(f"Notification {command.notification_id} not found")
        notification.mark_read()
        repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead):
        repo = current_domain.repository_for(Notification)
        unread = repo._dao.query.filter(user_id=command.user_id, is_read=False).limit(None).all().items
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        return len(unread)
