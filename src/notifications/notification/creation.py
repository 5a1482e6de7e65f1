"""CreateNotification command + handler."""

from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="Notification")
class CreateNotification:
    """Request to notify a user."""

    user_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    message = Text(required=True)
    notification_type = String(max_length=50)
    related_request_id = Identifier()


@notifications.command_handler(part_of=Notification)
class CreateNotificationHandler:
    @handle(CreateNotification)
    def create_notification(self, command: CreateNotification):
        notification = Notification.create(
            user_id=command.user_id,
            title=command.title,
            message=command.message,
            notification_type=command.notification_type,
            related_request_id=command.related_request_id,
        )
        current_domain.repository_for(Notification).add(notification)
        return str(notification.id)
