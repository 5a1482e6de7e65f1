"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
Every endpoint acts on the inbox of the authenticated caller.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from notifications.api.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    StatusResponse,
)
from notifications.notification.notification import Notification
from notifications.notification.reading import MarkAllNotificationsRead, MarkNotificationRead
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shared.auth import AuthenticatedUser, require_user

router = APIRouter(prefix="/notifications", tags=["notifications"])

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _to_response(notification) -> NotificationResponse:
    return NotificationResponse(
        notification_id=str(notification.id),
        user_id=str(notification.user_id),
        title=notification.title,
        message=notification.message,
        notification_type=notification.notification_type,
        related_request_id=notification.related_request_id,
        is_read=bool(notification.is_read),
        read_at=notification.read_at,
        created_at=notification.created_at,
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(default=20, ge=1, le=100),
    user: AuthenticatedUser = Depends(require_user),
) -> NotificationListResponse:
    """List the caller's most recent notifications, newest first."""
    repo = current_domain.repository_for(Notification)
    items = repo._dao.query.filter(user_id=user.id).limit(None).all().items
    items.sort(key=lambda n: n.created_at or _EPOCH, reverse=True)
    unread_count = sum(1 for n in items if not n.is_read)
    return NotificationListResponse(
        notifications=[_to_response(n) for n in items[:limit]],
        unread_count=unread_count,
    )


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(user: AuthenticatedUser = Depends(require_user)) -> MarkAllReadResponse:
    """Mark every unread notification of the caller as read."""
    marked = current_domain.process(MarkAllNotificationsRead(user_id=user.id), asynchronous=False)
    return MarkAllReadResponse(marked=marked or 0)


@router.post("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(
    notification_id: str,
    user: AuthenticatedUser = Depends(require_user),
) -> StatusResponse:
    """Mark a single notification as read."""
    command = MarkNotificationRead(notification_id=notification_id, user_id=user.id)
    try:
        current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Notification not found")
    return StatusResponse()
