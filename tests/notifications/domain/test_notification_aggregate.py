"""Tests for the Notification aggregate."""

from notifications.notification.events import NotificationCreated, NotificationRead
from notifications.notification.notification import Notification


def _make_notification(**overrides):
    defaults = {
        "user_id": "user-001",
        "title": "Payment Received!",
        "message": "Payment of ₹1500.00 received for invoice INV-001",
        "notification_type": "payment",
        "related_request_id": "req-001",
    }
    defaults.update(overrides)
    return Notification.create(**defaults)


class TestNotificationCreation:
    def test_create_sets_fields(self):
        notification = _make_notification()
        assert str(notification.user_id) == "user-001"
        assert notification.title == "Payment Received!"
        assert notification.notification_type == "payment"
        assert notification.related_request_id == "req-001"
        assert notification.created_at is not None

    def test_create_is_unread(self):
        notification = _make_notification()
        assert notification.is_read is False
        assert notification.read_at is None

    def test_type_and_link_are_optional(self):
        notification = _make_notification(notification_type=None, related_request_id=None)
        assert notification.notification_type is None
        assert notification.related_request_id is None

    def test_create_raises_event(self):
        notification = _make_notification()
        assert len(notification._events) == 1
        event = notification._events[0]
        assert isinstance(event, NotificationCreated)
        assert event.notification_id == str(notification.id)
        assert event.user_id == "user-001"


class TestMarkRead:
    def test_mark_read(self):
        notification = _make_notification()
        notification._events.clear()
        notification.mark_read()
        assert notification.is_read is True
        assert notification.read_at is not None
        assert isinstance(notification._events[0], NotificationRead)

    def test_mark_read_twice_is_noop(self):
        notification = _make_notification()
        notification.mark_read()
        read_at = notification.read_at
        notification._events.clear()

        notification.mark_read()

        assert notification.read_at == read_at
        assert notification._events == []

    def test_belongs_to(self):
        notification = _make_notification()
        assert notification.belongs_to("user-001") is True
        assert notification.belongs_to("user-002") is False
