"""Notifications bounded context — in-app notification inbox.

Stores user-facing messages (payment receipts, job updates) addressed to
mechanics and customers. Other contexts append notifications; the inbox UI
lists them and flips the read flag.
"""

from protean.domain import Domain

from shared.logging import get_logger

notifications = Domain(name="notifications")

logger = get_logger(__name__)
