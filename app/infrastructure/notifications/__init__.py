"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    INBOX_INVALIDATED_EVENT,
    InboxInvalidationPublisher,
    inbox_invalidation_publisher,
    invalidate_inboxes,
)
from .realtime import (
    RealtimeEventPublisher,
    realtime_event_publisher,
)

__all__ = [
    "INBOX_INVALIDATED_EVENT",
    "InboxInvalidationPublisher",
    "NotificationConnectionManager",
    "RealtimeEventPublisher",
    "inbox_invalidation_publisher",
    "invalidate_inboxes",
    "notification_manager",
    "realtime_event_publisher",
]
