"""Inbox invalidation pushes sent after notifications change."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .realtime import RealtimeEventPublisher, realtime_event_publisher

INBOX_INVALIDATED_EVENT = "notification.inbox.invalidated"


class InboxInvalidationPublisher:
    """Tell connected clients to refetch their notification inbox."""

    def __init__(self, publisher: RealtimeEventPublisher) -> None:
        self._publisher = publisher

    def invalidate(
        self,
        user_ids: Iterable[int],
        *,
        reason: str,
        notification_ids: Mapping[int, list[int]] | None = None,
    ) -> int:
        """Push one invalidation per user; returns how many were scheduled."""

        scheduled = 0
        for user_id in sorted({user_id for user_id in user_ids if user_id}):
            payload: dict[str, Any] = {"user_id": user_id, "reason": reason}
            if notification_ids and user_id in notification_ids:
                payload["notification_ids"] = sorted(notification_ids[user_id])
            if self._publisher.dispatch(
                user_id, event_type=INBOX_INVALIDATED_EVENT, payload=payload
            ):
                scheduled += 1
        return scheduled


inbox_invalidation_publisher = InboxInvalidationPublisher(realtime_event_publisher)


def invalidate_inboxes(
    user_ids: Iterable[int],
    *,
    reason: str,
    notification_ids: Mapping[int, list[int]] | None = None,
) -> int:
    """Public helper that delegates to the shared publisher instance."""

    return inbox_invalidation_publisher.invalidate(
        user_ids, reason=reason, notification_ids=notification_ids
    )


__all__ = [
    "INBOX_INVALIDATED_EVENT",
    "InboxInvalidationPublisher",
    "inbox_invalidation_publisher",
    "invalidate_inboxes",
]
