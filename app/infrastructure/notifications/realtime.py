"""Helpers to broadcast realtime events to connected clients."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Iterable, Set

from anyio import from_thread

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class RealtimeEventPublisher:
    """Dispatch structured realtime events to websocket subscribers.

    Users without an open connection are skipped, so publishing from code
    paths that run outside the web server (scripts, tests) is a no-op.
    """

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, user_id: int, *, event_type: str, payload: Any) -> bool:
        """Schedule a realtime ``event_type`` event for ``user_id``."""

        if not user_id or not self._manager.has_connections(user_id):
            return False

        message = {"type": event_type, "data": copy.deepcopy(payload)}
        return self._schedule_send(user_id, message)

    def dispatch_many(
        self,
        user_ids: Iterable[int],
        *,
        event_type: str,
        payload: Any,
    ) -> int:
        """Broadcast an event to multiple ``user_ids``; returns deliveries scheduled."""

        seen: Set[int] = set()
        scheduled = 0
        for user_id in user_ids:
            if not user_id or user_id in seen:
                continue
            seen.add(user_id)
            if self.dispatch(user_id, event_type=event_type, payload=payload):
                scheduled += 1
        return scheduled

    def _schedule_send(self, user_id: int, message: dict[str, Any]) -> bool:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_user, user_id, message)
            except RuntimeError:
                logger.debug("No event loop available to push %s", message["type"])
                return False
        else:
            loop.create_task(self._manager.send_to_user(user_id, message))
        return True


realtime_event_publisher = RealtimeEventPublisher(notification_manager)


__all__ = [
    "RealtimeEventPublisher",
    "realtime_event_publisher",
]
