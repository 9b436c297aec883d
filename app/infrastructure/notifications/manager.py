"""Registry of the inbox websockets opened by each user."""

from __future__ import annotations

import logging
import threading
from typing import Any

from fastapi import WebSocket
from fastapi.websockets import WebSocketState

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Track open inbox sockets per user.

    Sockets are registered and used on the event loop, while dispatching code
    running in worker threads asks :meth:`has_connections` before scheduling a
    push, hence the lock around the registry.
    """

    def __init__(self) -> None:
        self._sockets: dict[int, list[WebSocket]] = {}
        self._lock = threading.Lock()

    async def connect(self, user_id: int, websocket: WebSocket) -> None:
        await websocket.accept()
        with self._lock:
            sockets = self._sockets.setdefault(user_id, [])
            if websocket not in sockets:
                sockets.append(websocket)
        logger.debug("Inbox socket opened for user %s", user_id)

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        with self._lock:
            sockets = self._sockets.get(user_id)
            if not sockets:
                return
            if websocket in sockets:
                sockets.remove(websocket)
            if not sockets:
                del self._sockets[user_id]

    def has_connections(self, user_id: int) -> bool:
        with self._lock:
            return bool(self._sockets.get(user_id))

    def connected_user_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._sockets)

    async def send_to_user(self, user_id: int, message: dict[str, Any]) -> int:
        """Send ``message`` to every open socket of ``user_id``; returns how many got it."""

        with self._lock:
            sockets = list(self._sockets.get(user_id, ()))
        delivered = 0
        for websocket in sockets:
            if websocket.client_state is not WebSocketState.CONNECTED:
                self.disconnect(user_id, websocket)
                continue
            try:
                await websocket.send_json(message)
            except Exception:  # pragma: no cover - socket closed mid-send
                logger.debug("Dropping stale inbox socket for user %s", user_id)
                self.disconnect(user_id, websocket)
                continue
            delivered += 1
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
