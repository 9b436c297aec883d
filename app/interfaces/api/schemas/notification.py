"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.domain.entities import Notification


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    recipient_id: int
    actor_id: int | None = None
    domain: str
    event_key: str
    type: str
    sector: str | None = None
    responsibility_kind: str
    entity_type: str
    entity_id: str
    is_mandatory: bool = False
    title: str
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or 0,
            recipient_id=notification.recipient_id,
            actor_id=notification.actor_id,
            domain=notification.domain.value,
            event_key=notification.event_key,
            type=notification.notification_type,
            sector=notification.sector,
            responsibility_kind=notification.responsibility_kind.value,
            entity_type=notification.entity_type,
            entity_id=notification.entity_id,
            is_mandatory=notification.is_mandatory,
            title=notification.title,
            message=notification.message,
            metadata=notification.metadata.to_payload(),
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )


class UnreadCountRead(BaseModel):
    unread: int


class MarkedCountRead(BaseModel):
    """Number of notifications changed by a bulk read action."""

    updated: int


__all__ = ["MarkedCountRead", "NotificationRead", "UnreadCountRead"]
