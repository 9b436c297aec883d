"""Domain entities representing stored user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Mapping

from .notification_kinds import NotificationDomain, ResponsibilityKind


@dataclass(frozen=True)
class NotificationMetadata:
    """Typed view over the free-form metadata bag of a notification.

    Only the keys declared here are persisted. Every accessor returns ``None``
    when the key is absent, so consumers never need to guard lookups.
    """

    target_path: str | None = None
    conversation_id: str | None = None
    message_id: str | None = None
    sender_name: str | None = None
    task_id: str | None = None
    task_title: str | None = None
    comment_id: str | None = None
    parent_comment_id: str | None = None
    checklist_item_id: str | None = None
    indication_id: str | None = None
    work_id: str | None = None
    old_status: str | None = None
    new_status: str | None = None
    source: str | None = None
    content_preview: str | None = None
    sector: str | None = None
    responsibility_kinds: tuple[ResponsibilityKind, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "NotificationMetadata":
        """Build metadata from a stored JSON payload, ignoring unknown keys."""

        if not payload:
            return cls()
        values: dict[str, Any] = {}
        for item in fields(cls):
            raw = payload.get(item.name)
            if raw is None:
                continue
            if item.name == "responsibility_kinds":
                if isinstance(raw, (list, tuple)):
                    kinds = (ResponsibilityKind.parse(entry) for entry in raw)
                    values[item.name] = tuple(kind for kind in kinds if kind is not None)
                continue
            text = str(raw).strip()
            if text:
                values[item.name] = text
        return cls(**values)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serializable mapping without empty keys."""

        payload: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name == "responsibility_kinds":
                if value:
                    payload[item.name] = [kind.value for kind in value]
                continue
            if value is not None:
                payload[item.name] = value
        return payload

    def merged(self, other: "NotificationMetadata") -> "NotificationMetadata":
        """Return a copy where every key set on ``other`` overrides ``self``."""

        updates = {
            item.name: getattr(other, item.name)
            for item in fields(other)
            if getattr(other, item.name) not in (None, ())
        }
        return replace(self, **updates)

    def get(self, key: str) -> Any:
        """Return the value stored under ``key`` or ``None`` for unknown keys."""

        if key not in _METADATA_KEYS:
            return None
        return getattr(self, key)


_METADATA_KEYS = frozenset(item.name for item in fields(NotificationMetadata))


@dataclass
class Notification:
    """Notification delivered to a specific recipient for one occurrence."""

    id: int | None
    recipient_id: int
    actor_id: int | None
    domain: NotificationDomain
    event_key: str
    notification_type: str
    sector: str | None
    responsibility_kind: ResponsibilityKind
    entity_type: str
    entity_id: str
    dedupe_key: str
    is_mandatory: bool
    title: str
    message: str
    metadata: NotificationMetadata = field(default_factory=NotificationMetadata)
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationMetadata"]
