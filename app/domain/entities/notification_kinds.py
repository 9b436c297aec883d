"""Tagged enumerations driving notification routing."""

from __future__ import annotations

from enum import Enum


class NotificationDomain(str, Enum):
    """Organizational area a notification belongs to."""

    TASK = "TASK"
    INDICACAO = "INDICACAO"
    OBRA = "OBRA"
    CHAT = "CHAT"
    SYSTEM = "SYSTEM"

    @classmethod
    def parse(cls, value: str | "NotificationDomain" | None) -> "NotificationDomain | None":
        """Return the member matching ``value`` (case-insensitive) or ``None``."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class ResponsibilityKind(str, Enum):
    """Reason a user is a candidate recipient.

    Members are declared in primary-kind priority order: when a recipient
    qualifies under several kinds, the earliest member wins.
    """

    MENTION = "MENTION"
    REPLY_TARGET = "REPLY_TARGET"
    OWNER = "OWNER"
    ASSIGNEE = "ASSIGNEE"
    CREATOR = "CREATOR"
    OBSERVER = "OBSERVER"
    LINKED_TASK_PARTICIPANT = "LINKED_TASK_PARTICIPANT"
    SECTOR_MEMBER = "SECTOR_MEMBER"
    DIRECT = "DIRECT"
    SYSTEM = "SYSTEM"

    @property
    def priority(self) -> int:
        """Return the rank of the kind; lower ranks win primary selection."""

        return _KIND_PRIORITY[self]

    @classmethod
    def parse(cls, value: str | "ResponsibilityKind" | None) -> "ResponsibilityKind | None":
        """Return the member matching ``value`` (case-insensitive) or ``None``."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


_KIND_PRIORITY: dict[ResponsibilityKind, int] = {
    kind: rank for rank, kind in enumerate(ResponsibilityKind)
}


def primary_kind(kinds) -> ResponsibilityKind | None:
    """Return the highest-priority kind in ``kinds`` or ``None`` when empty."""

    ordered = sort_kinds(kinds)
    return ordered[0] if ordered else None


def sort_kinds(kinds) -> list[ResponsibilityKind]:
    """Return ``kinds`` without duplicates ordered by priority."""

    return sorted(set(kinds), key=lambda kind: kind.priority)


def infer_notification_type(event_key: str, domain: NotificationDomain) -> str:
    """Return the display type stored alongside ``event_key``."""

    if domain is NotificationDomain.CHAT:
        return "INTERNAL_CHAT_MESSAGE"
    if event_key.endswith("_MENTION"):
        return "MENTION"
    if event_key.endswith("_REPLY"):
        return "REPLY"
    if event_key.endswith("_COMMENT_CREATED"):
        return "COMMENT"
    match domain:
        case NotificationDomain.TASK:
            return "TASK_EVENT"
        case NotificationDomain.INDICACAO:
            return "INDICACAO_EVENT"
        case NotificationDomain.OBRA:
            return "OBRA_EVENT"
        case NotificationDomain.SYSTEM:
            return "SYSTEM_EVENT"
    raise ValueError(f"Unsupported notification domain: {domain!r}")


__all__ = [
    "NotificationDomain",
    "ResponsibilityKind",
    "infer_notification_type",
    "primary_kind",
    "sort_kinds",
]
