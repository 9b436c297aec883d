"""Domain entity describing a notification event catalog row."""

from __future__ import annotations

from dataclasses import dataclass

from .notification_kinds import NotificationDomain, ResponsibilityKind


@dataclass(frozen=True)
class EventDefinition:
    """Static description of one kind of occurrence that can notify users.

    ``sector`` is ``None`` for events whose sector is resolved per occurrence
    (for example the department of the task being commented on).
    """

    event_key: str
    domain: NotificationDomain
    label: str
    sector: str | None = None
    default_enabled: bool = True
    allow_user_disable: bool = True
    is_mandatory: bool = False
    responsibility_kinds: tuple[ResponsibilityKind, ...] = ()

    @property
    def user_overridable(self) -> bool:
        """Return ``True`` when personal overrides take effect for the event."""

        return self.allow_user_disable and not self.is_mandatory

    @classmethod
    def fallback(cls, event_key: str, domain: NotificationDomain) -> "EventDefinition":
        """Return permissive defaults for an event missing from the catalog."""

        return cls(
            event_key=event_key,
            domain=domain,
            label=event_key,
            sector=None,
            default_enabled=True,
            allow_user_disable=True,
            is_mandatory=False,
        )


__all__ = ["EventDefinition"]
