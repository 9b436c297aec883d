"""Domain entities for sector default rules and personal overrides."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .notification_kinds import NotificationDomain, ResponsibilityKind


@dataclass(frozen=True)
class SectorDefaultRule:
    """Organizational policy for one (sector, event, responsibility) triple."""

    sector: str
    event_key: str
    responsibility_kind: ResponsibilityKind
    enabled: bool
    updated_by: int | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UserRuleOverride:
    """Personal opt-in/opt-out for one (user, event, responsibility) triple."""

    user_id: int
    event_key: str
    responsibility_kind: ResponsibilityKind
    enabled: bool
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NotificationRuleView:
    """Effective configuration of one event/kind pair as seen by a user."""

    event_key: str
    event_label: str
    domain: NotificationDomain
    responsibility_kind: ResponsibilityKind
    enabled: bool
    default_enabled: bool
    is_mandatory: bool
    allow_user_disable: bool
    sector: str | None = None
    has_user_override: bool = False


__all__ = ["NotificationRuleView", "SectorDefaultRule", "UserRuleOverride"]
