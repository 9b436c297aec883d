"""Schemas for notification rule endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationRuleView, SectorDefaultRule


class NotificationRuleRead(BaseModel):
    """Effective preference of one event/responsibility pair."""

    event_key: str
    event_label: str
    domain: str
    responsibility_kind: str
    enabled: bool
    default_enabled: bool
    is_mandatory: bool
    allow_user_disable: bool
    sector: str | None = None
    has_user_override: bool = False

    @classmethod
    def from_view(cls, view: NotificationRuleView) -> "NotificationRuleRead":
        return cls(
            event_key=view.event_key,
            event_label=view.event_label,
            domain=view.domain.value,
            responsibility_kind=view.responsibility_kind.value,
            enabled=view.enabled,
            default_enabled=view.default_enabled,
            is_mandatory=view.is_mandatory,
            allow_user_disable=view.allow_user_disable,
            sector=view.sector,
            has_user_override=view.has_user_override,
        )


class NotificationRuleUpdate(BaseModel):
    """Payload to change a personal preference."""

    model_config = ConfigDict(extra="forbid")

    event_key: str = Field(..., min_length=1)
    responsibility_kind: str = Field(..., min_length=1)
    enabled: bool


class DefaultRuleUpdate(NotificationRuleUpdate):
    """Payload to change the default of a sector."""

    sector: str = Field(..., min_length=1)


class DefaultRuleRead(BaseModel):
    sector: str
    event_key: str
    responsibility_kind: str
    enabled: bool
    updated_by: int | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, rule: SectorDefaultRule) -> "DefaultRuleRead":
        return cls(
            sector=rule.sector,
            event_key=rule.event_key,
            responsibility_kind=rule.responsibility_kind.value,
            enabled=rule.enabled,
            updated_by=rule.updated_by,
            updated_at=rule.updated_at,
        )


__all__ = [
    "DefaultRuleRead",
    "DefaultRuleUpdate",
    "NotificationRuleRead",
    "NotificationRuleUpdate",
]
