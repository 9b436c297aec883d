"""Persistence helpers for the notification event catalog."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from app.domain.entities import EventDefinition, NotificationDomain, ResponsibilityKind
from app.infrastructure.models import NotificationEventModel


class NotificationEventRepository:
    """Read catalog rows and insert missing ones."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, event_key: str) -> EventDefinition | None:
        model = self.session.get(NotificationEventModel, event_key)
        return self._to_entity(model) if model else None

    def list(self) -> Sequence[EventDefinition]:
        query = self.session.query(NotificationEventModel).order_by(
            NotificationEventModel.domain, NotificationEventModel.event_key
        )
        return [self._to_entity(model) for model in query.all()]

    def insert_missing(self, definitions: Iterable[EventDefinition]) -> int:
        """Insert ``definitions`` not yet present; existing rows stay untouched."""

        existing = {
            key for (key,) in self.session.query(NotificationEventModel.event_key).all()
        }
        inserted = 0
        for definition in definitions:
            if definition.event_key in existing:
                continue
            self.session.add(self._to_model(definition))
            existing.add(definition.event_key)
            inserted += 1
        if inserted:
            self.session.commit()
        return inserted

    @staticmethod
    def _to_model(definition: EventDefinition) -> NotificationEventModel:
        return NotificationEventModel(
            event_key=definition.event_key,
            domain=definition.domain.value,
            label=definition.label,
            sector=definition.sector,
            default_enabled=definition.default_enabled,
            allow_user_disable=definition.allow_user_disable,
            is_mandatory=definition.is_mandatory,
            responsibility_kinds=[kind.value for kind in definition.responsibility_kinds],
        )

    @staticmethod
    def _to_entity(model: NotificationEventModel) -> EventDefinition:
        kinds = (ResponsibilityKind.parse(value) for value in model.responsibility_kinds or [])
        return EventDefinition(
            event_key=model.event_key,
            domain=NotificationDomain.parse(model.domain) or NotificationDomain.SYSTEM,
            label=model.label,
            sector=model.sector,
            default_enabled=bool(model.default_enabled),
            allow_user_disable=bool(model.allow_user_disable),
            is_mandatory=bool(model.is_mandatory),
            responsibility_kinds=tuple(kind for kind in kinds if kind is not None),
        )


__all__ = ["NotificationEventRepository"]
