"""Persistence layer for sector default rules and personal overrides."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.entities import ResponsibilityKind, SectorDefaultRule, UserRuleOverride
from app.infrastructure.models import NotificationDefaultRuleModel, NotificationUserRuleModel
from app.utils import ensure_app_timezone


def normalize_sector(sector: str | None) -> str | None:
    """Return ``sector`` trimmed and lowercased, or ``None`` when blank."""

    if sector is None:
        return None
    normalized = sector.strip().lower()
    return normalized or None


class NotificationRuleRepository:
    """Provide read and upsert operations over the rule store."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_default_rules(self, *, sector: str | None = None) -> Sequence[SectorDefaultRule]:
        query = self.session.query(NotificationDefaultRuleModel)
        normalized = normalize_sector(sector)
        if normalized is not None:
            query = query.filter(func.lower(NotificationDefaultRuleModel.sector) == normalized)
        query = query.order_by(
            NotificationDefaultRuleModel.sector,
            NotificationDefaultRuleModel.event_key,
            NotificationDefaultRuleModel.responsibility_kind,
        )
        return self._default_entities(query.all())

    def default_rules_for(self, sector: str | None, event_key: str) -> Sequence[SectorDefaultRule]:
        """Return every default rule of ``sector`` for ``event_key``."""

        normalized = normalize_sector(sector)
        if normalized is None:
            return []
        query = (
            self.session.query(NotificationDefaultRuleModel)
            .filter(func.lower(NotificationDefaultRuleModel.sector) == normalized)
            .filter(NotificationDefaultRuleModel.event_key == event_key)
        )
        return self._default_entities(query.all())

    def default_rules_for_event(self, event_key: str) -> Sequence[SectorDefaultRule]:
        """Return the default rules of every sector for ``event_key``."""

        query = self.session.query(NotificationDefaultRuleModel).filter(
            NotificationDefaultRuleModel.event_key == event_key
        )
        return self._default_entities(query.all())

    def user_overrides_for(
        self, user_ids: Iterable[int], event_key: str
    ) -> Sequence[UserRuleOverride]:
        """Return the overrides that ``user_ids`` configured for ``event_key``."""

        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return []
        query = (
            self.session.query(NotificationUserRuleModel)
            .filter(NotificationUserRuleModel.user_id.in_(ids))
            .filter(NotificationUserRuleModel.event_key == event_key)
        )
        return self._override_entities(query.all())

    def list_user_overrides(self, user_id: int) -> Sequence[UserRuleOverride]:
        query = (
            self.session.query(NotificationUserRuleModel)
            .filter(NotificationUserRuleModel.user_id == user_id)
            .order_by(
                NotificationUserRuleModel.event_key,
                NotificationUserRuleModel.responsibility_kind,
            )
        )
        return self._override_entities(query.all())

    def upsert_default_rule(self, rule: SectorDefaultRule) -> SectorDefaultRule:
        sector = normalize_sector(rule.sector)
        if sector is None:
            raise ValueError("Sector is required for default rules")

        def _find() -> NotificationDefaultRuleModel | None:
            return (
                self.session.query(NotificationDefaultRuleModel)
                .filter(NotificationDefaultRuleModel.sector == sector)
                .filter(NotificationDefaultRuleModel.event_key == rule.event_key)
                .filter(
                    NotificationDefaultRuleModel.responsibility_kind
                    == rule.responsibility_kind.value
                )
                .first()
            )

        def _create() -> NotificationDefaultRuleModel:
            return NotificationDefaultRuleModel(
                sector=sector,
                event_key=rule.event_key,
                responsibility_kind=rule.responsibility_kind.value,
            )

        model = self._upsert(_find, _create, enabled=rule.enabled, updated_by=rule.updated_by)
        return self._default_entity(model)

    def upsert_user_override(self, override: UserRuleOverride) -> UserRuleOverride:
        def _find() -> NotificationUserRuleModel | None:
            return (
                self.session.query(NotificationUserRuleModel)
                .filter(NotificationUserRuleModel.user_id == override.user_id)
                .filter(NotificationUserRuleModel.event_key == override.event_key)
                .filter(
                    NotificationUserRuleModel.responsibility_kind
                    == override.responsibility_kind.value
                )
                .first()
            )

        def _create() -> NotificationUserRuleModel:
            return NotificationUserRuleModel(
                user_id=override.user_id,
                event_key=override.event_key,
                responsibility_kind=override.responsibility_kind.value,
            )

        model = self._upsert(_find, _create, enabled=override.enabled)
        return self._override_entity(model)

    def _upsert(self, find, create, **values):
        model = find()
        if model is None:
            model = create()
            self._apply(model, values)
            self.session.add(model)
            try:
                self.session.commit()
            except IntegrityError:
                # Another writer created the row first; update theirs instead.
                self.session.rollback()
                model = find()
                if model is None:
                    raise
                self._apply(model, values)
                self.session.commit()
        else:
            self._apply(model, values)
            self.session.commit()
        self.session.refresh(model)
        return model

    @staticmethod
    def _apply(model, values: dict) -> None:
        for name, value in values.items():
            if hasattr(model, name):
                setattr(model, name, value)

    @classmethod
    def _default_entities(cls, models) -> list[SectorDefaultRule]:
        entities = (cls._default_entity(model) for model in models)
        return [entity for entity in entities if entity is not None]

    @classmethod
    def _override_entities(cls, models) -> list[UserRuleOverride]:
        entities = (cls._override_entity(model) for model in models)
        return [entity for entity in entities if entity is not None]

    @staticmethod
    def _default_entity(model: NotificationDefaultRuleModel) -> SectorDefaultRule | None:
        kind = ResponsibilityKind.parse(model.responsibility_kind)
        if kind is None:
            return None
        return SectorDefaultRule(
            sector=model.sector,
            event_key=model.event_key,
            responsibility_kind=kind,
            enabled=bool(model.enabled),
            updated_by=model.updated_by,
            updated_at=ensure_app_timezone(model.updated_at),
        )

    @staticmethod
    def _override_entity(model: NotificationUserRuleModel) -> UserRuleOverride | None:
        kind = ResponsibilityKind.parse(model.responsibility_kind)
        if kind is None:
            return None
        return UserRuleOverride(
            user_id=model.user_id,
            event_key=model.event_key,
            responsibility_kind=kind,
            enabled=bool(model.enabled),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRuleRepository", "normalize_sector"]
