"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationDomain,
    NotificationMetadata,
    ResponsibilityKind,
)
from app.infrastructure.models import NotificationModel
from app.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

_CONFLICT_COLUMNS = ["recipient_id", "dedupe_key"]


class NotificationRepository:
    """Provide insert, query and read-state operations for notifications."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert_ignoring_conflicts(
        self, notifications: Iterable[Notification]
    ) -> list[tuple[int, int]]:
        """Insert ``notifications`` skipping rows whose dedupe key already exists.

        Returns ``(notification_id, recipient_id)`` for each row actually
        written. Existing rows are never overwritten.
        """

        rows = [self._to_row(notification) for notification in notifications]
        if not rows:
            return []

        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            return self._insert_with_savepoints(rows)

        statement = (
            insert(NotificationModel)
            .values(rows)
            .on_conflict_do_nothing(index_elements=_CONFLICT_COLUMNS)
            .returning(NotificationModel.id, NotificationModel.recipient_id)
        )
        inserted = [(row.id, row.recipient_id) for row in self.session.execute(statement)]
        self.session.commit()
        skipped = len(rows) - len(inserted)
        if skipped:
            logger.debug("Ignored %s notification rows already delivered", skipped)
        return inserted

    def _insert_with_savepoints(self, rows: list[dict[str, Any]]) -> list[tuple[int, int]]:
        inserted: list[tuple[int, int]] = []
        for row in rows:
            model = NotificationModel(**row)
            try:
                with self.session.begin_nested():
                    self.session.add(model)
            except IntegrityError:
                continue
            inserted.append((model.id, model.recipient_id))
        self.session.commit()
        return inserted

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_recipient(
        self,
        recipient_id: int,
        *,
        include_read: bool = False,
        limit: int | None = 120,
        domains: Sequence[NotificationDomain] = (),
    ) -> Sequence[Notification]:
        query = self._recipient_query(recipient_id, domains)
        if not include_read:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(
        self, recipient_id: int, *, domains: Sequence[NotificationDomain] = ()
    ) -> int:
        query = self._recipient_query(recipient_id, domains, columns=(func.count(NotificationModel.id),))
        query = query.filter(NotificationModel.is_read.is_(False))
        return int(query.scalar() or 0)

    def mark_as_read(self, notification_id: int, *, recipient_id: int) -> Notification | None:
        """Flag one notification as read; returns ``None`` when not owned/found."""

        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.recipient_id == recipient_id)
            .first()
        )
        if model is None:
            return None
        if not model.is_read:
            model.is_read = True
            model.read_at = now_in_app_timezone()
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self, recipient_id: int) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == recipient_id)
            .filter(NotificationModel.is_read.is_(False))
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: now_in_app_timezone(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return int(updated or 0)

    def mark_conversation_as_read(self, recipient_id: int, conversation_id: str) -> int:
        """Flag unread chat notifications that reference ``conversation_id``."""

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == recipient_id)
            .filter(NotificationModel.domain == NotificationDomain.CHAT.value)
            .filter(NotificationModel.is_read.is_(False))
            .filter(NotificationModel.payload["conversation_id"].as_string() == conversation_id)
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: now_in_app_timezone(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return int(updated or 0)

    def _recipient_query(self, recipient_id: int, domains, *, columns=()):
        query = self.session.query(*columns) if columns else self.session.query(NotificationModel)
        query = query.filter(NotificationModel.recipient_id == recipient_id)
        domain_values = sorted({domain.value for domain in domains})
        if domain_values:
            query = query.filter(NotificationModel.domain.in_(domain_values))
        return query

    @staticmethod
    def _to_row(notification: Notification) -> dict[str, Any]:
        return {
            "recipient_id": notification.recipient_id,
            "actor_id": notification.actor_id,
            "domain": notification.domain.value,
            "event_key": notification.event_key,
            "notification_type": notification.notification_type,
            "sector": notification.sector,
            "responsibility_kind": notification.responsibility_kind.value,
            "entity_type": notification.entity_type,
            "entity_id": notification.entity_id,
            "dedupe_key": notification.dedupe_key,
            "is_mandatory": notification.is_mandatory,
            "title": notification.title,
            "message": notification.message,
            "payload": notification.metadata.to_payload(),
            "is_read": False,
            "read_at": None,
            "created_at": notification.created_at or now_in_app_timezone(),
        }

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            actor_id=model.actor_id,
            domain=NotificationDomain.parse(model.domain) or NotificationDomain.SYSTEM,
            event_key=model.event_key,
            notification_type=model.notification_type,
            sector=model.sector,
            responsibility_kind=(
                ResponsibilityKind.parse(model.responsibility_kind) or ResponsibilityKind.SYSTEM
            ),
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            dedupe_key=model.dedupe_key,
            is_mandatory=bool(model.is_mandatory),
            title=model.title,
            message=model.message,
            metadata=NotificationMetadata.from_payload(model.payload),
            is_read=bool(model.is_read),
            read_at=ensure_app_timezone(model.read_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
