"""Read the notification inbox of the current user."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import Notification, NotificationDomain
from app.domain.errors import ErrorKind, OperationResult
from app.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def clamp_limit(limit: int | None) -> int:
    """Return ``limit`` bounded to ``1..notification_list_max_limit``."""

    settings = get_settings()
    if limit is None:
        limit = settings.notification_list_default_limit
    return min(max(limit, 1), settings.notification_list_max_limit)


def parse_domains(values: Iterable[str | NotificationDomain] | None) -> list[NotificationDomain]:
    """Return the known domains in ``values``; unknown entries are ignored."""

    domains = (NotificationDomain.parse(value) for value in values or ())
    return sorted({domain for domain in domains if domain is not None}, key=lambda d: d.value)


def list_my_notifications(
    session: Session,
    *,
    user_id: int | None,
    include_read: bool = False,
    limit: int | None = None,
    domains: Iterable[str | NotificationDomain] | None = None,
) -> OperationResult[list[Notification]]:
    """Return the newest notifications of ``user_id``."""

    if not user_id:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, "Usuário não autenticado")
    try:
        notifications = NotificationRepository(session).list_for_recipient(
            user_id,
            include_read=include_read,
            limit=clamp_limit(limit),
            domains=parse_domains(domains),
        )
    except SQLAlchemyError:
        logger.exception("Failed to list notifications for user %s", user_id)
        session.rollback()
        return OperationResult.failure(
            ErrorKind.STORE_UNAVAILABLE, "Não foi possível carregar as notificações."
        )
    return OperationResult.success(list(notifications))


def count_unread_notifications(
    session: Session,
    *,
    user_id: int | None,
    domains: Iterable[str | NotificationDomain] | None = None,
) -> OperationResult[int]:
    if not user_id:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, "Usuário não autenticado")
    try:
        count = NotificationRepository(session).count_unread(
            user_id, domains=parse_domains(domains)
        )
    except SQLAlchemyError:
        logger.exception("Failed to count notifications for user %s", user_id)
        session.rollback()
        return OperationResult.failure(
            ErrorKind.STORE_UNAVAILABLE, "Não foi possível carregar as notificações."
        )
    return OperationResult.success(count)


__all__ = [
    "clamp_limit",
    "count_unread_notifications",
    "list_my_notifications",
    "parse_domains",
]
