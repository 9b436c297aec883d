"""Mark notifications as read on behalf of their recipient."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.domain.errors import ErrorKind, OperationResult
from app.infrastructure.notifications import invalidate_inboxes
from app.infrastructure.repositories import ChatRepository, NotificationRepository

logger = logging.getLogger(__name__)

_UNAUTHORIZED = "Usuário não autenticado"
_STORE_UNAVAILABLE = "Não foi possível atualizar as notificações. Tente novamente."


def _store_failure(session: Session, action: str) -> OperationResult:
    logger.exception("Failed to %s", action)
    session.rollback()
    return OperationResult.failure(ErrorKind.STORE_UNAVAILABLE, _STORE_UNAVAILABLE)


def mark_notification_read(
    session: Session, *, user_id: int | None, notification_id: int
) -> OperationResult[Notification]:
    """Flag one notification of ``user_id`` as read; repeated calls are no-ops."""

    if not user_id:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    try:
        notification = NotificationRepository(session).mark_as_read(
            notification_id, recipient_id=user_id
        )
    except SQLAlchemyError:
        return _store_failure(session, "mark notification as read")
    if notification is None:
        return OperationResult.failure(ErrorKind.NOT_FOUND, "Notificação não encontrada")
    invalidate_inboxes([user_id], reason="read")
    return OperationResult.success(notification)


def mark_all_notifications_read(
    session: Session, *, user_id: int | None
) -> OperationResult[int]:
    """Flag every unread notification of ``user_id``; returns how many changed."""

    if not user_id:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    try:
        updated = NotificationRepository(session).mark_all_as_read(user_id)
    except SQLAlchemyError:
        return _store_failure(session, "mark all notifications as read")
    if updated:
        invalidate_inboxes([user_id], reason="read-all")
    return OperationResult.success(updated)


def mark_conversation_notifications_read(
    session: Session, *, user_id: int | None, conversation_id: str
) -> OperationResult[int]:
    """Flag the unread chat notifications of ``user_id`` for one conversation."""

    if not user_id:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    try:
        updated = NotificationRepository(session).mark_conversation_as_read(
            user_id, conversation_id
        )
    except SQLAlchemyError:
        return _store_failure(session, "mark conversation notifications as read")
    if updated:
        invalidate_inboxes([user_id], reason="conversation-read")
    return OperationResult.success(updated)


def mark_conversation_as_read(
    session: Session, *, user_id: int | None, conversation_id: str
) -> OperationResult[int]:
    """Reset the unread counter of a conversation for ``user_id``.

    Chat notifications of that conversation are then marked as read on a
    best-effort basis: a failure there is logged and the result still
    succeeds, with a value of ``0`` notifications updated.
    """

    if not user_id:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    conversation_id = (conversation_id or "").strip()
    if not conversation_id:
        return OperationResult.failure(ErrorKind.VALIDATION_ERROR, "Conversa inválida.")
    try:
        participant = ChatRepository(session).reset_unread(conversation_id, user_id)
    except SQLAlchemyError:
        return _store_failure(session, "mark conversation as read")
    if not participant:
        return OperationResult.failure(ErrorKind.NOT_FOUND, "Conversa não encontrada")

    synced = mark_conversation_notifications_read(
        session, user_id=user_id, conversation_id=conversation_id
    )
    if not synced.ok:
        logger.warning(
            "Conversation %s read by user %s but its notifications were not updated",
            conversation_id,
            user_id,
        )
        return OperationResult.success(0)
    return synced


__all__ = [
    "mark_all_notifications_read",
    "mark_conversation_as_read",
    "mark_conversation_notifications_read",
    "mark_notification_read",
]
