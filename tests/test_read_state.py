"""Tests for marking notifications as read."""

from __future__ import annotations

from sqlalchemy.exc import OperationalError

from app.application.use_cases.notifications import (
    mark_all_notifications_read,
    mark_conversation_as_read,
    mark_notification_read,
    notify_chat_message,
    notify_task_status_changed,
)
from app.domain.errors import ErrorKind
from app.infrastructure.models import ChatParticipantModel
from app.infrastructure.repositories import NotificationRepository


def _chat_setup(session, factory):
    ana = factory.user("Ana Souza")
    bruno = factory.user("Bruno Costa")
    first = factory.conversation(ana, bruno, unread=2)
    second = factory.conversation(ana, bruno, unread=1)
    notify_chat_message(session, conversation_id=first, sender_id=ana, body="Oi", message_id="m-1")
    notify_chat_message(session, conversation_id=first, sender_id=ana, body="Tudo?", message_id="m-2")
    notify_chat_message(session, conversation_id=second, sender_id=ana, body="Outra", message_id="m-3")
    return ana, bruno, first, second


def test_mark_notification_read_is_idempotent(session, factory):
    ana, bruno, _, _ = _chat_setup(session, factory)
    notification_id = factory.notifications(bruno)[0].id

    first = mark_notification_read(session, user_id=bruno, notification_id=notification_id)
    read_at = first.value.read_at
    second = mark_notification_read(session, user_id=bruno, notification_id=notification_id)

    assert first.ok
    assert first.value.is_read is True
    assert read_at is not None
    assert second.ok
    assert second.value.read_at == read_at


def test_cannot_mark_someone_elses_notification(session, factory):
    ana, bruno, _, _ = _chat_setup(session, factory)
    notification_id = factory.notifications(bruno)[0].id

    result = mark_notification_read(session, user_id=ana, notification_id=notification_id)

    assert result.error is ErrorKind.NOT_FOUND
    assert result.message == "Notificação não encontrada"
    assert factory.notifications(bruno)[0].is_read is False


def test_mark_requires_a_user(session):
    result = mark_notification_read(session, user_id=None, notification_id=1)

    assert result.error is ErrorKind.UNAUTHORIZED


def test_mark_all_notifications_read(session, factory):
    _, bruno, _, _ = _chat_setup(session, factory)

    result = mark_all_notifications_read(session, user_id=bruno)
    again = mark_all_notifications_read(session, user_id=bruno)

    assert result.value == 3
    assert again.value == 0
    assert all(row.is_read for row in factory.notifications(bruno))


def test_reading_a_conversation_syncs_its_notifications(session, factory):
    _, bruno, first, second = _chat_setup(session, factory)

    result = mark_conversation_as_read(session, user_id=bruno, conversation_id=first)

    assert result.ok
    assert result.value == 2
    rows = factory.notifications(bruno)
    by_conversation = {}
    for row in rows:
        by_conversation.setdefault(row.payload["conversation_id"], []).append(row.is_read)
    assert by_conversation == {first: [True, True], second: [False]}
    participant = (
        session.query(ChatParticipantModel)
        .filter_by(conversation_id=first, user_id=bruno)
        .one()
    )
    assert participant.unread_count == 0
    assert participant.last_read_at is not None


def test_reading_a_conversation_leaves_other_domains_untouched(session, factory):
    _, bruno, first, _ = _chat_setup(session, factory)
    task_id = factory.task(assignee_id=bruno)
    other = factory.user("Carla Dias")

    notify_task_status_changed(
        session, task_id=task_id, actor_id=other, old_status="TODO", new_status="DONE"
    )

    mark_conversation_as_read(session, user_id=bruno, conversation_id=first)

    task_rows = factory.notifications(bruno, event_key="TASK_STATUS_CHANGED")
    assert [row.is_read for row in task_rows] == [False]


def test_reading_a_conversation_requires_participation(session, factory):
    _, _, first, _ = _chat_setup(session, factory)
    outsider = factory.user("Carla Dias")

    result = mark_conversation_as_read(session, user_id=outsider, conversation_id=first)

    assert result.error is ErrorKind.NOT_FOUND
    assert result.message == "Conversa não encontrada"


def test_reading_a_blank_conversation_is_rejected(session, factory):
    ana = factory.user("Ana Souza")

    result = mark_conversation_as_read(session, user_id=ana, conversation_id="  ")

    assert result.error is ErrorKind.VALIDATION_ERROR


def test_notification_sync_failure_keeps_the_read_mark(session, factory, monkeypatch):
    _, bruno, first, _ = _chat_setup(session, factory)

    def _fail(self, recipient_id, conversation_id):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    monkeypatch.setattr(NotificationRepository, "mark_conversation_as_read", _fail)

    result = mark_conversation_as_read(session, user_id=bruno, conversation_id=first)

    assert result.ok
    assert result.value == 0
    participant = (
        session.query(ChatParticipantModel)
        .filter_by(conversation_id=first, user_id=bruno)
        .one()
    )
    assert participant.unread_count == 0
