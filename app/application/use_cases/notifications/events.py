"""Create notifications for the domain events emitted by the application.

Each helper resolves the recipients of one kind of occurrence and hands them
to :func:`dispatch_notifications`. Helpers never raise: the action that
produced the event (posting a comment, moving a task...) must succeed even
when nobody can be notified. They return the number of notifications stored.

Helpers work on a separate session bound to the engine of the session they
receive, so they only see committed data. Call them once the action that
produced the event is committed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from functools import wraps

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import (
    NotificationDomain,
    NotificationMetadata,
    ResponsibilityKind,
    User,
    candidates_for,
)
from app.infrastructure.database import separate_session
from app.infrastructure.repositories import TaskRepository, UserRepository
from app.utils import now_in_app_timezone

from .dedupe import scoped_dedupe_key
from .dispatcher import DispatchRequest, dispatch_notifications
from .mentions import resolve_mentions
from .resolvers import (
    resolve_direct_chat_recipient,
    resolve_indication_recipients,
    resolve_task_recipients,
    resolve_work_order_recipients,
)

logger = logging.getLogger(__name__)

TASK_PATH = "/admin/tarefas?openTask={id}"
INDICATION_PATH = "/admin/indicacoes?openIndicacao={id}"
WORK_PATH = "/admin/obras?openWork={id}"
CHAT_PATH = "/admin/chat?conversation={id}"


def _best_effort(func):
    @wraps(func)
    def wrapper(session: Session, *args, **kwargs) -> int:
        try:
            with separate_session(session) as helper_session:
                return func(helper_session, *args, **kwargs)
        except Exception:
            logger.exception("Notification helper %s failed", func.__name__)
            return 0

    return wrapper


def sanitize_preview(content: str | None, max_length: int | None = None) -> str:
    """Collapse whitespace in ``content`` and cut it to ``max_length`` chars."""

    limit = max_length or get_settings().notification_preview_length
    cleaned = re.sub(r"\s+", " ", content or "").strip()
    if len(cleaned) <= limit:
        return cleaned
    return f"{cleaned[: limit - 3]}..."


def _actor_name(session: Session, actor_id: int | None) -> str:
    actor: User | None = UserRepository(session).get(actor_id) if actor_id else None
    return actor.display_name if actor else "Alguém"


def _time_token() -> str:
    return now_in_app_timezone().isoformat()


@_best_effort
def notify_task_comment_created(
    session: Session,
    *,
    task_id: str,
    comment_id: str,
    actor_id: int,
    content: str,
    parent_comment_id: str | None = None,
    mention_user_ids: Iterable[int] = (),
) -> int:
    """Notify followers, the replied-to author and mentioned users of a comment.

    Followers get ``TASK_COMMENT_CREATED``, the author of the parent comment
    gets ``TASK_COMMENT_REPLY`` and mentioned users get
    ``TASK_COMMENT_MENTION``, each deduplicated by ``<event>:<comment_id>``.
    """

    resolved = resolve_task_recipients(session, task_id)
    if resolved is None:
        return 0
    task = resolved.entity
    actor = _actor_name(session, actor_id)
    preview = sanitize_preview(content)
    message = f"Tarefa: {task.display_title}"
    if preview:
        message = f"{message} • {preview}"
    metadata = NotificationMetadata(
        target_path=TASK_PATH.format(id=task_id),
        task_id=task_id,
        task_title=task.display_title,
        comment_id=comment_id,
        parent_comment_id=parent_comment_id,
        content_preview=preview or None,
    )

    def _send(event_key: str, title: str, recipients) -> int:
        result = dispatch_notifications(
            session,
            DispatchRequest(
                domain=NotificationDomain.TASK,
                event_key=event_key,
                entity_type="task_comment",
                entity_id=comment_id,
                title=title,
                message=message,
                recipients=recipients,
                actor_id=actor_id,
                sector=resolved.sector,
                metadata=metadata,
                dedupe_key=scoped_dedupe_key(event_key, comment_id),
            ),
        )
        return result.inserted

    inserted = _send(
        "TASK_COMMENT_CREATED",
        f"{actor} comentou em uma tarefa que você acompanha",
        resolved.candidates,
    )

    if parent_comment_id:
        parent = TaskRepository(session).get_comment(parent_comment_id, task_id=task_id)
        if parent is not None and parent.user_id:
            inserted += _send(
                "TASK_COMMENT_REPLY",
                f"{actor} respondeu seu comentário",
                candidates_for([parent.user_id], ResponsibilityKind.REPLY_TARGET),
            )

    mentioned = resolve_mentions(session, content, mention_user_ids)
    if mentioned:
        inserted += _send(
            "TASK_COMMENT_MENTION",
            f"{actor} mencionou você em uma tarefa",
            candidates_for(mentioned, ResponsibilityKind.MENTION),
        )
    return inserted


@_best_effort
def notify_task_status_changed(
    session: Session,
    *,
    task_id: str,
    actor_id: int,
    old_status: str | None,
    new_status: str,
    dedupe_token: str | None = None,
    include_sector_members: bool = False,
) -> int:
    """Notify the people following a task that it moved to ``new_status``."""

    if old_status == new_status:
        return 0
    resolved = resolve_task_recipients(
        session, task_id, include_sector_members=include_sector_members
    )
    if resolved is None:
        return 0
    task = resolved.entity
    result = dispatch_notifications(
        session,
        DispatchRequest(
            domain=NotificationDomain.TASK,
            event_key="TASK_STATUS_CHANGED",
            entity_type="task",
            entity_id=task_id,
            title=f"{_actor_name(session, actor_id)} alterou o status de uma tarefa",
            message=f"Tarefa: {task.display_title} • {old_status or '-'} → {new_status}",
            recipients=resolved.candidates,
            actor_id=actor_id,
            sector=resolved.sector,
            metadata=NotificationMetadata(
                target_path=TASK_PATH.format(id=task_id),
                task_id=task_id,
                task_title=task.display_title,
                old_status=old_status,
                new_status=new_status,
            ),
            dedupe_key=scoped_dedupe_key(
                "TASK_STATUS_CHANGED", task_id, dedupe_token or _time_token()
            ),
        ),
    )
    return result.inserted


@_best_effort
def notify_task_checklist_updated(
    session: Session,
    *,
    task_id: str,
    checklist_item_id: str,
    actor_id: int,
    item_title: str,
    is_done: bool,
) -> int:
    """Notify the people following a task that a checklist item was toggled.

    The dedupe key includes the item state, so toggling an item back and forth
    notifies once per state.
    """

    resolved = resolve_task_recipients(session, task_id)
    if resolved is None:
        return 0
    task = resolved.entity
    state = "done" if is_done else "todo"
    verb = "concluiu" if is_done else "reabriu"
    result = dispatch_notifications(
        session,
        DispatchRequest(
            domain=NotificationDomain.TASK,
            event_key="TASK_CHECKLIST_UPDATED",
            entity_type="task_checklist_item",
            entity_id=checklist_item_id,
            title=f"{_actor_name(session, actor_id)} {verb} um item do checklist",
            message=f"Tarefa: {task.display_title} • {item_title.strip()}",
            recipients=resolved.candidates,
            actor_id=actor_id,
            sector=resolved.sector,
            metadata=NotificationMetadata(
                target_path=TASK_PATH.format(id=task_id),
                task_id=task_id,
                task_title=task.display_title,
                checklist_item_id=checklist_item_id,
                new_status=state,
            ),
            dedupe_key=scoped_dedupe_key("TASK_CHECKLIST_UPDATED", checklist_item_id, state),
        ),
    )
    return result.inserted


@_best_effort
def notify_indication_event(
    session: Session,
    *,
    event_key: str,
    indication_id: str,
    actor_id: int | None,
    title: str,
    message: str,
    dedupe_token: str | None = None,
    metadata: NotificationMetadata | None = None,
) -> int:
    """Notify owner, supervisor, sector and top administrators of an indication."""

    resolved = resolve_indication_recipients(session, indication_id)
    if resolved is None:
        return 0
    base = NotificationMetadata(
        target_path=INDICATION_PATH.format(id=indication_id),
        indication_id=indication_id,
    )
    result = dispatch_notifications(
        session,
        DispatchRequest(
            domain=NotificationDomain.INDICACAO,
            event_key=event_key,
            entity_type="indication",
            entity_id=indication_id,
            title=title,
            message=message,
            recipients=resolved.candidates,
            actor_id=actor_id,
            sector=resolved.sector,
            metadata=base.merged(metadata) if metadata else base,
            dedupe_key=scoped_dedupe_key(
                event_key, indication_id, dedupe_token or _time_token()
            ),
        ),
    )
    return result.inserted


@_best_effort
def notify_work_comment_created(
    session: Session,
    *,
    work_id: str,
    comment_id: str,
    actor_id: int,
    content: str,
    mention_user_ids: Iterable[int] = (),
) -> int:
    """Notify work order followers and mentioned users of a new comment."""

    resolved = resolve_work_order_recipients(session, work_id)
    if resolved is None:
        return 0
    work = resolved.entity
    actor = _actor_name(session, actor_id)
    preview = sanitize_preview(content)
    message = f"Obra: {work.display_title}"
    if preview:
        message = f"{message} • {preview}"
    metadata = NotificationMetadata(
        target_path=WORK_PATH.format(id=work_id),
        work_id=work_id,
        comment_id=comment_id,
        content_preview=preview or None,
    )

    def _send(event_key: str, title: str, recipients) -> int:
        result = dispatch_notifications(
            session,
            DispatchRequest(
                domain=NotificationDomain.OBRA,
                event_key=event_key,
                entity_type="work_comment",
                entity_id=comment_id,
                title=title,
                message=message,
                recipients=recipients,
                actor_id=actor_id,
                sector=resolved.sector,
                metadata=metadata,
                dedupe_key=scoped_dedupe_key(event_key, comment_id),
            ),
        )
        return result.inserted

    inserted = _send(
        "WORK_COMMENT_CREATED", f"{actor} comentou em uma obra", resolved.candidates
    )
    mentioned = resolve_mentions(session, content, mention_user_ids)
    if mentioned:
        inserted += _send(
            "WORK_COMMENT_MENTION",
            f"{actor} mencionou você em uma obra",
            candidates_for(mentioned, ResponsibilityKind.MENTION),
        )
    return inserted


@_best_effort
def notify_work_process_status_changed(
    session: Session,
    *,
    work_id: str,
    actor_id: int | None,
    step_title: str,
    old_status: str | None,
    new_status: str,
    dedupe_token: str | None = None,
) -> int:
    """Notify work order followers that a process step changed status."""

    if old_status == new_status:
        return 0
    resolved = resolve_work_order_recipients(session, work_id)
    if resolved is None:
        return 0
    work = resolved.entity
    result = dispatch_notifications(
        session,
        DispatchRequest(
            domain=NotificationDomain.OBRA,
            event_key="WORK_PROCESS_STATUS_CHANGED",
            entity_type="work_order",
            entity_id=work_id,
            title="Etapa da obra atualizada",
            message=f"Obra: {work.display_title} • {step_title.strip()}: {new_status}",
            recipients=resolved.candidates,
            actor_id=actor_id,
            sector=resolved.sector,
            metadata=NotificationMetadata(
                target_path=WORK_PATH.format(id=work_id),
                work_id=work_id,
                old_status=old_status,
                new_status=new_status,
            ),
            dedupe_key=scoped_dedupe_key(
                "WORK_PROCESS_STATUS_CHANGED", work_id, dedupe_token or _time_token()
            ),
        ),
    )
    return result.inserted


@_best_effort
def notify_work_project_released(
    session: Session, *, work_id: str, actor_id: int | None
) -> int:
    """Notify every follower that the work order project was released."""

    resolved = resolve_work_order_recipients(session, work_id)
    if resolved is None:
        return 0
    work = resolved.entity
    result = dispatch_notifications(
        session,
        DispatchRequest(
            domain=NotificationDomain.OBRA,
            event_key="WORK_PROJECT_RELEASED",
            entity_type="work_order",
            entity_id=work_id,
            title="Projeto liberado para obra",
            message=f"Obra: {work.display_title}",
            recipients=resolved.candidates,
            actor_id=actor_id,
            sector=resolved.sector,
            metadata=NotificationMetadata(
                target_path=WORK_PATH.format(id=work_id), work_id=work_id
            ),
            dedupe_key=scoped_dedupe_key("WORK_PROJECT_RELEASED", work_id),
        ),
    )
    return result.inserted


@_best_effort
def notify_chat_message(
    session: Session,
    *,
    conversation_id: str,
    sender_id: int,
    body: str,
    message_id: str | None = None,
) -> int:
    """Notify the other participant of a direct conversation of a new message."""

    resolved = resolve_direct_chat_recipient(session, conversation_id, sender_id)
    if resolved is None or not resolved.candidates:
        return 0
    sender = _actor_name(session, sender_id)
    preview = sanitize_preview(body)
    token = (message_id or "").strip() or _time_token()
    result = dispatch_notifications(
        session,
        DispatchRequest(
            domain=NotificationDomain.CHAT,
            event_key="CHAT_MESSAGE_RECEIVED",
            entity_type="chat_conversation",
            entity_id=conversation_id,
            title=f"Mensagem interna de {sender}",
            message=preview or "Você recebeu uma nova mensagem interna.",
            recipients=resolved.candidates,
            actor_id=sender_id,
            metadata=NotificationMetadata(
                target_path=CHAT_PATH.format(id=conversation_id),
                conversation_id=conversation_id,
                message_id=message_id,
                sender_name=sender,
                content_preview=preview or None,
            ),
            dedupe_key=scoped_dedupe_key("CHAT_MESSAGE_RECEIVED", token),
        ),
    )
    return result.inserted


__all__ = [
    "notify_chat_message",
    "notify_indication_event",
    "notify_task_checklist_updated",
    "notify_task_comment_created",
    "notify_task_status_changed",
    "notify_work_comment_created",
    "notify_work_process_status_changed",
    "notify_work_project_released",
    "sanitize_preview",
]
