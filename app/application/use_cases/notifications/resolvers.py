"""Recipient resolvers for each domain that emits notifications.

Every resolver issues its independent lookups through
:func:`run_concurrently`. A lookup that fails (including lookups disabled
because an optional column or table is missing) is logged and contributes no
candidates, while the other lookups still count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import (
    ChatConversation,
    Indication,
    RecipientCandidate,
    ResponsibilityKind,
    Task,
    WorkOrder,
    candidates_for,
)
from app.domain.errors import SchemaDegradedError
from app.infrastructure.concurrency import ReadOutcome, run_concurrently
from app.infrastructure.repositories import (
    ChatRepository,
    IndicationRepository,
    TaskRepository,
    UserRepository,
    WorkOrderRepository,
    normalize_sector,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolvedRecipients:
    """Sector and candidates resolved for one entity."""

    sector: str | None
    candidates: list[RecipientCandidate] = field(default_factory=list)
    entity: Any = None


def _portion(outcome: ReadOutcome, name: str, context: str, default: Any) -> Any:
    """Return the result of lookup ``name`` or ``default`` after logging its failure."""

    if not outcome.failed(name):
        return outcome.value(name, default)
    error = outcome.errors[name]
    if isinstance(error, SchemaDegradedError):
        logger.info("Skipping %s lookup for %s: %s", name, context, error)
    else:
        logger.warning("Lookup %s failed for %s: %s", name, context, error)
    return default


def _sector_member_ids(session: Session, sector: str | None) -> list[int]:
    if not sector:
        return []
    return UserRepository(session).list_active_ids_by_department(sector)


def _require(outcome: ReadOutcome, name: str, context: str) -> Any:
    if outcome.failed(name):
        raise outcome.errors[name]
    entity = outcome.value(name, None)
    if entity is None:
        logger.info("%s not found while resolving recipients", context)
    return entity


def resolve_task_recipients(
    session: Session, task_id: str, *, include_sector_members: bool = False
) -> ResolvedRecipients | None:
    """Return assignee, creator, observers and checklist responsibles of a task.

    Checklist responsibles are tagged as observers. With
    ``include_sector_members`` the active members of the task department are
    added as sector members. Returns ``None`` when the task does not exist.
    """

    context = f"task {task_id}"
    outcome = run_concurrently(
        session,
        {
            "task": lambda s: TaskRepository(s).get(task_id),
            "observers": lambda s: TaskRepository(s).list_observer_ids(task_id),
            "checklist": lambda s: TaskRepository(s).list_checklist_responsible_ids(task_id),
        },
    )
    task: Task | None = _require(outcome, "task", context)
    if task is None:
        return None

    candidates = [
        *candidates_for([task.assignee_id], ResponsibilityKind.ASSIGNEE),
        *candidates_for([task.creator_id], ResponsibilityKind.CREATOR),
        *candidates_for(_portion(outcome, "observers", context, []), ResponsibilityKind.OBSERVER),
        *candidates_for(_portion(outcome, "checklist", context, []), ResponsibilityKind.OBSERVER),
    ]
    sector = normalize_sector(task.department)
    if include_sector_members and sector:
        members = run_concurrently(
            session,
            {"sector": lambda s: _sector_member_ids(s, sector)},
        )
        candidates.extend(
            candidates_for(_portion(members, "sector", context, []), ResponsibilityKind.SECTOR_MEMBER)
        )
    return ResolvedRecipients(sector=sector, candidates=candidates, entity=task)


def resolve_indication_recipients(
    session: Session, indication_id: str
) -> ResolvedRecipients | None:
    """Return owner, creating supervisor, sector members and top administrators.

    Administrators of the top privilege role are mandatory recipients.
    """

    settings = get_settings()
    context = f"indication {indication_id}"
    outcome = run_concurrently(
        session,
        {
            "indication": lambda s: IndicationRepository(s).get(indication_id),
            "admins": lambda s: UserRepository(s).list_active_ids_by_role_alias(
                settings.top_privilege_role
            ),
        },
    )
    indication: Indication | None = _require(outcome, "indication", context)
    if indication is None:
        return None

    sector = normalize_sector(indication.department) or normalize_sector(
        settings.default_indication_sector
    )
    members = run_concurrently(
        session,
        {"sector": lambda s: _sector_member_ids(s, sector)},
    )
    candidates = [
        *candidates_for([indication.owner_id], ResponsibilityKind.OWNER),
        *candidates_for([indication.created_by_supervisor_id], ResponsibilityKind.CREATOR),
        *candidates_for(_portion(members, "sector", context, []), ResponsibilityKind.SECTOR_MEMBER),
        *candidates_for(
            _portion(outcome, "admins", context, []),
            ResponsibilityKind.SYSTEM,
            is_mandatory=True,
        ),
    ]
    return ResolvedRecipients(sector=sector, candidates=candidates, entity=indication)


def resolve_work_order_recipients(
    session: Session, work_id: str
) -> ResolvedRecipients | None:
    """Return creator, linked task participants and works sector members."""

    sector = normalize_sector(get_settings().works_sector)
    context = f"work order {work_id}"
    outcome = run_concurrently(
        session,
        {
            "work": lambda s: WorkOrderRepository(s).get(work_id),
            "linked_tasks": lambda s: WorkOrderRepository(s).list_linked_task_ids(work_id),
            "sector": lambda s: _sector_member_ids(s, sector),
        },
    )
    work: WorkOrder | None = _require(outcome, "work", context)
    if work is None:
        return None

    candidates = [
        *candidates_for([work.created_by], ResponsibilityKind.CREATOR),
        *candidates_for(_portion(outcome, "sector", context, []), ResponsibilityKind.SECTOR_MEMBER),
    ]
    task_ids = _portion(outcome, "linked_tasks", context, [])
    if task_ids:
        linked = run_concurrently(
            session,
            {
                "tasks": lambda s: TaskRepository(s).list_many(task_ids),
                "observers": lambda s: TaskRepository(s).list_observer_ids(task_ids),
            },
        )
        participants: list[int | None] = []
        for task in _portion(linked, "tasks", context, []):
            participants.extend([task.assignee_id, task.creator_id])
        participants.extend(_portion(linked, "observers", context, []))
        candidates.extend(
            candidates_for(participants, ResponsibilityKind.LINKED_TASK_PARTICIPANT)
        )
    return ResolvedRecipients(sector=sector, candidates=candidates, entity=work)


def resolve_direct_chat_recipient(
    session: Session, conversation_id: str, sender_id: int
) -> ResolvedRecipients | None:
    """Return the other participant of a one-to-one conversation."""

    conversation: ChatConversation | None = ChatRepository(session).get_conversation(
        conversation_id
    )
    if conversation is None:
        logger.info("Conversation %s not found while resolving recipients", conversation_id)
        return None
    recipient_id = conversation.other_participant(sender_id)
    if recipient_id is None:
        logger.info("Conversation %s is not a direct conversation", conversation_id)
        return ResolvedRecipients(sector=None, entity=conversation)
    return ResolvedRecipients(
        sector=None,
        candidates=candidates_for([recipient_id], ResponsibilityKind.DIRECT),
        entity=conversation,
    )


__all__ = [
    "ResolvedRecipients",
    "resolve_direct_chat_recipient",
    "resolve_indication_recipients",
    "resolve_task_recipients",
    "resolve_work_order_recipients",
]
