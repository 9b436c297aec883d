"""Seeded notification event catalog and lookups."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import EventDefinition, NotificationDomain, ResponsibilityKind
from app.infrastructure.repositories import NotificationEventRepository

_TASK_KINDS = (
    ResponsibilityKind.ASSIGNEE,
    ResponsibilityKind.CREATOR,
    ResponsibilityKind.OBSERVER,
    ResponsibilityKind.SECTOR_MEMBER,
)
_INDICATION_KINDS = (
    ResponsibilityKind.OWNER,
    ResponsibilityKind.CREATOR,
    ResponsibilityKind.SECTOR_MEMBER,
    ResponsibilityKind.SYSTEM,
)
_WORK_KINDS = (
    ResponsibilityKind.CREATOR,
    ResponsibilityKind.LINKED_TASK_PARTICIPANT,
    ResponsibilityKind.SECTOR_MEMBER,
)


def _build_catalog() -> tuple[EventDefinition, ...]:
    settings = get_settings()
    works = settings.works_sector
    sales = settings.default_indication_sector
    return (
        EventDefinition(
            "TASK_COMMENT_CREATED",
            NotificationDomain.TASK,
            "Novo comentário em tarefa",
            responsibility_kinds=_TASK_KINDS,
        ),
        EventDefinition(
            "TASK_COMMENT_REPLY",
            NotificationDomain.TASK,
            "Resposta a comentário em tarefa",
            responsibility_kinds=(ResponsibilityKind.REPLY_TARGET,),
        ),
        EventDefinition(
            "TASK_COMMENT_MENTION",
            NotificationDomain.TASK,
            "Menção em comentário de tarefa",
            responsibility_kinds=(ResponsibilityKind.MENTION,),
        ),
        EventDefinition(
            "TASK_STATUS_CHANGED",
            NotificationDomain.TASK,
            "Status da tarefa alterado",
            responsibility_kinds=_TASK_KINDS,
        ),
        EventDefinition(
            "TASK_CHECKLIST_UPDATED",
            NotificationDomain.TASK,
            "Checklist da tarefa atualizado",
            responsibility_kinds=_TASK_KINDS,
        ),
        EventDefinition(
            "INDICATION_CREATED",
            NotificationDomain.INDICACAO,
            "Nova indicação",
            sector=sales,
            responsibility_kinds=_INDICATION_KINDS,
        ),
        EventDefinition(
            "INDICATION_STATUS_CHANGED",
            NotificationDomain.INDICACAO,
            "Status da indicação alterado",
            sector=sales,
            responsibility_kinds=_INDICATION_KINDS,
        ),
        EventDefinition(
            "INDICATION_DOC_VALIDATION_CHANGED",
            NotificationDomain.INDICACAO,
            "Validação de documentos atualizada",
            sector="cadastro",
            responsibility_kinds=_INDICATION_KINDS,
        ),
        EventDefinition(
            "INDICATION_CONTRACT_MILESTONE",
            NotificationDomain.INDICACAO,
            "Marco de contrato da indicação",
            sector=sales,
            allow_user_disable=False,
            is_mandatory=True,
            responsibility_kinds=_INDICATION_KINDS,
        ),
        EventDefinition(
            "WORK_COMMENT_CREATED",
            NotificationDomain.OBRA,
            "Novo comentário em obra",
            sector=works,
            responsibility_kinds=_WORK_KINDS,
        ),
        EventDefinition(
            "WORK_COMMENT_MENTION",
            NotificationDomain.OBRA,
            "Menção em comentário de obra",
            sector=works,
            responsibility_kinds=(ResponsibilityKind.MENTION,),
        ),
        EventDefinition(
            "WORK_PROCESS_STATUS_CHANGED",
            NotificationDomain.OBRA,
            "Etapa da obra atualizada",
            sector=works,
            responsibility_kinds=_WORK_KINDS,
        ),
        EventDefinition(
            "WORK_PROJECT_RELEASED",
            NotificationDomain.OBRA,
            "Projeto liberado para obra",
            sector=works,
            allow_user_disable=False,
            is_mandatory=True,
            responsibility_kinds=_WORK_KINDS,
        ),
        EventDefinition(
            "CHAT_MESSAGE_RECEIVED",
            NotificationDomain.CHAT,
            "Nova mensagem no chat interno",
            responsibility_kinds=(ResponsibilityKind.DIRECT,),
        ),
    )


def event_catalog() -> tuple[EventDefinition, ...]:
    """Return the events provisioned at startup."""

    return _build_catalog()


def seed_event_catalog(session: Session) -> int:
    """Insert catalog events missing from the store and return how many."""

    return NotificationEventRepository(session).insert_missing(event_catalog())


def lookup_event(
    session: Session, event_key: str, domain: NotificationDomain
) -> EventDefinition:
    """Return the catalog row for ``event_key`` or permissive defaults."""

    definition = NotificationEventRepository(session).get(event_key)
    return definition or EventDefinition.fallback(event_key, domain)


__all__ = ["event_catalog", "lookup_event", "seed_event_catalog"]
