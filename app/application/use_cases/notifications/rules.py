"""Manage sector default rules and personal notification preferences."""

from __future__ import annotations

import logging
from dataclasses import replace

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import (
    EventDefinition,
    NotificationRuleView,
    ResponsibilityKind,
    SectorDefaultRule,
    User,
    UserRuleOverride,
)
from app.domain.errors import ErrorKind, OperationResult
from app.infrastructure.repositories import (
    NotificationEventRepository,
    NotificationRuleRepository,
    normalize_sector,
)

logger = logging.getLogger(__name__)

_UNAUTHORIZED = "Usuário não autenticado"
_STORE_UNAVAILABLE = "Não foi possível salvar as regras de notificação. Tente novamente."


def _is_rule_admin(actor: User) -> bool:
    return actor.has_any_role(get_settings().rule_admin_roles)


def _store_failure(session: Session, action: str) -> OperationResult:
    logger.exception("Failed to %s", action)
    session.rollback()
    return OperationResult.failure(ErrorKind.STORE_UNAVAILABLE, _STORE_UNAVAILABLE)


def _parse_kind(value: str | ResponsibilityKind) -> ResponsibilityKind | None:
    return ResponsibilityKind.parse(value)


def list_default_rules(
    session: Session, *, actor: User | None, sector: str | None = None
) -> OperationResult[list[SectorDefaultRule]]:
    """Return sector default rules, optionally restricted to ``sector``."""

    if actor is None:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    if not _is_rule_admin(actor):
        return OperationResult.failure(
            ErrorKind.ACCESS_DENIED, "Sem permissão para gerenciar regras de notificação."
        )
    try:
        rules = NotificationRuleRepository(session).list_default_rules(sector=sector)
    except SQLAlchemyError:
        return _store_failure(session, "list default notification rules")
    return OperationResult.success(list(rules))


def upsert_default_rule(
    session: Session,
    *,
    actor: User | None,
    sector: str,
    event_key: str,
    responsibility_kind: str | ResponsibilityKind,
    enabled: bool,
) -> OperationResult[SectorDefaultRule]:
    """Create or update the default of one (sector, event, kind) triple."""

    if actor is None:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    if not _is_rule_admin(actor):
        return OperationResult.failure(
            ErrorKind.ACCESS_DENIED, "Sem permissão para gerenciar regras de notificação."
        )
    normalized_sector = normalize_sector(sector)
    if normalized_sector is None:
        return OperationResult.failure(ErrorKind.VALIDATION_ERROR, "Setor é obrigatório.")
    kind = _parse_kind(responsibility_kind)
    if kind is None:
        return OperationResult.failure(
            ErrorKind.VALIDATION_ERROR, "Tipo de responsabilidade inválido."
        )
    try:
        event = NotificationEventRepository(session).get(event_key)
        if event is None:
            return OperationResult.failure(ErrorKind.NOT_FOUND, "Evento não encontrado.")
        if event.is_mandatory:
            return OperationResult.failure(
                ErrorKind.VALIDATION_ERROR,
                "Eventos obrigatórios não podem ter regras por setor.",
            )
        rule = NotificationRuleRepository(session).upsert_default_rule(
            SectorDefaultRule(
                sector=normalized_sector,
                event_key=event.event_key,
                responsibility_kind=kind,
                enabled=enabled,
                updated_by=actor.id,
            )
        )
    except SQLAlchemyError:
        return _store_failure(session, "upsert default notification rule")
    logger.info(
        "User %s set %s/%s/%s to %s",
        actor.id,
        normalized_sector,
        event_key,
        kind.value,
        enabled,
    )
    return OperationResult.success(rule)


def _build_views(
    events: list[EventDefinition],
    defaults: list[SectorDefaultRule],
    overrides: list[UserRuleOverride],
    department: str | None,
) -> list[NotificationRuleView]:
    default_map = {
        (normalize_sector(rule.sector), rule.event_key, rule.responsibility_kind): rule.enabled
        for rule in defaults
    }
    override_map = {
        (override.event_key, override.responsibility_kind): override.enabled
        for override in overrides
    }
    views: list[NotificationRuleView] = []
    for event in events:
        sector = normalize_sector(event.sector) or department
        for kind in event.responsibility_kinds:
            default_enabled = default_map.get(
                (sector, event.event_key, kind), event.default_enabled
            )
            override = override_map.get((event.event_key, kind))
            if event.is_mandatory:
                enabled = True
            elif event.allow_user_disable and override is not None:
                enabled = override
            else:
                enabled = default_enabled
            views.append(
                NotificationRuleView(
                    event_key=event.event_key,
                    event_label=event.label,
                    domain=event.domain,
                    responsibility_kind=kind,
                    enabled=enabled,
                    default_enabled=True if event.is_mandatory else default_enabled,
                    is_mandatory=event.is_mandatory,
                    allow_user_disable=event.user_overridable,
                    sector=sector,
                    has_user_override=event.user_overridable and override is not None,
                )
            )
    return views


def list_my_rules(
    session: Session, *, actor: User | None
) -> OperationResult[list[NotificationRuleView]]:
    """Return the effective preference of every event/kind pair for ``actor``.

    Events without a fixed sector are evaluated against the actor's department.
    """

    if actor is None:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    try:
        events = list(NotificationEventRepository(session).list())
        repository = NotificationRuleRepository(session)
        defaults = list(repository.list_default_rules())
        overrides = list(repository.list_user_overrides(actor.id))
    except SQLAlchemyError:
        return _store_failure(session, "list notification preferences")
    return OperationResult.success(
        _build_views(events, defaults, overrides, normalize_sector(actor.department))
    )


def upsert_my_rule(
    session: Session,
    *,
    actor: User | None,
    event_key: str,
    responsibility_kind: str | ResponsibilityKind,
    enabled: bool,
) -> OperationResult[NotificationRuleView]:
    """Store a personal preference; mandatory or locked events are rejected."""

    if actor is None:
        return OperationResult.failure(ErrorKind.UNAUTHORIZED, _UNAUTHORIZED)
    kind = _parse_kind(responsibility_kind)
    if kind is None:
        return OperationResult.failure(
            ErrorKind.VALIDATION_ERROR, "Tipo de responsabilidade inválido."
        )
    try:
        event = NotificationEventRepository(session).get(event_key)
        if event is None:
            return OperationResult.failure(ErrorKind.NOT_FOUND, "Evento não encontrado.")
        if not event.user_overridable:
            return OperationResult.failure(
                ErrorKind.VALIDATION_ERROR,
                "Este evento é obrigatório e não pode ser desativado.",
            )
        repository = NotificationRuleRepository(session)
        override = repository.upsert_user_override(
            UserRuleOverride(
                user_id=actor.id,
                event_key=event.event_key,
                responsibility_kind=kind,
                enabled=enabled,
            )
        )
        sector = normalize_sector(event.sector) or normalize_sector(actor.department)
        defaults = list(repository.default_rules_for(sector, event.event_key)) if sector else []
    except SQLAlchemyError:
        return _store_failure(session, "upsert notification preference")

    views = _build_views(
        [replace(event, responsibility_kinds=(kind,))],
        defaults,
        [override],
        normalize_sector(actor.department),
    )
    return OperationResult.success(views[0])


__all__ = [
    "list_default_rules",
    "list_my_rules",
    "upsert_default_rule",
    "upsert_my_rule",
]
