"""Persist one notification per eligible recipient of a domain event."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from app.domain.entities import (
    EventDefinition,
    Notification,
    NotificationDomain,
    NotificationMetadata,
    RecipientCandidate,
    infer_notification_type,
)
from app.infrastructure.concurrency import run_concurrently
from app.infrastructure.database import separate_session
from app.infrastructure.notifications import invalidate_inboxes
from app.infrastructure.repositories import (
    NotificationEventRepository,
    NotificationRepository,
    NotificationRuleRepository,
    normalize_sector,
)
from app.utils import now_in_app_timezone

from .dedupe import build_dedupe_key, validate_dedupe_key
from .rule_evaluator import RecipientDecision, evaluate_recipients

logger = logging.getLogger(__name__)


@dataclass
class DispatchRequest:
    """Everything needed to notify the recipients of one event occurrence.

    ``dedupe_key`` defaults to :func:`build_dedupe_key` over the event key,
    entity and actor. ``sector`` defaults to the catalog sector of the event.
    """

    domain: NotificationDomain
    event_key: str
    entity_type: str
    entity_id: str
    title: str
    message: str
    recipients: Sequence[RecipientCandidate] = ()
    actor_id: int | None = None
    sector: str | None = None
    metadata: NotificationMetadata = field(default_factory=NotificationMetadata)
    dedupe_key: str | None = None
    is_mandatory: bool = False

    def resolved_dedupe_key(self) -> str:
        if self.dedupe_key:
            return self.dedupe_key
        return build_dedupe_key(self.event_key, self.entity_type, self.entity_id, self.actor_id)


@dataclass(frozen=True)
class DispatchResult:
    """Number of rows written; conflicts with earlier deliveries are not counted."""

    inserted: int = 0
    recipient_ids: tuple[int, ...] = ()
    error: str | None = None


def _validate(request: DispatchRequest, dedupe_key: str) -> str | None:
    if not (request.title or "").strip():
        return "O título da notificação é obrigatório"
    if not (request.message or "").strip():
        return "A mensagem da notificação é obrigatória"
    if not (request.event_key or "").strip():
        return "O evento da notificação é obrigatório"
    if not str(request.entity_id or "").strip():
        return "A entidade da notificação é obrigatória"
    return validate_dedupe_key(dedupe_key)


def dispatch_notifications(session: Session, request: DispatchRequest) -> DispatchResult:
    """Evaluate rules for ``request.recipients`` and store their notifications.

    Delivery is best-effort: validation, resolution and persistence errors are
    logged and reported through :class:`DispatchResult` instead of raised, so
    the action that triggered the event is never affected. Rules are read and
    rows are committed on a separate session bound to the engine of
    ``session``, so the caller's transaction is neither committed nor rolled
    back here. The acting user is never notified of their own action.
    """

    dedupe_key = request.resolved_dedupe_key()
    error = _validate(request, dedupe_key)
    if error:
        logger.warning("Discarding %s notification: %s", request.event_key, error)
        return DispatchResult(error=error)

    candidates = [
        candidate
        for candidate in request.recipients
        if candidate.user_id and candidate.user_id != request.actor_id
    ]
    if not candidates:
        return DispatchResult()

    try:
        with separate_session(session) as dispatch_session:
            return _dispatch(dispatch_session, request, dedupe_key, candidates)
    except Exception as exc:
        logger.exception(
            "Failed to dispatch %s for %s %s", request.event_key, request.entity_type, request.entity_id
        )
        return DispatchResult(error=str(exc) or exc.__class__.__name__)


def _dispatch(
    session: Session,
    request: DispatchRequest,
    dedupe_key: str,
    candidates: list[RecipientCandidate],
) -> DispatchResult:
    user_ids = sorted({candidate.user_id for candidate in candidates})
    outcome = run_concurrently(
        session,
        {
            "event": lambda s: NotificationEventRepository(s).get(request.event_key),
            "defaults": lambda s: NotificationRuleRepository(s).default_rules_for_event(
                request.event_key
            ),
            "overrides": lambda s: NotificationRuleRepository(s).user_overrides_for(
                user_ids, request.event_key
            ),
        },
    )
    if outcome.errors:
        name, exc = next(iter(outcome.errors.items()))
        raise RuntimeError(f"Could not load notification rules ({name})") from exc

    event: EventDefinition = outcome.results["event"] or EventDefinition.fallback(
        request.event_key, request.domain
    )
    sector = normalize_sector(request.sector) or normalize_sector(event.sector)
    decisions = evaluate_recipients(
        event,
        sector,
        candidates,
        outcome.results["defaults"],
        outcome.results["overrides"],
        is_mandatory=request.is_mandatory,
    )
    if not decisions:
        return DispatchResult()

    created_at = now_in_app_timezone()
    notifications = [
        _build_notification(request, dedupe_key, sector, decision, created_at)
        for decision in decisions
    ]
    inserted = NotificationRepository(session).insert_ignoring_conflicts(notifications)

    by_recipient: dict[int, list[int]] = defaultdict(list)
    for notification_id, recipient_id in inserted:
        by_recipient[recipient_id].append(notification_id)
    _invalidate(request.event_key, by_recipient)

    logger.info(
        "Dispatched %s: %s inserted, %s evaluated", request.event_key, len(inserted), len(decisions)
    )
    return DispatchResult(inserted=len(inserted), recipient_ids=tuple(sorted(by_recipient)))


def _build_notification(
    request: DispatchRequest,
    dedupe_key: str,
    sector: str | None,
    decision: RecipientDecision,
    created_at,
) -> Notification:
    metadata = request.metadata.merged(
        NotificationMetadata(sector=sector, responsibility_kinds=decision.enabled_kinds)
    )
    return Notification(
        id=None,
        recipient_id=decision.user_id,
        actor_id=request.actor_id,
        domain=request.domain,
        event_key=request.event_key,
        notification_type=infer_notification_type(request.event_key, request.domain),
        sector=sector,
        responsibility_kind=decision.primary_kind,
        entity_type=request.entity_type,
        entity_id=str(request.entity_id),
        dedupe_key=dedupe_key,
        is_mandatory=decision.is_mandatory,
        title=request.title.strip(),
        message=request.message.strip(),
        metadata=metadata,
        created_at=created_at,
    )


def _invalidate(event_key: str, by_recipient: dict[int, list[int]]) -> None:
    if not by_recipient:
        return
    try:
        invalidate_inboxes(by_recipient.keys(), reason=event_key, notification_ids=by_recipient)
    except Exception:
        # Rows are already committed; a failed push only delays the refresh.
        logger.warning("Inbox invalidation failed for %s", event_key, exc_info=True)


__all__ = ["DispatchRequest", "DispatchResult", "dispatch_notifications"]
