"""Decide which responsibility kinds stay enabled for each recipient."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from app.domain.entities import (
    EventDefinition,
    RecipientCandidate,
    ResponsibilityKind,
    SectorDefaultRule,
    UserRuleOverride,
    merge_candidates,
    sort_kinds,
)
from app.infrastructure.repositories import normalize_sector


@dataclass(frozen=True)
class RecipientDecision:
    """Evaluation outcome for one recipient that will be notified."""

    user_id: int
    primary_kind: ResponsibilityKind
    enabled_kinds: tuple[ResponsibilityKind, ...]
    is_mandatory: bool


def evaluate_recipients(
    event: EventDefinition,
    sector: str | None,
    candidates: Iterable[RecipientCandidate],
    default_rules: Iterable[SectorDefaultRule] = (),
    overrides: Iterable[UserRuleOverride] = (),
    *,
    is_mandatory: bool = False,
) -> list[RecipientDecision]:
    """Apply mandatory flags, sector defaults and overrides to ``candidates``.

    For every kind a candidate was tagged with:

    1. a mandatory occurrence, catalog event or candidate enables it;
    2. otherwise the sector default for ``(sector, event, kind)`` applies,
       falling back to the catalog ``default_enabled``;
    3. when the event accepts personal overrides, the recipient's override
       for ``(event, kind)`` replaces that default.

    Recipients left with no enabled kind are omitted. The result is sorted
    by ``user_id`` and does not depend on the order of the inputs.
    """

    normalized_sector = normalize_sector(sector)
    sector_defaults = {
        rule.responsibility_kind: rule.enabled
        for rule in default_rules
        if rule.event_key == event.event_key
        and normalized_sector is not None
        and normalize_sector(rule.sector) == normalized_sector
    }
    personal = {
        (override.user_id, override.responsibility_kind): override.enabled
        for override in overrides
        if override.event_key == event.event_key
    }
    event_mandatory = is_mandatory or event.is_mandatory

    decisions: list[RecipientDecision] = []
    for user_id, candidate in sorted(merge_candidates(candidates).items()):
        mandatory = event_mandatory or candidate.is_mandatory
        enabled = [
            kind
            for kind in candidate.kinds
            if mandatory
            or _kind_enabled(event, kind, sector_defaults, personal.get((user_id, kind)))
        ]
        if not enabled:
            continue
        ordered = tuple(sort_kinds(enabled))
        decisions.append(
            RecipientDecision(
                user_id=user_id,
                primary_kind=ordered[0],
                enabled_kinds=ordered,
                is_mandatory=mandatory,
            )
        )
    return decisions


def _kind_enabled(
    event: EventDefinition,
    kind: ResponsibilityKind,
    sector_defaults: dict[ResponsibilityKind, bool],
    override: bool | None,
) -> bool:
    default = sector_defaults.get(kind, event.default_enabled)
    if not event.allow_user_disable or override is None:
        return default
    return override


__all__ = ["RecipientDecision", "evaluate_recipients"]
