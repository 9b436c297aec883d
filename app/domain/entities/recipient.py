"""Transient recipient candidates produced by recipient resolvers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .notification_kinds import ResponsibilityKind


@dataclass
class RecipientCandidate:
    """A user who may be notified, with every reason they were picked."""

    user_id: int
    kinds: set[ResponsibilityKind] = field(default_factory=set)
    is_mandatory: bool = False

    def merge(self, other: "RecipientCandidate") -> None:
        """Fold ``other`` (same user) into this candidate."""

        if other.user_id != self.user_id:
            raise ValueError("Cannot merge candidates of different users")
        self.kinds.update(other.kinds)
        self.is_mandatory = self.is_mandatory or other.is_mandatory


def merge_candidates(
    candidates: Iterable[RecipientCandidate],
) -> dict[int, RecipientCandidate]:
    """Group ``candidates`` by user, unioning kinds and mandatory flags."""

    merged: dict[int, RecipientCandidate] = {}
    for candidate in candidates:
        if not candidate.user_id or not candidate.kinds:
            continue
        current = merged.get(candidate.user_id)
        if current is None:
            merged[candidate.user_id] = RecipientCandidate(
                user_id=candidate.user_id,
                kinds=set(candidate.kinds),
                is_mandatory=candidate.is_mandatory,
            )
        else:
            current.merge(candidate)
    return merged


def candidates_for(
    user_ids: Iterable[int | None],
    kind: ResponsibilityKind,
    *,
    is_mandatory: bool = False,
) -> list[RecipientCandidate]:
    """Return one candidate per distinct, non-empty id in ``user_ids``."""

    seen: set[int] = set()
    result: list[RecipientCandidate] = []
    for user_id in user_ids:
        if not user_id or user_id in seen:
            continue
        seen.add(user_id)
        result.append(
            RecipientCandidate(user_id=user_id, kinds={kind}, is_mandatory=is_mandatory)
        )
    return result


__all__ = ["RecipientCandidate", "candidates_for", "merge_candidates"]
