"""Read-only view of indications (sales leads)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Indication:
    """Indication attributes needed to route notifications."""

    id: str
    name: str | None
    status: str | None
    owner_id: int | None
    created_by_supervisor_id: int | None
    department: str | None = None


__all__ = ["Indication"]
