"""Read-only view of work orders (obras)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class WorkOrder:
    """Work order attributes needed to route notifications."""

    id: str
    title: str | None
    status: str | None
    created_by: int | None

    @property
    def display_title(self) -> str:
        return (self.title or "").strip() or "Obra sem título"


__all__ = ["WorkOrder"]
