"""Read-only view of tasks as seen by the notification engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Task:
    """Task attributes needed to route notifications."""

    id: str
    title: str | None
    status: str | None
    department: str | None
    assignee_id: int | None
    creator_id: int | None

    @property
    def display_title(self) -> str:
        return (self.title or "").strip() or "Tarefa sem título"


@dataclass
class TaskComment:
    """Comment posted on a task."""

    id: str
    task_id: str
    user_id: int | None
    parent_comment_id: str | None = None


__all__ = ["Task", "TaskComment"]
