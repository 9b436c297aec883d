"""Read-only access to tasks for recipient resolution."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Task, TaskComment
from app.infrastructure.models import (
    TaskChecklistItemModel,
    TaskCommentModel,
    TaskModel,
    TaskObserverModel,
)
from app.infrastructure.schema import SchemaCapabilities, get_schema_capabilities


class TaskRepository:
    """Look up tasks and the users attached to them."""

    def __init__(
        self, session: Session, *, capabilities: SchemaCapabilities | None = None
    ) -> None:
        self.session = session
        self.capabilities = capabilities or get_schema_capabilities()

    def get(self, task_id: str) -> Task | None:
        row = self._task_query().filter(TaskModel.id == task_id).first()
        return self._to_entity(row) if row is not None else None

    def list_many(self, task_ids: Sequence[str]) -> list[Task]:
        ids = sorted({task_id for task_id in task_ids if task_id})
        if not ids:
            return []
        query = self._task_query().filter(TaskModel.id.in_(ids)).order_by(TaskModel.id)
        return [self._to_entity(row) for row in query.all()]

    def list_observer_ids(self, task_ids: str | Sequence[str]) -> list[int]:
        ids = [task_ids] if isinstance(task_ids, str) else list(task_ids)
        if not ids:
            return []
        query = (
            self.session.query(TaskObserverModel.user_id)
            .filter(TaskObserverModel.task_id.in_(ids))
            .distinct()
        )
        return sorted(user_id for (user_id,) in query.all() if user_id)

    def list_checklist_responsible_ids(self, task_id: str) -> list[int]:
        """Return users responsible for checklist items of ``task_id``."""

        self.capabilities.require("task_checklist_responsible")
        query = (
            self.session.query(TaskChecklistItemModel.responsible_user_id)
            .filter(TaskChecklistItemModel.task_id == task_id)
            .filter(TaskChecklistItemModel.responsible_user_id.isnot(None))
            .distinct()
        )
        return sorted(user_id for (user_id,) in query.all() if user_id)

    def get_comment(self, comment_id: str, *, task_id: str | None = None) -> TaskComment | None:
        query = self.session.query(
            TaskCommentModel.id,
            TaskCommentModel.task_id,
            TaskCommentModel.user_id,
            TaskCommentModel.parent_comment_id,
        ).filter(TaskCommentModel.id == comment_id)
        if task_id is not None:
            query = query.filter(TaskCommentModel.task_id == task_id)
        row = query.first()
        if row is None:
            return None
        return TaskComment(
            id=row.id,
            task_id=row.task_id,
            user_id=row.user_id,
            parent_comment_id=row.parent_comment_id,
        )

    def _task_query(self):
        return self.session.query(
            TaskModel.id,
            TaskModel.title,
            TaskModel.status,
            TaskModel.department,
            TaskModel.assignee_id,
            TaskModel.creator_id,
        )

    @staticmethod
    def _to_entity(row) -> Task:
        return Task(
            id=row.id,
            title=row.title,
            status=row.status,
            department=row.department,
            assignee_id=row.assignee_id,
            creator_id=row.creator_id,
        )


__all__ = ["TaskRepository"]
