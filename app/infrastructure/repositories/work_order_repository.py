"""Read-only access to work orders for recipient resolution."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import WorkOrder
from app.infrastructure.models import WorkOrderModel, WorkProcessItemModel
from app.infrastructure.schema import SchemaCapabilities, get_schema_capabilities


class WorkOrderRepository:
    """Look up work orders and the tasks linked to their process steps."""

    def __init__(
        self, session: Session, *, capabilities: SchemaCapabilities | None = None
    ) -> None:
        self.session = session
        self.capabilities = capabilities or get_schema_capabilities()

    def get(self, work_id: str) -> WorkOrder | None:
        model = self.session.get(WorkOrderModel, work_id)
        if model is None:
            return None
        return WorkOrder(
            id=model.id,
            title=model.title,
            status=model.status,
            created_by=model.created_by,
        )

    def list_linked_task_ids(self, work_id: str) -> list[str]:
        """Return ids of tasks linked to any process step of ``work_id``."""

        self.capabilities.require("work_process_items")
        query = (
            self.session.query(WorkProcessItemModel.linked_task_id)
            .filter(WorkProcessItemModel.work_id == work_id)
            .filter(WorkProcessItemModel.linked_task_id.isnot(None))
            .distinct()
        )
        return sorted(task_id for (task_id,) in query.all() if task_id)


__all__ = ["WorkOrderRepository"]
