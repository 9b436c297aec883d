"""SQLAlchemy models for work orders (obras) and their process steps."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone

from ._ids import new_uuid


class WorkOrderModel(Base):
    __tablename__ = "work_order"

    id = Column(String(36), primary_key=True, default=new_uuid)
    title = Column(String(200), nullable=True)
    status = Column(String(30), nullable=True)
    created_by = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )


class WorkProcessItemModel(Base):
    """Process step of a work order; optional table probed at startup."""

    __tablename__ = "work_process_item"

    id = Column(String(36), primary_key=True, default=new_uuid)
    work_id = Column(String(36), ForeignKey("work_order.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    status = Column(String(30), nullable=True)
    linked_task_id = Column(String(36), ForeignKey("task.id"), nullable=True)


__all__ = ["WorkOrderModel", "WorkProcessItemModel"]
