"""SQLAlchemy models for tasks and their participants.

Task CRUD lives outside the notification engine; these tables are only read
to resolve recipients.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone

from ._ids import new_uuid


class TaskModel(Base):
    __tablename__ = "task"

    id = Column(String(36), primary_key=True, default=new_uuid)
    title = Column(String(200), nullable=True)
    status = Column(String(30), nullable=True)
    department = Column(String(50), nullable=True, index=True)
    assignee_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    creator_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )


class TaskObserverModel(Base):
    __tablename__ = "task_observer"
    __table_args__ = (UniqueConstraint("task_id", "user_id", name="uq_task_observer"),)

    id = Column(Integer, primary_key=True)
    task_id = Column(String(36), ForeignKey("task.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False)


class TaskChecklistItemModel(Base):
    __tablename__ = "task_checklist_item"

    id = Column(String(36), primary_key=True, default=new_uuid)
    task_id = Column(String(36), ForeignKey("task.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    is_done = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    # Optional column, probed through SchemaCapabilities.task_checklist_responsible.
    responsible_user_id = Column(Integer, ForeignKey("user.id"), nullable=True)


class TaskCommentModel(Base):
    __tablename__ = "task_comment"

    id = Column(String(36), primary_key=True, default=new_uuid)
    task_id = Column(String(36), ForeignKey("task.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    parent_comment_id = Column(String(36), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )


__all__ = [
    "TaskChecklistItemModel",
    "TaskCommentModel",
    "TaskModel",
    "TaskObserverModel",
]
