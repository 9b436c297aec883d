"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone


class NotificationModel(Base):
    """Database representation of a delivered notification.

    ``(recipient_id, dedupe_key)`` is unique: it is the idempotence contract
    that lets concurrent or retried dispatches insert each row at most once.
    """

    __tablename__ = "notification"
    __table_args__ = (
        UniqueConstraint("recipient_id", "dedupe_key", name="uq_notification_recipient_dedupe"),
        Index("ix_notification_recipient_read", "recipient_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    actor_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    domain = Column(String(20), nullable=False, index=True)
    event_key = Column(String(80), nullable=False, index=True)
    notification_type = Column(String(40), nullable=False)
    sector = Column(String(50), nullable=True)
    responsibility_kind = Column(String(40), nullable=False)
    entity_type = Column(String(40), nullable=False)
    entity_id = Column(String(64), nullable=False)
    dedupe_key = Column(String(255), nullable=False)
    is_mandatory = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )


__all__ = ["NotificationModel"]
