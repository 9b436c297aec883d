"""SQLAlchemy models for sector default rules and user overrides."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone


class NotificationDefaultRuleModel(Base):
    """Sector-wide default for an (event, responsibility kind) pair."""

    __tablename__ = "notification_default_rule"
    __table_args__ = (
        UniqueConstraint(
            "sector", "event_key", "responsibility_kind", name="uq_default_rule_scope"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    sector = Column(String(50), nullable=False, index=True)
    event_key = Column(String(80), nullable=False, index=True)
    responsibility_kind = Column(String(40), nullable=False)
    enabled = Column(Boolean, nullable=False)
    updated_by = Column(Integer, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=now_in_app_timezone,
        onupdate=now_in_app_timezone,
    )


class NotificationUserRuleModel(Base):
    """Personal override for an (event, responsibility kind) pair."""

    __tablename__ = "notification_user_rule"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "event_key", "responsibility_kind", name="uq_user_rule_scope"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    event_key = Column(String(80), nullable=False, index=True)
    responsibility_kind = Column(String(40), nullable=False)
    enabled = Column(Boolean, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=now_in_app_timezone,
        onupdate=now_in_app_timezone,
    )


__all__ = ["NotificationDefaultRuleModel", "NotificationUserRuleModel"]
