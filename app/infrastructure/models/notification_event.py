"""SQLAlchemy model for the notification event catalog."""

from sqlalchemy import JSON, Boolean, Column, String
from sqlalchemy.sql import expression

from app.infrastructure.database import Base


class NotificationEventModel(Base):
    """Catalog row describing one notification event."""

    __tablename__ = "notification_event"

    event_key = Column(String(80), primary_key=True)
    domain = Column(String(20), nullable=False)
    label = Column(String(160), nullable=False)
    sector = Column(String(50), nullable=True)
    default_enabled = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    allow_user_disable = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    is_mandatory = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    responsibility_kinds = Column(JSON, nullable=False, default=list)


__all__ = ["NotificationEventModel"]
