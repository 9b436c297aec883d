"""SQLAlchemy model for indications (sales leads)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone

from ._ids import new_uuid


class IndicationModel(Base):
    __tablename__ = "indication"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(200), nullable=True)
    status = Column(String(40), nullable=True)
    department = Column(String(50), nullable=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    created_by_supervisor_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )


__all__ = ["IndicationModel"]
