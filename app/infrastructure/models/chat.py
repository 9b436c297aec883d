"""SQLAlchemy models for internal chat conversations."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone

from ._ids import new_uuid


class ChatConversationModel(Base):
    __tablename__ = "chat_conversation"

    id = Column(String(36), primary_key=True, default=new_uuid)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )


class ChatParticipantModel(Base):
    __tablename__ = "chat_participant"
    __table_args__ = (
        UniqueConstraint("conversation_id", "user_id", name="uq_chat_participant"),
    )

    id = Column(Integer, primary_key=True)
    conversation_id = Column(
        String(36), ForeignKey("chat_conversation.id"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    unread_count = Column(Integer, nullable=False, default=0)
    last_read_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ["ChatConversationModel", "ChatParticipantModel"]
