"""Access to internal chat conversations used by notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import ChatConversation
from app.infrastructure.models import ChatConversationModel, ChatParticipantModel
from app.utils import now_in_app_timezone


class ChatRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_conversation(self, conversation_id: str) -> ChatConversation | None:
        if self.session.get(ChatConversationModel, conversation_id) is None:
            return None
        query = (
            self.session.query(ChatParticipantModel.user_id)
            .filter(ChatParticipantModel.conversation_id == conversation_id)
            .order_by(ChatParticipantModel.user_id)
        )
        return ChatConversation(
            id=conversation_id,
            participant_ids=[user_id for (user_id,) in query.all()],
        )

    def reset_unread(self, conversation_id: str, user_id: int) -> bool:
        """Zero the unread counter of ``user_id``; ``False`` if not a participant."""

        participant = (
            self.session.query(ChatParticipantModel)
            .filter(ChatParticipantModel.conversation_id == conversation_id)
            .filter(ChatParticipantModel.user_id == user_id)
            .first()
        )
        if participant is None:
            return False
        participant.unread_count = 0
        participant.last_read_at = now_in_app_timezone()
        self.session.add(participant)
        self.session.commit()
        return True


__all__ = ["ChatRepository"]
