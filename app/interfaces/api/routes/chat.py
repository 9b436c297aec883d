"""Chat endpoints owned by the notification service."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import mark_conversation_as_read
from app.domain.entities import User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user, unwrap
from app.interfaces.api.schemas import MarkedCountRead

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/conversations/{conversation_id}/read", response_model=MarkedCountRead)
def read_conversation(
    conversation_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarkedCountRead:
    """Reset the unread counter and clear the conversation's notifications."""

    updated = unwrap(
        mark_conversation_as_read(db, user_id=current_user.id, conversation_id=conversation_id)
    )
    return MarkedCountRead(updated=updated)
