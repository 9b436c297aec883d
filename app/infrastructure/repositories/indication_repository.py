"""Read-only access to indications for recipient resolution."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Indication
from app.infrastructure.models import IndicationModel


class IndicationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, indication_id: str) -> Indication | None:
        model = self.session.get(IndicationModel, indication_id)
        if model is None:
            return None
        return Indication(
            id=model.id,
            name=model.name,
            status=model.status,
            owner_id=model.user_id,
            created_by_supervisor_id=model.created_by_supervisor_id,
            department=model.department,
        )


__all__ = ["IndicationRepository"]
