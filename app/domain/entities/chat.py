"""Read-only view of internal chat conversations."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ChatConversation:
    """One-to-one conversation between two users."""

    id: str
    participant_ids: list[int] = field(default_factory=list)

    def other_participant(self, user_id: int) -> int | None:
        """Return the participant that is not ``user_id`` (direct chats only)."""

        others = [pid for pid in self.participant_ids if pid != user_id]
        if len(others) != 1:
            return None
        return others[0]


__all__ = ["ChatConversation"]
