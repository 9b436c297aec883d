"""Domain entity representing a user."""

from collections.abc import Iterable
from dataclasses import dataclass

from .role import Role


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    role: Role
    name: str
    email: str
    department: str | None
    is_active: bool
    deleted: bool = False

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role alias matches ``alias``."""

        return self.role.alias.lower() == alias.lower()

    def has_any_role(self, aliases: Iterable[str]) -> bool:
        """Return ``True`` when the user's role is one of ``aliases``."""

        return any(self.has_role(alias) for alias in aliases)

    def is_eligible_recipient(self) -> bool:
        """Return ``True`` when the user can still receive notifications."""

        return self.is_active and not self.deleted

    @property
    def first_name(self) -> str:
        parts = (self.name or "").split()
        return parts[0] if parts else ""

    @property
    def email_local_part(self) -> str:
        return (self.email or "").split("@", 1)[0]

    @property
    def display_name(self) -> str:
        return (self.name or "").strip() or self.email or "Alguém"


__all__ = ["User"]
