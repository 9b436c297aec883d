"""Read access to users for recipient resolution and mentions."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import Role, User
from app.infrastructure.models import RoleModel, UserModel
from app.infrastructure.schema import SchemaCapabilities, get_schema_capabilities


class UserRepository:
    """Provide the user lookups needed by the notification engine.

    Queries select explicit columns so that a database still missing the
    optional ``user.department`` column keeps working.
    """

    def __init__(
        self, session: Session, *, capabilities: SchemaCapabilities | None = None
    ) -> None:
        self.session = session
        self.capabilities = capabilities or get_schema_capabilities()

    def get(self, user_id: int) -> User | None:
        row = self._base_query().filter(UserModel.id == user_id).first()
        return self._to_entity(row) if row else None

    def get_map_by_ids(self, user_ids: Sequence[int]) -> dict[int, User]:
        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        rows = self._base_query().filter(UserModel.id.in_(ids)).all()
        return {row.id: self._to_entity(row) for row in rows}

    def list_active(self) -> list[User]:
        """Return every active, non-deleted user."""

        rows = self._active_query().order_by(UserModel.id).all()
        return [self._to_entity(row) for row in rows]

    def list_active_ids_by_department(self, department: str) -> list[int]:
        """Return ids of active users whose department equals ``department``."""

        self.capabilities.require("user_department")
        normalized = department.strip().lower()
        if not normalized:
            return []
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.is_active.is_(True))
            .filter(UserModel.deleted.is_(False))
            .filter(func.lower(UserModel.department) == normalized)
            .order_by(UserModel.id)
        )
        return [user_id for (user_id,) in query.all()]

    def list_active_ids_by_role_alias(self, alias: str) -> list[int]:
        query = (
            self.session.query(UserModel.id)
            .join(RoleModel, RoleModel.id == UserModel.role_id)
            .filter(func.lower(RoleModel.alias) == alias.lower())
            .filter(UserModel.is_active.is_(True))
            .filter(UserModel.deleted.is_(False))
            .order_by(UserModel.id)
        )
        return [user_id for (user_id,) in query.all()]

    def _columns(self) -> list:
        columns = [
            UserModel.id,
            UserModel.name,
            UserModel.email,
            UserModel.is_active,
            UserModel.deleted,
            RoleModel.id.label("role_id"),
            RoleModel.name.label("role_name"),
            RoleModel.alias.label("role_alias"),
        ]
        if self.capabilities.user_department:
            columns.append(UserModel.department)
        return columns

    def _base_query(self):
        return self.session.query(*self._columns()).join(
            RoleModel, RoleModel.id == UserModel.role_id
        )

    def _active_query(self):
        return (
            self._base_query()
            .filter(UserModel.is_active.is_(True))
            .filter(UserModel.deleted.is_(False))
        )

    @staticmethod
    def _to_entity(row) -> User:
        return User(
            id=row.id,
            role=Role(id=row.role_id, name=row.role_name, alias=row.role_alias),
            name=row.name,
            email=row.email,
            department=getattr(row, "department", None),
            is_active=row.is_active,
            deleted=row.deleted,
        )


__all__ = ["UserRepository"]
