"""Capability flags describing optional parts of the database schema.

Deployments may run against a database whose migrations have not all been
applied yet. Instead of reacting to "column does not exist" errors on every
query, the optional tables and columns are probed once at startup and the
recipient resolvers pick narrower queries when a capability is missing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from app.domain.errors import SchemaDegradedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaCapabilities:
    """Availability of optional tables and columns."""

    task_checklist_responsible: bool = True
    work_process_items: bool = True
    user_department: bool = True

    def require(self, name: str) -> None:
        """Raise :class:`SchemaDegradedError` when capability ``name`` is off."""

        if not getattr(self, name):
            raise SchemaDegradedError(f"Optional schema capability '{name}' is unavailable")

    def missing(self) -> list[str]:
        return [item.name for item in fields(self) if not getattr(self, item.name)]


_OPTIONAL_COLUMNS: dict[str, tuple[str, str]] = {
    "task_checklist_responsible": ("task_checklist_item", "responsible_user_id"),
    "work_process_items": ("work_process_item", "linked_task_id"),
    "user_department": ("user", "department"),
}

_capabilities: SchemaCapabilities | None = None


def probe_schema(engine: Engine) -> SchemaCapabilities:
    """Inspect ``engine`` and report which optional schema parts exist."""

    inspector = inspect(engine)
    tables = set(inspector.get_table_names())
    flags: dict[str, bool] = {}
    for name, (table, column) in _OPTIONAL_COLUMNS.items():
        if table not in tables:
            flags[name] = False
            continue
        columns = {entry["name"] for entry in inspector.get_columns(table)}
        flags[name] = column in columns
    capabilities = SchemaCapabilities(**flags)
    for name in capabilities.missing():
        table, column = _OPTIONAL_COLUMNS[name]
        logger.warning(
            "Schema degraded: %s.%s not found, '%s' lookups disabled", table, column, name
        )
    return capabilities


def refresh_schema_capabilities(engine: Engine) -> SchemaCapabilities:
    """Probe ``engine`` and store the result as the process-wide capabilities."""

    global _capabilities
    _capabilities = probe_schema(engine)
    return _capabilities


def get_schema_capabilities() -> SchemaCapabilities:
    """Return the capabilities resolved at startup (probing once if needed)."""

    if _capabilities is None:
        from app.infrastructure.database import engine

        return refresh_schema_capabilities(engine)
    return _capabilities


def set_schema_capabilities(capabilities: SchemaCapabilities | None) -> None:
    """Override the stored capabilities (``None`` forces a new probe)."""

    global _capabilities
    _capabilities = capabilities


__all__ = [
    "SchemaCapabilities",
    "get_schema_capabilities",
    "probe_schema",
    "refresh_schema_capabilities",
    "set_schema_capabilities",
]
