"""Domain entity representing a user role."""

from dataclasses import dataclass


@dataclass
class Role:
    """Privilege level assigned to a user (``adm_mestre``, ``supervisor``...)."""

    id: int
    name: str
    alias: str


__all__ = ["Role"]
