"""Error kinds and explicit result values returned by user-facing use cases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure categories surfaced by the notification engine."""

    UNAUTHORIZED = "UNAUTHORIZED"
    ACCESS_DENIED = "ACCESS_DENIED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    # Raised by capability probes only; never returned to callers.
    SCHEMA_DEGRADED = "SCHEMA_DEGRADED"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a user-initiated action (rule update, read mark...)."""

    value: T | None = None
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "OperationResult[T]":
        return cls(error=error, message=message)


class SchemaDegradedError(RuntimeError):
    """An optional table or column is missing from the connected database."""

    kind = ErrorKind.SCHEMA_DEGRADED


__all__ = ["ErrorKind", "OperationResult", "SchemaDegradedError"]
