"""Run independent read queries concurrently, each on its own session."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import anyio
from anyio import from_thread, to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings


T = TypeVar("T")

ReadCall = Callable[[Session], Any]


@dataclass
class ReadOutcome:
    """Results of a batch of reads; a failed call only loses its own result."""

    results: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, BaseException] = field(default_factory=dict)

    def value(self, name: str, default: T) -> Any | T:
        """Return the result of ``name`` or ``default`` when it failed."""

        if name in self.errors:
            return default
        return self.results.get(name, default)

    def failed(self, name: str) -> bool:
        return name in self.errors


def run_concurrently(
    session: Session,
    calls: Mapping[str, ReadCall],
    *,
    parallel: bool | None = None,
) -> ReadOutcome:
    """Execute ``calls`` and collect their results by name.

    With ``parallel`` enabled (the default comes from
    ``Settings.notification_parallel_reads``) every call runs in a worker
    thread with a fresh session bound to the same engine as ``session``, so
    only committed data is visible. Otherwise the calls run one after the
    other on ``session`` itself; a call failing on a database error rolls
    ``session`` back, so pass a session whose transaction you own.

    Calls must return plain values (domain entities), never ORM instances,
    because worker sessions are closed as soon as their call returns.
    """

    if not calls:
        return ReadOutcome()
    if parallel is None:
        parallel = get_settings().notification_parallel_reads
    if not parallel or len(calls) == 1:
        return _run_sequentially(session, calls)

    factory = sessionmaker(bind=session.get_bind(), autoflush=False)
    with from_thread.start_blocking_portal() as portal:
        return portal.call(_gather, factory, dict(calls))


async def _gather(factory: sessionmaker, calls: dict[str, ReadCall]) -> ReadOutcome:
    outcome = ReadOutcome()

    async def _run(name: str, call: ReadCall) -> None:
        try:
            outcome.results[name] = await to_thread.run_sync(_call_with_session, factory, call)
        except Exception as exc:
            outcome.errors[name] = exc

    async with anyio.create_task_group() as group:
        for name, call in calls.items():
            group.start_soon(_run, name, call)
    return outcome


def _call_with_session(factory: sessionmaker, call: ReadCall) -> Any:
    with factory() as worker_session:
        return call(worker_session)


def _run_sequentially(session: Session, calls: Mapping[str, ReadCall]) -> ReadOutcome:
    outcome = ReadOutcome()
    for name, call in calls.items():
        try:
            outcome.results[name] = call(session)
        except SQLAlchemyError as exc:
            # A failed statement can leave the transaction unusable.
            session.rollback()
            outcome.errors[name] = exc
        except Exception as exc:
            outcome.errors[name] = exc
    return outcome


__all__ = ["ReadOutcome", "run_concurrently"]
