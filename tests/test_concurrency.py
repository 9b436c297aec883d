"""Tests for batched dispatch reads."""

from __future__ import annotations

import pytest

from app.domain.errors import SchemaDegradedError
from app.infrastructure.concurrency import run_concurrently
from app.infrastructure.models import TaskModel
from app.infrastructure.repositories import TaskRepository


def _degraded(session):
    raise SchemaDegradedError("Optional schema capability 'task_checklist_responsible' is unavailable")


@pytest.mark.parametrize("parallel", [True, False], ids=["parallel", "sequential"])
def test_failed_call_only_loses_its_own_result(session, factory, parallel):
    task_id = factory.task(title="Vistoria")

    outcome = run_concurrently(
        session,
        {"task": lambda s: TaskRepository(s).get(task_id), "checklist": _degraded},
        parallel=parallel,
    )

    assert outcome.results["task"].title == "Vistoria"
    assert outcome.failed("checklist")
    assert isinstance(outcome.errors["checklist"], SchemaDegradedError)
    assert outcome.value("checklist", []) == []


def test_sequential_degraded_call_keeps_pending_rows(session, factory):
    task_id = factory.task(title="Vistoria")
    session.add(TaskModel(id="t-pending", title="Rascunho", status="TODO"))
    session.flush()

    outcome = run_concurrently(
        session,
        {"checklist": _degraded, "task": lambda s: TaskRepository(s).get(task_id)},
        parallel=False,
    )
    session.commit()

    assert outcome.failed("checklist")
    assert outcome.results["task"].id == task_id
    assert session.get(TaskModel, "t-pending") is not None
