"""Shared fixtures: a fresh SQLite file database per test and row factories."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

TEST_DB_PATH = Path(__file__).parent / "test_notifications.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"

from app.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from app.domain.entities import ResponsibilityKind  # noqa: E402
from app.infrastructure import database  # noqa: E402
from app.infrastructure.models import (  # noqa: E402
    ChatConversationModel,
    ChatParticipantModel,
    IndicationModel,
    NotificationDefaultRuleModel,
    NotificationModel,
    NotificationUserRuleModel,
    RoleModel,
    TaskChecklistItemModel,
    TaskCommentModel,
    TaskModel,
    TaskObserverModel,
    UserModel,
    WorkOrderModel,
    WorkProcessItemModel,
)
from app.infrastructure.schema import set_schema_capabilities  # noqa: E402


class Factory:
    """Insert committed collaborator rows used by the notification engine."""

    def __init__(self, session) -> None:
        self.session = session

    def _save(self, model):
        self.session.add(model)
        self.session.commit()
        return model

    def role(self, alias: str) -> int:
        existing = self.session.query(RoleModel).filter(RoleModel.alias == alias).first()
        if existing is not None:
            return existing.id
        return self._save(RoleModel(name=alias, alias=alias)).id

    def user(
        self,
        name: str,
        *,
        email: str | None = None,
        role: str = "vendedor_interno",
        department: str | None = None,
        is_active: bool = True,
        deleted: bool = False,
    ) -> int:
        local = name.lower().replace(" ", ".")
        model = UserModel(
            role_id=self.role(role),
            name=name,
            email=email or f"{local}@example.com",
            department=department,
            is_active=is_active,
            deleted=deleted,
        )
        return self._save(model).id

    def task(
        self,
        *,
        title: str = "Instalação do inversor",
        assignee_id: int | None = None,
        creator_id: int | None = None,
        department: str | None = None,
        observers=(),
        checklist_responsibles=(),
    ) -> str:
        task = self._save(
            TaskModel(
                title=title,
                status="TODO",
                department=department,
                assignee_id=assignee_id,
                creator_id=creator_id,
            )
        )
        for user_id in observers:
            self.session.add(TaskObserverModel(task_id=task.id, user_id=user_id))
        for user_id in checklist_responsibles:
            self.session.add(
                TaskChecklistItemModel(
                    task_id=task.id, title="Conferir documentos", responsible_user_id=user_id
                )
            )
        self.session.commit()
        return task.id

    def comment(
        self,
        task_id: str,
        user_id: int,
        content: str = "comentário",
        parent_comment_id: str | None = None,
    ) -> str:
        model = TaskCommentModel(
            task_id=task_id,
            user_id=user_id,
            content=content,
            parent_comment_id=parent_comment_id,
        )
        return self._save(model).id

    def indication(
        self,
        *,
        owner_id: int | None,
        supervisor_id: int | None = None,
        department: str | None = None,
    ) -> str:
        model = IndicationModel(
            name="Cliente Solar",
            status="EM_ANALISE",
            user_id=owner_id,
            created_by_supervisor_id=supervisor_id,
            department=department,
        )
        return self._save(model).id

    def work_order(self, *, created_by: int | None, linked_task_ids=()) -> str:
        work = self._save(WorkOrderModel(title="Usina Norte", status="EM_ANDAMENTO", created_by=created_by))
        for index, task_id in enumerate(linked_task_ids, start=1):
            self.session.add(
                WorkProcessItemModel(
                    work_id=work.id, title=f"Etapa {index}", status="PENDENTE", linked_task_id=task_id
                )
            )
        self.session.commit()
        return work.id

    def conversation(self, *user_ids: int, unread: int = 1) -> str:
        conversation = self._save(ChatConversationModel())
        for user_id in user_ids:
            self.session.add(
                ChatParticipantModel(
                    conversation_id=conversation.id, user_id=user_id, unread_count=unread
                )
            )
        self.session.commit()
        return conversation.id

    def default_rule(
        self, sector: str, event_key: str, kind: ResponsibilityKind, enabled: bool
    ) -> None:
        self._save(
            NotificationDefaultRuleModel(
                sector=sector,
                event_key=event_key,
                responsibility_kind=kind.value,
                enabled=enabled,
            )
        )

    def override(
        self, user_id: int, event_key: str, kind: ResponsibilityKind, enabled: bool
    ) -> None:
        self._save(
            NotificationUserRuleModel(
                user_id=user_id,
                event_key=event_key,
                responsibility_kind=kind.value,
                enabled=enabled,
            )
        )

    def notifications(self, recipient_id: int | None = None, event_key: str | None = None):
        self.session.expire_all()
        query = self.session.query(NotificationModel)
        if recipient_id is not None:
            query = query.filter(NotificationModel.recipient_id == recipient_id)
        if event_key is not None:
            query = query.filter(NotificationModel.event_key == event_key)
        return query.order_by(NotificationModel.recipient_id, NotificationModel.id).all()


@pytest.fixture(autouse=True)
def setup_database():
    """Recreate every table and seed the event catalog before each test."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    set_schema_capabilities(None)
    database.initialize_database()
    yield
    set_schema_capabilities(None)


@pytest.fixture(scope="session", autouse=True)
def remove_database_file():
    yield
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def factory(session) -> Factory:
    return Factory(session)


@pytest.fixture(params=[True, False], ids=["parallel", "sequential"])
def read_mode(request, monkeypatch):
    """Run a test with concurrent and with sequential dispatch reads."""

    from app.config import get_settings

    monkeypatch.setattr(get_settings(), "notification_parallel_reads", request.param)
    return request.param
