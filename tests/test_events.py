"""Scenario tests for the domain event helpers."""

from __future__ import annotations

from app.application.use_cases.notifications import (
    notify_chat_message,
    notify_indication_event,
    notify_task_checklist_updated,
    notify_task_comment_created,
    notify_task_status_changed,
    notify_work_comment_created,
    notify_work_process_status_changed,
    notify_work_project_released,
    sanitize_preview,
)
from app.application.use_cases.notifications import events as events_module
from app.domain.entities import ResponsibilityKind
from app.infrastructure.models import TaskCommentModel
from app.infrastructure.schema import SchemaCapabilities, set_schema_capabilities


def _task_team(factory, **task_kwargs):
    team = {
        "ana": factory.user("Ana Souza"),
        "bruno": factory.user("Bruno Costa"),
        "carla": factory.user("Carla Dias"),
        "diego": factory.user("Diego Lima"),
        "elisa": factory.user("Elisa Rocha"),
    }
    team["task"] = factory.task(
        assignee_id=team["ana"],
        creator_id=team["carla"],
        observers=[team["diego"], team["elisa"]],
        **task_kwargs,
    )
    return team


def _recipients(rows):
    return sorted(row.recipient_id for row in rows)


def test_task_comment_notifies_followers_except_author(session, factory, read_mode):
    team = _task_team(factory)
    comment_id = factory.comment(team["task"], team["carla"], "Confere isso")

    inserted = notify_task_comment_created(
        session,
        task_id=team["task"],
        comment_id=comment_id,
        actor_id=team["carla"],
        content="Confere isso",
    )

    assert inserted == 3
    rows = factory.notifications(event_key="TASK_COMMENT_CREATED")
    assert _recipients(rows) == sorted([team["ana"], team["diego"], team["elisa"]])
    assert {row.dedupe_key for row in rows} == {f"TASK_COMMENT_CREATED:{comment_id}"}
    first = rows[0]
    assert first.title == "Carla Dias comentou em uma tarefa que você acompanha"
    assert first.message == "Tarefa: Instalação do inversor • Confere isso"
    assert first.payload["target_path"] == f"/admin/tarefas?openTask={team['task']}"
    assert first.payload["comment_id"] == comment_id
    assert first.actor_id == team["carla"]


def test_task_comment_mention_is_delivered_once(session, factory):
    team = _task_team(factory)
    content = "@Bruno pode validar o orçamento?"
    comment_id = factory.comment(team["task"], team["carla"], content)

    def _notify():
        return notify_task_comment_created(
            session,
            task_id=team["task"],
            comment_id=comment_id,
            actor_id=team["carla"],
            content=content,
        )

    assert _notify() == 4
    assert _notify() == 0

    mentions = factory.notifications(event_key="TASK_COMMENT_MENTION")
    assert _recipients(mentions) == [team["bruno"]]
    assert mentions[0].responsibility_kind == ResponsibilityKind.MENTION.value
    assert mentions[0].notification_type == "MENTION"
    assert mentions[0].title == "Carla Dias mencionou você em uma tarefa"
    assert mentions[0].dedupe_key == f"TASK_COMMENT_MENTION:{comment_id}"


def test_explicit_mentions_skip_the_author(session, factory):
    team = _task_team(factory)
    comment_id = factory.comment(team["task"], team["carla"], "ok")

    notify_task_comment_created(
        session,
        task_id=team["task"],
        comment_id=comment_id,
        actor_id=team["carla"],
        content="ok",
        mention_user_ids=[team["bruno"], team["carla"]],
    )

    assert _recipients(factory.notifications(event_key="TASK_COMMENT_MENTION")) == [
        team["bruno"]
    ]


def test_reply_notifies_parent_comment_author(session, factory):
    team = _task_team(factory)
    parent_id = factory.comment(team["task"], team["diego"], "Pergunta")
    reply_id = factory.comment(team["task"], team["carla"], "Resposta", parent_comment_id=parent_id)

    notify_task_comment_created(
        session,
        task_id=team["task"],
        comment_id=reply_id,
        actor_id=team["carla"],
        content="Resposta",
        parent_comment_id=parent_id,
    )

    replies = factory.notifications(event_key="TASK_COMMENT_REPLY")
    assert _recipients(replies) == [team["diego"]]
    assert replies[0].title == "Carla Dias respondeu seu comentário"
    assert replies[0].payload["parent_comment_id"] == parent_id
    assert len(factory.notifications(team["diego"])) == 2


def test_reply_to_own_comment_sends_no_reply_notification(session, factory):
    team = _task_team(factory)
    parent_id = factory.comment(team["task"], team["carla"], "Primeiro")
    reply_id = factory.comment(team["task"], team["carla"], "Segundo", parent_comment_id=parent_id)

    notify_task_comment_created(
        session,
        task_id=team["task"],
        comment_id=reply_id,
        actor_id=team["carla"],
        content="Segundo",
        parent_comment_id=parent_id,
    )

    assert factory.notifications(event_key="TASK_COMMENT_REPLY") == []


def test_checklist_responsibles_are_notified_as_observers(session, factory):
    team = _task_team(factory)
    responsible = factory.user("Fabio Melo")
    task_id = factory.task(
        assignee_id=team["ana"], creator_id=team["carla"], checklist_responsibles=[responsible]
    )
    comment_id = factory.comment(task_id, team["carla"])

    notify_task_comment_created(
        session, task_id=task_id, comment_id=comment_id, actor_id=team["carla"], content="x"
    )

    rows = factory.notifications(responsible)
    assert [row.responsibility_kind for row in rows] == ["OBSERVER"]


def test_missing_checklist_column_keeps_other_recipients(session, factory, read_mode):
    team = _task_team(factory)
    responsible = factory.user("Fabio Melo")
    task_id = factory.task(
        assignee_id=team["ana"],
        creator_id=team["carla"],
        observers=[team["diego"]],
        checklist_responsibles=[responsible],
    )
    comment_id = factory.comment(task_id, team["carla"])
    set_schema_capabilities(SchemaCapabilities(task_checklist_responsible=False))

    inserted = notify_task_comment_created(
        session, task_id=task_id, comment_id=comment_id, actor_id=team["carla"], content="x"
    )

    assert inserted == 2
    assert _recipients(factory.notifications()) == sorted([team["ana"], team["diego"]])


def test_degraded_lookup_keeps_callers_uncommitted_comment(session, factory, read_mode):
    author = factory.user("Ana Souza")
    task_id = factory.task(assignee_id=author, creator_id=author)
    set_schema_capabilities(SchemaCapabilities(task_checklist_responsible=False))
    session.add(TaskCommentModel(id="c-pending", task_id=task_id, user_id=author, content="x"))
    session.flush()

    inserted = notify_task_comment_created(
        session, task_id=task_id, comment_id="c-pending", actor_id=author, content="x"
    )
    session.commit()

    assert inserted == 0
    assert session.get(TaskCommentModel, "c-pending") is not None


def test_comment_on_unknown_task_notifies_nobody(session, factory):
    author = factory.user("Ana Souza")

    assert (
        notify_task_comment_created(
            session, task_id="missing", comment_id="c-1", actor_id=author, content="x"
        )
        == 0
    )


def test_helpers_never_raise(session, factory, monkeypatch):
    team = _task_team(factory)

    def _explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(events_module, "resolve_task_recipients", _explode)

    assert (
        notify_task_status_changed(
            session,
            task_id=team["task"],
            actor_id=team["carla"],
            old_status="TODO",
            new_status="DONE",
        )
        == 0
    )


def test_status_change_with_sector_members(session, factory):
    member = factory.user("Gabi Nunes", department="vendas")
    team = _task_team(factory, department="Vendas")

    def _notify():
        return notify_task_status_changed(
            session,
            task_id=team["task"],
            actor_id=team["carla"],
            old_status="TODO",
            new_status="DOING",
            dedupe_token="1",
            include_sector_members=True,
        )

    assert _notify() == 4
    assert _notify() == 0
    row = factory.notifications(member)[0]
    assert row.responsibility_kind == "SECTOR_MEMBER"
    assert row.sector == "vendas"
    assert row.message == "Tarefa: Instalação do inversor • TODO → DOING"
    assert row.payload["new_status"] == "DOING"


def test_status_change_to_same_status_is_ignored(session, factory):
    team = _task_team(factory)

    assert (
        notify_task_status_changed(
            session,
            task_id=team["task"],
            actor_id=team["carla"],
            old_status="TODO",
            new_status="TODO",
        )
        == 0
    )


def test_checklist_toggle_notifies_once_per_state(session, factory):
    ana = factory.user("Ana Souza")
    carla = factory.user("Carla Dias")
    task_id = factory.task(assignee_id=ana, creator_id=carla)

    def _toggle(is_done):
        return notify_task_checklist_updated(
            session,
            task_id=task_id,
            checklist_item_id="item-1",
            actor_id=carla,
            item_title="Conferir documentos",
            is_done=is_done,
        )

    assert [_toggle(True), _toggle(False), _toggle(True)] == [1, 1, 0]
    titles = [row.title for row in factory.notifications(ana)]
    assert titles == [
        "Carla Dias concluiu um item do checklist",
        "Carla Dias reabriu um item do checklist",
    ]


def test_indication_event_always_reaches_top_administrators(session, factory, read_mode):
    owner = factory.user("Ana Souza")
    supervisor = factory.user("Bruno Costa", role="supervisor")
    seller = factory.user("Carla Dias", department="vendas")
    admin = factory.user("Diego Lima", role="adm_mestre")
    factory.override(admin, "INDICATION_STATUS_CHANGED", ResponsibilityKind.SYSTEM, False)
    indication_id = factory.indication(owner_id=owner, supervisor_id=supervisor)

    inserted = notify_indication_event(
        session,
        event_key="INDICATION_STATUS_CHANGED",
        indication_id=indication_id,
        actor_id=supervisor,
        title="Indicação atualizada",
        message="Status: EM_ANALISE → APROVADA",
        dedupe_token="status-1",
    )

    assert inserted == 3
    rows = {row.recipient_id: row for row in factory.notifications()}
    assert sorted(rows) == sorted([owner, seller, admin])
    assert rows[owner].responsibility_kind == "OWNER"
    assert rows[seller].responsibility_kind == "SECTOR_MEMBER"
    assert rows[admin].responsibility_kind == "SYSTEM"
    assert rows[admin].is_mandatory is True
    assert rows[owner].is_mandatory is False
    assert rows[owner].sector == "vendas"
    assert rows[owner].payload["target_path"] == f"/admin/indicacoes?openIndicacao={indication_id}"


def test_indication_without_department_column_still_notifies_owner(session, factory):
    owner = factory.user("Ana Souza")
    factory.user("Carla Dias", department="vendas")
    indication_id = factory.indication(owner_id=owner)
    set_schema_capabilities(SchemaCapabilities(user_department=False))

    inserted = notify_indication_event(
        session,
        event_key="INDICATION_CREATED",
        indication_id=indication_id,
        actor_id=None,
        title="Nova indicação",
        message="Cliente Solar",
    )

    assert inserted == 1
    assert _recipients(factory.notifications()) == [owner]


def test_work_project_release_reaches_linked_task_participants(session, factory):
    team = _task_team(factory)
    engineer = factory.user("Hugo Reis", department="obras")
    manager = factory.user("Iris Prado")
    work_id = factory.work_order(created_by=manager, linked_task_ids=[team["task"]])
    factory.override(team["ana"], "WORK_PROJECT_RELEASED", ResponsibilityKind.LINKED_TASK_PARTICIPANT, False)

    assert notify_work_project_released(session, work_id=work_id, actor_id=manager) == 5
    assert notify_work_project_released(session, work_id=work_id, actor_id=manager) == 0

    rows = {row.recipient_id: row for row in factory.notifications()}
    expected = {team["ana"], team["carla"], team["diego"], team["elisa"], engineer}
    assert set(rows) == expected
    assert rows[engineer].responsibility_kind == "SECTOR_MEMBER"
    assert rows[team["diego"]].responsibility_kind == "LINKED_TASK_PARTICIPANT"
    assert all(row.is_mandatory for row in rows.values())
    assert all(row.sector == "obras" for row in rows.values())


def test_work_order_without_process_items_notifies_creator(session, factory):
    team = _task_team(factory)
    manager = factory.user("Iris Prado")
    work_id = factory.work_order(created_by=manager, linked_task_ids=[team["task"]])
    set_schema_capabilities(SchemaCapabilities(work_process_items=False))

    inserted = notify_work_process_status_changed(
        session,
        work_id=work_id,
        actor_id=team["ana"],
        step_title="Instalação",
        old_status="PENDENTE",
        new_status="CONCLUIDO",
        dedupe_token="step-1",
    )

    assert inserted == 1
    row = factory.notifications()[0]
    assert row.recipient_id == manager
    assert row.responsibility_kind == "CREATOR"
    assert row.message == "Obra: Usina Norte • Instalação: CONCLUIDO"


def test_work_comment_with_mention(session, factory):
    manager = factory.user("Iris Prado")
    author = factory.user("Hugo Reis")
    reviewer = factory.user("Joana Alves")
    work_id = factory.work_order(created_by=manager)

    inserted = notify_work_comment_created(
        session,
        work_id=work_id,
        comment_id="wc-1",
        actor_id=author,
        content="@joana confere a medição",
    )

    assert inserted == 2
    mention = factory.notifications(reviewer)[0]
    assert mention.event_key == "WORK_COMMENT_MENTION"
    assert mention.title == "Hugo Reis mencionou você em uma obra"
    assert mention.payload["target_path"] == f"/admin/obras?openWork={work_id}"
    assert factory.notifications(manager)[0].event_key == "WORK_COMMENT_CREATED"


def test_chat_message_notifies_the_other_participant(session, factory, read_mode):
    ana = factory.user("Ana Souza")
    bruno = factory.user("Bruno Costa")
    conversation_id = factory.conversation(ana, bruno)

    def _notify():
        return notify_chat_message(
            session,
            conversation_id=conversation_id,
            sender_id=ana,
            body="Oi\n   tudo bem?",
            message_id="m-1",
        )

    assert _notify() == 1
    assert _notify() == 0
    assert factory.notifications(ana) == []
    row = factory.notifications(bruno)[0]
    assert row.title == "Mensagem interna de Ana Souza"
    assert row.message == "Oi tudo bem?"
    assert row.notification_type == "INTERNAL_CHAT_MESSAGE"
    assert row.responsibility_kind == "DIRECT"
    assert row.dedupe_key == "CHAT_MESSAGE_RECEIVED:m-1"
    assert row.payload["conversation_id"] == conversation_id
    assert row.payload["target_path"] == f"/admin/chat?conversation={conversation_id}"


def test_group_conversation_is_not_notified(session, factory):
    ana = factory.user("Ana Souza")
    conversation_id = factory.conversation(
        ana, factory.user("Bruno Costa"), factory.user("Carla Dias")
    )

    assert (
        notify_chat_message(
            session, conversation_id=conversation_id, sender_id=ana, body="Oi", message_id="m-1"
        )
        == 0
    )


def test_sanitize_preview():
    assert sanitize_preview("  linha 1\n\tlinha 2  ") == "linha 1 linha 2"
    assert sanitize_preview(None) == ""
    long_text = "a" * 200
    preview = sanitize_preview(long_text)
    assert len(preview) == 180
    assert preview.endswith("...")
    assert sanitize_preview("abcdefghijkl", max_length=10) == "abcdefg..."
