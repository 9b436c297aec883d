"""Integration tests for the notification inbox endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.application.use_cases.notifications import notify_chat_message
from app.infrastructure.security import create_access_token


@pytest.fixture()
def client():
    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _auth(user_id: int) -> dict[str, str]:
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def inbox(session, factory):
    """Two users chatting in two conversations; Bruno has three unread messages."""

    ana = factory.user("Ana Souza")
    bruno = factory.user("Bruno Costa")
    first = factory.conversation(ana, bruno, unread=2)
    second = factory.conversation(ana, bruno)
    for conversation_id, message_id in ((first, "m-1"), (first, "m-2"), (second, "m-3")):
        notify_chat_message(
            session,
            conversation_id=conversation_id,
            sender_id=ana,
            body=f"mensagem {message_id}",
            message_id=message_id,
        )
    return {"ana": ana, "bruno": bruno, "first": first, "second": second}


def test_requests_without_valid_token_are_rejected(client: TestClient) -> None:
    assert client.get("/notifications").status_code == 401
    response = client.get("/notifications", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_inactive_user_is_rejected(client: TestClient, factory) -> None:
    user_id = factory.user("Carla Dias", is_active=False)

    assert client.get("/notifications", headers=_auth(user_id)).status_code == 401


def test_inbox_flow(client: TestClient, inbox) -> None:
    headers = _auth(inbox["bruno"])

    listing = client.get("/notifications", headers=headers)
    assert listing.status_code == 200
    items = listing.json()
    assert [item["title"] for item in items] == ["Mensagem interna de Ana Souza"] * 3
    assert items[0]["type"] == "INTERNAL_CHAT_MESSAGE"
    assert items[0]["metadata"]["message_id"] == "m-3"
    assert client.get("/notifications", headers=_auth(inbox["ana"])).json() == []

    count = client.get("/notifications/unread-count", headers=headers)
    assert count.json() == {"unread": 3}

    read = client.post(f"/notifications/{items[0]['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread": 2}

    others = client.post(f"/notifications/{items[1]['id']}/read", headers=_auth(inbox["ana"]))
    assert others.status_code == 404

    read_all = client.post("/notifications/read-all", headers=headers)
    assert read_all.json() == {"updated": 2}
    everything = client.get(
        "/notifications", params={"include_read": True, "limit": 2}, headers=headers
    )
    assert len(everything.json()) == 2


def test_domain_filter(client: TestClient, inbox) -> None:
    headers = _auth(inbox["bruno"])

    chat = client.get("/notifications/unread-count", params={"domains": "CHAT"}, headers=headers)
    tasks = client.get("/notifications", params={"domains": ["TASK"]}, headers=headers)

    assert chat.json() == {"unread": 3}
    assert tasks.json() == []


def test_reading_a_conversation(client: TestClient, inbox) -> None:
    headers = _auth(inbox["bruno"])

    response = client.post(f"/chat/conversations/{inbox['first']}/read", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"updated": 2}
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread": 1}


def test_reading_a_foreign_conversation_is_not_found(client: TestClient, inbox, factory) -> None:
    outsider = factory.user("Carla Dias")

    response = client.post(f"/chat/conversations/{inbox['first']}/read", headers=_auth(outsider))

    assert response.status_code == 404
    assert response.json()["detail"] == "Conversa não encontrada"


def test_personal_rules(client: TestClient, factory) -> None:
    headers = _auth(factory.user("Ana Souza"))

    rules = client.get("/notifications/rules/me", headers=headers)
    assert rules.status_code == 200
    assert {"TASK_COMMENT_CREATED", "WORK_PROJECT_RELEASED"} <= {
        rule["event_key"] for rule in rules.json()
    }

    update = client.put(
        "/notifications/rules/me",
        json={"event_key": "TASK_COMMENT_CREATED", "responsibility_kind": "OBSERVER", "enabled": False},
        headers=headers,
    )
    assert update.status_code == 200
    assert update.json()["enabled"] is False
    assert update.json()["has_user_override"] is True

    mandatory = client.put(
        "/notifications/rules/me",
        json={"event_key": "WORK_PROJECT_RELEASED", "responsibility_kind": "CREATOR", "enabled": False},
        headers=headers,
    )
    assert mandatory.status_code == 422

    unexpected = client.put(
        "/notifications/rules/me",
        json={"event_key": "TASK_COMMENT_CREATED", "responsibility_kind": "OBSERVER", "enabled": True, "sector": "x"},
        headers=headers,
    )
    assert unexpected.status_code == 422


def test_default_rules_are_admin_only(client: TestClient, factory) -> None:
    seller = _auth(factory.user("Ana Souza"))
    admin = _auth(factory.user("Diego Lima", role="adm_mestre"))
    payload = {
        "sector": "vendas",
        "event_key": "TASK_COMMENT_CREATED",
        "responsibility_kind": "SECTOR_MEMBER",
        "enabled": False,
    }

    assert client.get("/notifications/rules/defaults", headers=seller).status_code == 403
    assert client.put("/notifications/rules/defaults", json=payload, headers=seller).status_code == 403

    saved = client.put("/notifications/rules/defaults", json=payload, headers=admin)
    assert saved.status_code == 200
    assert saved.json()["sector"] == "vendas"
    assert saved.json()["enabled"] is False

    listing = client.get(
        "/notifications/rules/defaults", params={"sector": "vendas"}, headers=admin
    )
    assert [rule["responsibility_kind"] for rule in listing.json()] == ["SECTOR_MEMBER"]


def test_websocket_sends_unread_count_and_answers_ping(client: TestClient, inbox) -> None:
    token = create_access_token({"sub": str(inbox["bruno"])})

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        assert websocket.receive_json() == {"type": "init", "data": {"unread": 3}}
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}
