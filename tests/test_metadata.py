"""Tests for the typed notification metadata and kind helpers."""

import pytest

from app.domain.entities import (
    NotificationDomain,
    NotificationMetadata,
    ResponsibilityKind,
    infer_notification_type,
    primary_kind,
)


def test_unknown_and_missing_keys_read_as_none():
    metadata = NotificationMetadata(task_id="t-1")

    assert metadata.get("task_id") == "t-1"
    assert metadata.get("conversation_id") is None
    assert metadata.get("not_a_key") is None


def test_from_payload_ignores_unknown_keys_and_blank_values():
    metadata = NotificationMetadata.from_payload(
        {
            "conversation_id": "c-1",
            "target_path": "   ",
            "reasons": ["MENTION"],
            "responsibility_kinds": ["mention", "bogus", "OBSERVER"],
        }
    )

    assert metadata.conversation_id == "c-1"
    assert metadata.target_path is None
    assert metadata.responsibility_kinds == (
        ResponsibilityKind.MENTION,
        ResponsibilityKind.OBSERVER,
    )


def test_to_payload_drops_empty_keys():
    payload = NotificationMetadata(
        task_id="t-1", responsibility_kinds=(ResponsibilityKind.ASSIGNEE,)
    ).to_payload()

    assert payload == {"task_id": "t-1", "responsibility_kinds": ["ASSIGNEE"]}


def test_merged_prefers_values_of_the_other_metadata():
    base = NotificationMetadata(task_id="t-1", sector="vendas")
    merged = base.merged(NotificationMetadata(sector="obras"))

    assert merged.task_id == "t-1"
    assert merged.sector == "obras"


@pytest.mark.parametrize(
    ("event_key", "domain", "expected"),
    [
        ("TASK_COMMENT_MENTION", NotificationDomain.TASK, "MENTION"),
        ("WORK_COMMENT_MENTION", NotificationDomain.OBRA, "MENTION"),
        ("TASK_COMMENT_REPLY", NotificationDomain.TASK, "REPLY"),
        ("TASK_COMMENT_CREATED", NotificationDomain.TASK, "COMMENT"),
        ("CHAT_MESSAGE_RECEIVED", NotificationDomain.CHAT, "INTERNAL_CHAT_MESSAGE"),
        ("TASK_STATUS_CHANGED", NotificationDomain.TASK, "TASK_EVENT"),
        ("INDICATION_CREATED", NotificationDomain.INDICACAO, "INDICACAO_EVENT"),
        ("WORK_PROJECT_RELEASED", NotificationDomain.OBRA, "OBRA_EVENT"),
    ],
)
def test_infer_notification_type(event_key, domain, expected):
    assert infer_notification_type(event_key, domain) == expected


def test_primary_kind_follows_priority_order():
    kinds = {ResponsibilityKind.SYSTEM, ResponsibilityKind.OWNER, ResponsibilityKind.DIRECT}

    assert primary_kind(kinds) is ResponsibilityKind.OWNER
    assert primary_kind([]) is None
