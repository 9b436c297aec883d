"""Notification engine: catalog, rule evaluation, dispatch and inbox access."""

from .catalog import event_catalog, lookup_event, seed_event_catalog
from .dedupe import build_dedupe_key, scoped_dedupe_key, validate_dedupe_key
from .dispatcher import DispatchRequest, DispatchResult, dispatch_notifications
from .events import (
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
from .mentions import extract_mentions, normalize_mention_token, resolve_mentions
from .queries import (
    clamp_limit,
    count_unread_notifications,
    list_my_notifications,
    parse_domains,
)
from .read_state import (
    mark_all_notifications_read,
    mark_conversation_as_read,
    mark_conversation_notifications_read,
    mark_notification_read,
)
from .resolvers import (
    ResolvedRecipients,
    resolve_direct_chat_recipient,
    resolve_indication_recipients,
    resolve_task_recipients,
    resolve_work_order_recipients,
)
from .rule_evaluator import RecipientDecision, evaluate_recipients
from .rules import list_default_rules, list_my_rules, upsert_default_rule, upsert_my_rule

__all__ = [
    "DispatchRequest",
    "DispatchResult",
    "RecipientDecision",
    "ResolvedRecipients",
    "build_dedupe_key",
    "clamp_limit",
    "count_unread_notifications",
    "dispatch_notifications",
    "evaluate_recipients",
    "event_catalog",
    "extract_mentions",
    "list_default_rules",
    "list_my_notifications",
    "list_my_rules",
    "lookup_event",
    "mark_all_notifications_read",
    "mark_conversation_as_read",
    "mark_conversation_notifications_read",
    "mark_notification_read",
    "normalize_mention_token",
    "notify_chat_message",
    "notify_indication_event",
    "notify_task_checklist_updated",
    "notify_task_comment_created",
    "notify_task_status_changed",
    "notify_work_comment_created",
    "notify_work_process_status_changed",
    "notify_work_project_released",
    "parse_domains",
    "resolve_direct_chat_recipient",
    "resolve_indication_recipients",
    "resolve_mentions",
    "resolve_task_recipients",
    "resolve_work_order_recipients",
    "sanitize_preview",
    "scoped_dedupe_key",
    "seed_event_catalog",
    "upsert_default_rule",
    "upsert_my_rule",
    "validate_dedupe_key",
]
