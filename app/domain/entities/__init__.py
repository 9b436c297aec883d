"""Domain entities exposed by the application."""

from .chat import ChatConversation
from .indication import Indication
from .notification import Notification, NotificationMetadata
from .notification_event import EventDefinition
from .notification_kinds import (
    NotificationDomain,
    ResponsibilityKind,
    infer_notification_type,
    primary_kind,
    sort_kinds,
)
from .notification_rule import NotificationRuleView, SectorDefaultRule, UserRuleOverride
from .recipient import RecipientCandidate, candidates_for, merge_candidates
from .role import Role
from .task import Task, TaskComment
from .user import User
from .work_order import WorkOrder

__all__ = [
    "ChatConversation",
    "EventDefinition",
    "Indication",
    "Notification",
    "NotificationDomain",
    "NotificationMetadata",
    "NotificationRuleView",
    "RecipientCandidate",
    "ResponsibilityKind",
    "Role",
    "SectorDefaultRule",
    "Task",
    "TaskComment",
    "User",
    "UserRuleOverride",
    "WorkOrder",
    "candidates_for",
    "infer_notification_type",
    "merge_candidates",
    "primary_kind",
    "sort_kinds",
]
