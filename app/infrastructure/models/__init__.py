"""ORM models used by the application infrastructure."""

from .chat import ChatConversationModel, ChatParticipantModel
from .indication import IndicationModel
from .notification import NotificationModel
from .notification_event import NotificationEventModel
from .notification_rule import NotificationDefaultRuleModel, NotificationUserRuleModel
from .role import RoleModel
from .task import (
    TaskChecklistItemModel,
    TaskCommentModel,
    TaskModel,
    TaskObserverModel,
)
from .user import UserModel
from .work_order import WorkOrderModel, WorkProcessItemModel

__all__ = [
    "ChatConversationModel",
    "ChatParticipantModel",
    "IndicationModel",
    "NotificationDefaultRuleModel",
    "NotificationEventModel",
    "NotificationModel",
    "NotificationUserRuleModel",
    "RoleModel",
    "TaskChecklistItemModel",
    "TaskCommentModel",
    "TaskModel",
    "TaskObserverModel",
    "UserModel",
    "WorkOrderModel",
    "WorkProcessItemModel",
]
