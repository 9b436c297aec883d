"""Repository implementations for infrastructure layer."""

from .chat_repository import ChatRepository
from .indication_repository import IndicationRepository
from .notification_event_repository import NotificationEventRepository
from .notification_repository import NotificationRepository
from .notification_rule_repository import NotificationRuleRepository, normalize_sector
from .task_repository import TaskRepository
from .user_repository import UserRepository
from .work_order_repository import WorkOrderRepository

__all__ = [
    "ChatRepository",
    "IndicationRepository",
    "NotificationEventRepository",
    "NotificationRepository",
    "NotificationRuleRepository",
    "TaskRepository",
    "UserRepository",
    "WorkOrderRepository",
    "normalize_sector",
]
