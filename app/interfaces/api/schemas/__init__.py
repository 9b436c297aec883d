from .notification import MarkedCountRead, NotificationRead, UnreadCountRead
from .notification_rule import (
    DefaultRuleRead,
    DefaultRuleUpdate,
    NotificationRuleRead,
    NotificationRuleUpdate,
)

__all__ = [
    "DefaultRuleRead",
    "DefaultRuleUpdate",
    "MarkedCountRead",
    "NotificationRead",
    "NotificationRuleRead",
    "NotificationRuleUpdate",
    "UnreadCountRead",
]
