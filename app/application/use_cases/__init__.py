"""Aggregate application use cases."""

from .notifications import dispatch_notifications, seed_event_catalog

__all__ = [
    "dispatch_notifications",
    "seed_event_catalog",
]
