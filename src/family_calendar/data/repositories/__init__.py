"""Supabase repositories for first-class domain objects."""

from __future__ import annotations

from .event_types import EventTypeRepository
from .events import EventRepository
from .notifications import NotificationRepository
from .profiles import ProfileRepository

__all__ = [
    "EventRepository",
    "EventTypeRepository",
    "NotificationRepository",
    "ProfileRepository",
]
