"""Domain models for family calendar planning."""

from __future__ import annotations

from .enums import (
    FAMILY_SHARE,
    EventStatus,
    NotificationStatus,
    NotificationType,
    RecurrencePattern,
    TypeLink,
    UserStatus,
)
from .models import (
    CalendarEvent,
    EventType,
    FamilyGroup,
    Notification,
    TypeAppearance,
    UserProfile,
)

__all__ = [
    "CalendarEvent",
    "EventStatus",
    "EventType",
    "FAMILY_SHARE",
    "FamilyGroup",
    "Notification",
    "NotificationStatus",
    "NotificationType",
    "RecurrencePattern",
    "TypeAppearance",
    "TypeLink",
    "UserProfile",
    "UserStatus",
]
