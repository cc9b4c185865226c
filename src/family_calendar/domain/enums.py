from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    @classmethod
    def _missing_(cls, value: object) -> Optional["EventStatus"]:
        if isinstance(value, str):
            return _STATUS_ALIASES.get(value.strip().lower())
        return None

    @classmethod
    def spellings(cls, statuses: Iterable["EventStatus"]) -> list[str]:
        """Stored values that read back as one of ``statuses``, old aliases included."""

        wanted = set(statuses)
        values = [status.value for status in cls if status in wanted]
        values.extend(alias for alias, status in _STATUS_ALIASES.items() if status in wanted)
        return values


# Spellings written by earlier clients of the same tables.
_STATUS_ALIASES = {
    "pending": EventStatus.SCHEDULED,
    "planned": EventStatus.SCHEDULED,
    "programado": EventStatus.SCHEDULED,
    "completado": EventStatus.COMPLETED,
    "vencido": EventStatus.OVERDUE,
    "cancelado": EventStatus.CANCELLED,
    "canceled": EventStatus.CANCELLED,
}


class RecurrencePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class NotificationType(str, Enum):
    FAMILY_REQUEST = "family_request"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class TypeLink(str, Enum):
    RESOLVED = "resolved"
    ORPHANED = "orphaned"


FAMILY_SHARE = "family"
