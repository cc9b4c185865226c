"""Data access layer."""

from __future__ import annotations

from .cache import DayIndex
from .local import (
    LocalEventRepository,
    LocalEventTypeRepository,
    LocalNotificationRepository,
    LocalProfileRepository,
)
from .supabase import SupabaseGateway, SupabaseNotInitializedError

__all__ = [
    "DayIndex",
    "LocalEventRepository",
    "LocalEventTypeRepository",
    "LocalNotificationRepository",
    "LocalProfileRepository",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
]
