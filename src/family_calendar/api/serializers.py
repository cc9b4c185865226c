from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..domain import CalendarEvent, EventType, Notification, UserProfile
from ..services import MonthGrid, UserStats
from .models import (
    EventPayload,
    EventTypePayload,
    MonthGridPayload,
    NotificationPayload,
    ProfilePayload,
    StatsPayload,
)


def serialize_event_type(event_type: EventType) -> Dict[str, Any]:
    return EventTypePayload.from_domain(event_type).model_dump()


def serialize_event(event: CalendarEvent) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump()


def serialize_events(events: Iterable[CalendarEvent]) -> List[Dict[str, Any]]:
    return [serialize_event(event) for event in events]


def serialize_profile(profile: UserProfile) -> Dict[str, Any]:
    return ProfilePayload.from_domain(profile).model_dump()


def serialize_notification(notification: Notification) -> Dict[str, Any]:
    return NotificationPayload.from_domain(notification).model_dump()


def serialize_month_grid(grid: MonthGrid) -> Dict[str, Any]:
    return MonthGridPayload.from_domain(grid).model_dump()


def serialize_stats(stats: UserStats) -> Dict[str, Any]:
    return StatsPayload.from_domain(stats).model_dump()
