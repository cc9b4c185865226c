from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import CalendarEvent, EventType, Notification, TypeAppearance, UserProfile
from ..services import CalendarCell, MonthGrid, UserStats


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class EventTypePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str
    name: str
    label: str
    icon: str
    color_class: str
    icon_bg_class: str
    requires_end_time: bool
    requires_location: bool
    requires_url: bool
    default_recurring: bool

    @classmethod
    def from_domain(cls, event_type: EventType) -> "EventTypePayload":
        return cls(**event_type.to_record() | {"label": event_type.display_name})


class AppearancePayload(BaseModel):
    link: str
    icon: str
    color_class: str
    icon_bg_class: str
    type_name: Optional[str] = None
    type_label: Optional[str] = None

    @classmethod
    def from_domain(cls, appearance: TypeAppearance) -> "AppearancePayload":
        return cls(
            link=appearance.link.value,
            icon=appearance.icon,
            color_class=appearance.color_class,
            icon_bg_class=appearance.icon_bg_class,
            type_name=appearance.type_name,
            type_label=appearance.type_label,
        )


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str
    created_by: Optional[str] = Field(default=None)
    title: str
    description: str = Field(default="")
    notes: str = Field(default="")
    starts_at: str
    ends_at: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    meeting_url: Optional[str] = Field(default=None)
    event_type_id: Optional[str] = Field(default=None)
    status: str
    is_important: bool = Field(default=False)
    is_recurring: bool = Field(default=False)
    recurrence_pattern: Optional[str] = Field(default=None)
    shared_with: List[str] = Field(default_factory=list)
    appearance: AppearancePayload
    created_at: Optional[str] = Field(default=None)
    updated_at: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, event: CalendarEvent) -> "EventPayload":
        return cls(
            id=event.id,
            user_id=event.user_id,
            created_by=event.created_by,
            title=event.title,
            description=event.description,
            notes=event.notes,
            starts_at=event.starts_at.isoformat(),
            ends_at=_iso(event.ends_at),
            location=event.location,
            meeting_url=event.meeting_url,
            event_type_id=event.event_type_id,
            status=event.status.value,
            is_important=event.is_important,
            is_recurring=event.is_recurring,
            recurrence_pattern=event.recurrence_pattern.value if event.recurrence_pattern else None,
            shared_with=list(event.shared_with),
            appearance=AppearancePayload.from_domain(event.appearance),
            created_at=_iso(event.created_at),
            updated_at=_iso(event.updated_at),
        )


class ProfilePayload(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    status: str
    family_id: Optional[str] = None
    allowed_editors: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfilePayload":
        return cls(
            id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            username=profile.username,
            avatar_url=profile.avatar_url,
            status=profile.status.value,
            family_id=profile.family_id,
            allowed_editors=list(profile.allowed_editors),
        )


class NotificationPayload(BaseModel):
    id: str
    type: str
    from_user_id: str
    to_user_id: str
    status: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = None

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationPayload":
        return cls(**notification.to_record())


class CalendarCellPayload(BaseModel):
    day: int
    is_current_month: bool
    is_prev_month: bool
    is_next_month: bool
    is_today: bool
    indicators: List[str]
    event_count: int

    @classmethod
    def from_domain(cls, cell: CalendarCell) -> "CalendarCellPayload":
        return cls(
            day=cell.day,
            is_current_month=cell.is_current_month,
            is_prev_month=cell.is_prev_month,
            is_next_month=cell.is_next_month,
            is_today=cell.is_today,
            indicators=list(cell.indicators),
            event_count=cell.event_count,
        )


class MonthGridPayload(BaseModel):
    year: int
    month: int
    cells: List[CalendarCellPayload]

    @classmethod
    def from_domain(cls, grid: MonthGrid) -> "MonthGridPayload":
        return cls(
            year=grid.year,
            month=grid.month,
            cells=[CalendarCellPayload.from_domain(cell) for cell in grid.cells],
        )


class StatsPayload(BaseModel):
    completed_tasks: int
    upcoming_events: int

    @classmethod
    def from_domain(cls, stats: UserStats) -> "StatsPayload":
        return cls(completed_tasks=stats.completed_tasks, upcoming_events=stats.upcoming_events)
