from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional

from .enums import (
    EventStatus,
    NotificationStatus,
    NotificationType,
    RecurrencePattern,
    TypeLink,
    UserStatus,
)

DEFAULT_ICON = "event"
DEFAULT_COLOR_CLASS = "text-primary"
DEFAULT_ICON_BG_CLASS = "bg-primary/10"


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    raise ValueError(f"Unsupported datetime value: {value!r}")


def _optional_datetime(value: Any) -> Optional[datetime]:
    return _parse_datetime(value) if value else None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(slots=True)
class UserProfile:
    id: str
    email: str
    full_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    family_id: Optional[str] = None
    allowed_editors: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_seen_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.email

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=str(record["id"]),
            email=str(record.get("email") or ""),
            full_name=record.get("full_name"),
            username=record.get("username"),
            avatar_url=record.get("avatar_url"),
            status=UserStatus(record.get("status") or UserStatus.ACTIVE),
            family_id=record.get("family_id"),
            allowed_editors=[str(item) for item in record.get("allowed_editors") or []],
            created_at=_optional_datetime(record.get("created_at")),
            updated_at=_optional_datetime(record.get("updated_at")),
            last_seen_at=_optional_datetime(record.get("last_seen_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "username": self.username,
            "avatar_url": self.avatar_url,
            "status": self.status.value,
            "family_id": self.family_id,
            "allowed_editors": list(self.allowed_editors),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "last_seen_at": _iso(self.last_seen_at),
        }


@dataclass(frozen=True, slots=True)
class TypeAppearance:
    """Visuals an event renders with, tagged by where they came from.

    ``RESOLVED`` visuals come from the live event type. ``ORPHANED`` visuals
    come from the snapshot kept on the event itself and are only a
    read-time fallback.
    """

    link: TypeLink
    icon: str
    color_class: str
    icon_bg_class: str
    type_name: Optional[str] = None
    type_label: Optional[str] = None

    @property
    def is_orphaned(self) -> bool:
        return self.link is TypeLink.ORPHANED


@dataclass(slots=True)
class EventType:
    id: str
    user_id: str
    name: str
    label: str = ""
    icon: str = DEFAULT_ICON
    color_class: str = DEFAULT_COLOR_CLASS
    icon_bg_class: str = DEFAULT_ICON_BG_CLASS
    requires_end_time: bool = True
    requires_location: bool = False
    requires_url: bool = False
    default_recurring: bool = False

    @property
    def display_name(self) -> str:
        return self.label or self.name.capitalize()

    def appearance(self) -> TypeAppearance:
        return TypeAppearance(
            link=TypeLink.RESOLVED,
            icon=self.icon,
            color_class=self.color_class,
            icon_bg_class=self.icon_bg_class,
            type_name=self.name,
            type_label=self.display_name,
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EventType":
        return cls(
            id=str(record["id"]),
            user_id=str(record["user_id"]),
            name=str(record["name"]),
            label=record.get("label") or "",
            icon=record.get("icon") or DEFAULT_ICON,
            color_class=record.get("color_class") or DEFAULT_COLOR_CLASS,
            icon_bg_class=record.get("icon_bg_class") or DEFAULT_ICON_BG_CLASS,
            requires_end_time=bool(record.get("requires_end_time", True)),
            requires_location=bool(record.get("requires_location", False)),
            requires_url=bool(record.get("requires_url", False)),
            default_recurring=bool(record.get("default_recurring", False)),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "label": self.label,
            "icon": self.icon,
            "color_class": self.color_class,
            "icon_bg_class": self.icon_bg_class,
            "requires_end_time": self.requires_end_time,
            "requires_location": self.requires_location,
            "requires_url": self.requires_url,
            "default_recurring": self.default_recurring,
        }


@dataclass(slots=True)
class CalendarEvent:
    id: str
    user_id: str
    title: str
    starts_at: datetime
    ends_at: Optional[datetime] = None
    created_by: Optional[str] = None
    description: str = ""
    notes: str = ""
    location: Optional[str] = None
    meeting_url: Optional[str] = None
    event_type_id: Optional[str] = None
    event_type: Optional[EventType] = None
    status: EventStatus = EventStatus.SCHEDULED
    is_important: bool = False
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None
    shared_with: List[str] = field(default_factory=list)
    fallback_icon: Optional[str] = None
    fallback_color_class: Optional[str] = None
    fallback_icon_bg_class: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def effective_end(self) -> datetime:
        return self.ends_at or self.starts_at

    @property
    def appearance(self) -> TypeAppearance:
        if self.event_type is not None:
            return self.event_type.appearance()
        return TypeAppearance(
            link=TypeLink.ORPHANED,
            icon=self.fallback_icon or DEFAULT_ICON,
            color_class=self.fallback_color_class or DEFAULT_COLOR_CLASS,
            icon_bg_class=self.fallback_icon_bg_class or DEFAULT_ICON_BG_CLASS,
        )

    def snapshot_appearance(self, event_type: EventType) -> None:
        """Copy the type's visuals onto the event so it survives type deletion."""

        self.fallback_icon = event_type.icon
        self.fallback_color_class = event_type.color_class
        self.fallback_icon_bg_class = event_type.icon_bg_class

    @classmethod
    def from_record(cls, record: Dict[str, Any], *, event_type: Optional[Dict[str, Any]] = None) -> "CalendarEvent":
        pattern = record.get("recurrence_pattern")
        instance = cls(
            id=str(record["id"]),
            user_id=str(record["user_id"]),
            title=str(record["title"]),
            starts_at=_parse_datetime(record["starts_at"]),
            ends_at=_optional_datetime(record.get("ends_at")),
            created_by=record.get("created_by"),
            description=record.get("description") or "",
            notes=record.get("notes") or "",
            location=record.get("location"),
            meeting_url=record.get("meeting_url"),
            event_type_id=record.get("event_type_id"),
            status=EventStatus(record.get("status") or EventStatus.SCHEDULED),
            is_important=bool(record.get("is_important", False)),
            is_recurring=bool(record.get("is_recurring", False)),
            recurrence_pattern=RecurrencePattern(pattern) if pattern else None,
            shared_with=[str(item) for item in record.get("shared_with") or []],
            fallback_icon=record.get("fallback_icon"),
            fallback_color_class=record.get("fallback_color_class"),
            fallback_icon_bg_class=record.get("fallback_icon_bg_class"),
            created_at=_optional_datetime(record.get("created_at")),
            updated_at=_optional_datetime(record.get("updated_at")),
        )
        if event_type:
            instance.event_type = EventType.from_record(event_type)
        return instance

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_by": self.created_by,
            "title": self.title,
            "description": self.description,
            "notes": self.notes,
            "starts_at": self.starts_at.isoformat(),
            "ends_at": _iso(self.ends_at),
            "location": self.location,
            "meeting_url": self.meeting_url,
            "event_type_id": self.event_type_id,
            "status": self.status.value,
            "is_important": self.is_important,
            "is_recurring": self.is_recurring,
            "recurrence_pattern": self.recurrence_pattern.value if self.recurrence_pattern else None,
            "shared_with": list(self.shared_with),
            "fallback_icon": self.fallback_icon,
            "fallback_color_class": self.fallback_color_class,
            "fallback_icon_bg_class": self.fallback_icon_bg_class,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(frozen=True, slots=True)
class FamilyGroup:
    id: str
    member_ids: FrozenSet[str]

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.member_ids


@dataclass(slots=True)
class Notification:
    id: str
    from_user_id: str
    to_user_id: str
    type: NotificationType = NotificationType.FAMILY_REQUEST
    payload: Dict[str, Any] = field(default_factory=dict)
    status: NotificationStatus = NotificationStatus.PENDING
    created_at: Optional[datetime] = None

    @property
    def family_id(self) -> Optional[str]:
        return self.payload.get("family_id")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Notification":
        return cls(
            id=str(record["id"]),
            from_user_id=str(record["from_user_id"]),
            to_user_id=str(record["to_user_id"]),
            type=NotificationType(record.get("type") or NotificationType.FAMILY_REQUEST),
            payload=dict(record.get("payload") or {}),
            status=NotificationStatus(record.get("status") or NotificationStatus.PENDING),
            created_at=_optional_datetime(record.get("created_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "from_user_id": self.from_user_id,
            "to_user_id": self.to_user_id,
            "type": self.type.value,
            "payload": self.payload,
            "status": self.status.value,
            "created_at": _iso(self.created_at),
        }
