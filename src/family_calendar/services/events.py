from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from uuid import uuid4

from ..domain import CalendarEvent, EventStatus, EventType, RecurrencePattern
from ..errors import Forbidden, NotFound, ValidationError
from .access import AccessControl
from .context import ServiceContext
from .event_types import EventTypeRegistry
from .status import StatusMaintainer

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "notes",
        "starts_at",
        "ends_at",
        "location",
        "meeting_url",
        "event_type_id",
        "event_type_name",
        "status",
        "is_important",
        "is_recurring",
        "recurrence_pattern",
        "shared_with",
    }
)


def _coerce_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValidationError("Invalid date.", fields={field_name: "Use an ISO 8601 timestamp."}) from exc
    raise ValidationError("Invalid date.", fields={field_name: "Use an ISO 8601 timestamp."})


def _coerce_status(value: Any) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError as exc:
        raise ValidationError("Invalid status.", fields={"status": f"Unknown status {value!r}."}) from exc


def _coerce_pattern(value: Any) -> Optional[RecurrencePattern]:
    if value in (None, ""):
        return None
    try:
        return RecurrencePattern(value)
    except ValueError as exc:
        allowed = ", ".join(pattern.value for pattern in RecurrencePattern)
        raise ValidationError(
            "Invalid recurrence.", fields={"recurrence_pattern": f"Expected one of: {allowed}."}
        ) from exc


def validate_event(event: CalendarEvent, event_type: Optional[EventType]) -> None:
    """Raise ``ValidationError`` with per-field messages when ``event`` is not saveable."""

    errors: Dict[str, str] = {}
    if not event.title.strip():
        errors["title"] = "Title is required."
    if event.ends_at is not None and event.ends_at < event.starts_at:
        errors["ends_at"] = "End must not be before start."
    if event_type is not None:
        if event_type.requires_end_time and event.ends_at is None:
            errors["ends_at"] = "This event type requires an end time."
        if event_type.requires_location and not (event.location or "").strip():
            errors["location"] = "This event type requires a location."
        if event_type.requires_url and not (event.meeting_url or "").strip():
            errors["meeting_url"] = "This event type requires a meeting link."
    if event.is_recurring and event.recurrence_pattern is None:
        errors["recurrence_pattern"] = "Choose how often the event repeats."
    if errors:
        raise ValidationError("Event is not valid.", fields=errors)


@dataclass(slots=True)
class EventService:
    """Create, read, update and delete events on behalf of an acting user.

    Concurrent edits by the owner and a co-editor are last-write-wins.
    """

    context: ServiceContext

    @property
    def access(self) -> AccessControl:
        return AccessControl(self.context)

    @property
    def types(self) -> EventTypeRegistry:
        return EventTypeRegistry(self.context)

    @property
    def status(self) -> StatusMaintainer:
        return StatusMaintainer(self.context)

    def _resolve_type(
        self,
        owner_id: str,
        type_id: Optional[str],
        type_name: Optional[str],
    ) -> Optional[EventType]:
        if not type_id and not type_name:
            return None
        event_type = self.types.find_for_owner(owner_id, type_id=type_id, name=type_name)
        if event_type is None:
            raise ValidationError("Unknown event type.", fields={"event_type_id": "Unknown event type."})
        return event_type

    def _owned_event(self, owner_id: str, event_id: str) -> CalendarEvent:
        event = self.context.events.fetch(event_id)
        if event is None or event.user_id != owner_id:
            raise NotFound(f"Event {event_id} not found.")
        return event

    def create_event(
        self,
        actor_id: str,
        owner_id: str,
        *,
        title: str,
        starts_at: Any,
        ends_at: Any = None,
        description: str = "",
        notes: str = "",
        location: Optional[str] = None,
        meeting_url: Optional[str] = None,
        event_type_id: Optional[str] = None,
        event_type_name: Optional[str] = None,
        is_important: bool = False,
        is_recurring: Optional[bool] = None,
        recurrence_pattern: Optional[str] = None,
        shared_with: Optional[Iterable[str]] = None,
    ) -> CalendarEvent:
        self.access.require_edit(owner_id, actor_id)
        clock = self.context.clock
        start = _coerce_datetime(starts_at, "starts_at")
        if start is None:
            raise ValidationError("Event is not valid.", fields={"starts_at": "Start is required."})
        end = _coerce_datetime(ends_at, "ends_at")
        event_type = self._resolve_type(owner_id, event_type_id, event_type_name)
        now = clock.now()

        event = CalendarEvent(
            id=str(uuid4()),
            user_id=owner_id,
            created_by=actor_id,
            title=(title or "").strip(),
            description=description or "",
            notes=notes or "",
            starts_at=clock.localize(start),
            ends_at=clock.localize(end) if end else None,
            location=location,
            meeting_url=meeting_url,
            event_type_id=event_type.id if event_type else None,
            event_type=event_type,
            is_important=bool(is_important),
            is_recurring=bool(event_type.default_recurring if is_recurring is None and event_type else is_recurring),
            recurrence_pattern=_coerce_pattern(recurrence_pattern),
            shared_with=list(shared_with or []),
            created_at=now,
            updated_at=now,
        )
        if event_type is not None:
            event.snapshot_appearance(event_type)
        validate_event(event, event_type)
        saved = self.context.events.insert(event)
        logger.info("Event %s created in %s's calendar by %s", saved.id, owner_id, actor_id)
        return saved

    def get_event(self, actor_id: str, owner_id: str, event_id: str) -> CalendarEvent:
        event = self.context.events.fetch(event_id)
        visible = event is not None and event.user_id == owner_id and self.access.can_view(event, actor_id)
        if not visible:
            if self.access.can_edit(owner_id, actor_id):
                raise NotFound(f"Event {event_id} not found.")
            raise Forbidden()
        self.status.sweep_events([event])
        return event

    def update_event(self, actor_id: str, owner_id: str, event_id: str, patch: Dict[str, Any]) -> CalendarEvent:
        self.access.require_edit(owner_id, actor_id)
        unknown = sorted(set(patch) - EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(
                "Unknown event fields.",
                fields={name: "This field cannot be edited." for name in unknown},
            )
        existing = self._owned_event(owner_id, event_id)
        clock = self.context.clock
        changes: Dict[str, Any] = {}
        for key, value in patch.items():
            if key in ("starts_at", "ends_at"):
                parsed = _coerce_datetime(value, key)
                if key == "starts_at" and parsed is None:
                    raise ValidationError("Event is not valid.", fields={"starts_at": "Start is required."})
                changes[key] = clock.localize(parsed) if parsed else None
            elif key == "status":
                changes[key] = _coerce_status(value)
            elif key == "recurrence_pattern":
                changes[key] = _coerce_pattern(value)
            elif key == "shared_with":
                changes[key] = list(value or [])
            elif key in ("is_important", "is_recurring"):
                changes[key] = bool(value)
            elif key == "title":
                changes[key] = (value or "").strip()
            elif key != "event_type_name":
                changes[key] = value

        event_type = existing.event_type
        if "event_type_id" in patch or "event_type_name" in patch:
            event_type = self._resolve_type(owner_id, patch.get("event_type_id"), patch.get("event_type_name"))
            changes["event_type_id"] = event_type.id if event_type else None

        merged = replace(existing, **changes, event_type=event_type, updated_at=clock.now())
        if event_type is not None and event_type.id != existing.event_type_id:
            merged.snapshot_appearance(event_type)
        validate_event(merged, event_type)

        record = merged.to_record()
        for key in ("id", "user_id", "created_by", "created_at"):
            record.pop(key)
        updated = self.context.events.update(event_id, record)
        if updated is None:
            raise NotFound(f"Event {event_id} not found.")
        logger.info("Event %s updated by %s", event_id, actor_id)
        return updated

    def set_status(self, actor_id: str, owner_id: str, event_id: str, status: Any) -> CalendarEvent:
        """Change only the status. Type requirements are not re-checked."""

        self.access.require_edit(owner_id, actor_id)
        target = _coerce_status(status)
        self._owned_event(owner_id, event_id)
        updated = self.context.events.update(
            event_id,
            {"status": target.value, "updated_at": self.context.clock.now().isoformat()},
        )
        if updated is None:
            raise NotFound(f"Event {event_id} not found.")
        logger.info("Event %s marked %s by %s", event_id, target.value, actor_id)
        return updated

    def delete_event(self, actor_id: str, owner_id: str, event_id: str) -> bool:
        self.access.require_edit(owner_id, actor_id)
        self._owned_event(owner_id, event_id)
        deleted = self.context.events.delete(event_id)
        logger.info("Event %s deleted from %s's calendar by %s", event_id, owner_id, actor_id)
        return deleted
