from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from ..errors import Forbidden, ValidationError
from .registry import register_api
from .serializers import (
    serialize_event,
    serialize_event_type,
    serialize_events,
    serialize_month_grid,
    serialize_notification,
    serialize_profile,
    serialize_stats,
)
from .state import api_state


def _parse_date(value: str, field_name: str = "day") -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid ISO date: {value}", fields={field_name: "Use YYYY-MM-DD."}) from exc


def _owner(actor_id: str, owner_id: Optional[str]) -> str:
    return owner_id or actor_id


# Profiles


@register_api(
    "register_profile",
    description="Create or refresh the public profile of a user the auth provider has signed up.",
    category="profiles",
    tags=("write",),
    mutates=True,
)
def register_profile(
    actor_id: str,
    user_id: str,
    email: str,
    full_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> Dict[str, Any]:
    if actor_id != user_id:
        raise Forbidden("Profiles can only be registered by their own user.")
    profile = api_state.profiles.register(user_id, email, full_name=full_name, avatar_url=avatar_url)
    return serialize_profile(profile)


@register_api(
    "get_profile",
    description="Return the caller's profile, or a family member's when user_id is given.",
    category="profiles",
    tags=("read",),
)
def get_profile(actor_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
    target = user_id or actor_id
    if target != actor_id:
        api_state.access.require_calendar_view(target, actor_id)
    return serialize_profile(api_state.profiles.get(target))


@register_api(
    "update_profile",
    description="Update the caller's display fields (full_name, username, avatar_url, status).",
    category="profiles",
    tags=("write",),
    mutates=True,
)
def update_profile(actor_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    return serialize_profile(api_state.profiles.update(actor_id, patch))


# Event types


@register_api(
    "list_event_types",
    description="List an owner's event types; the four defaults are created on first use.",
    category="event_types",
    tags=("read",),
)
def list_event_types(actor_id: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    api_state.access.require_calendar_view(owner, actor_id)
    types = api_state.event_types.list_types(owner)
    return {"owner_id": owner, "event_types": [serialize_event_type(item) for item in types]}


@register_api(
    "create_event_type",
    description="Create a custom event type in the caller's catalog.",
    category="event_types",
    tags=("write",),
    mutates=True,
)
def create_event_type(
    actor_id: str,
    name: str,
    label: str = "",
    icon: str = "event",
    color_class: str = "text-primary",
    icon_bg_class: str = "bg-primary/10",
    requires_end_time: bool = True,
    requires_location: bool = False,
    requires_url: bool = False,
    default_recurring: bool = False,
) -> Dict[str, Any]:
    fields = {
        "name": name,
        "label": label,
        "icon": icon,
        "color_class": color_class,
        "icon_bg_class": icon_bg_class,
        "requires_end_time": requires_end_time,
        "requires_location": requires_location,
        "requires_url": requires_url,
        "default_recurring": default_recurring,
    }
    return serialize_event_type(api_state.event_types.create_type(actor_id, fields))


@register_api(
    "update_event_type",
    description="Patch one of the caller's event types.",
    category="event_types",
    tags=("write",),
    mutates=True,
)
def update_event_type(actor_id: str, type_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    return serialize_event_type(api_state.event_types.update_type(type_id, patch, actor_id))


@register_api(
    "delete_event_type",
    description="Delete one of the caller's event types. Events using it keep their snapshot visuals.",
    category="event_types",
    tags=("write",),
    mutates=True,
)
def delete_event_type(actor_id: str, type_id: str) -> Dict[str, Any]:
    return {"deleted": api_state.event_types.delete_type(type_id, actor_id), "type_id": type_id}


@register_api(
    "event_type_palette",
    description="Icons and color presets available to event types.",
    category="event_types",
    tags=("read", "metadata"),
)
def event_type_palette() -> Dict[str, Any]:
    return api_state.event_types.palette()


# Events


@register_api(
    "create_event",
    description="Create an event in an owner's calendar. The caller must be allowed to edit it.",
    category="events",
    tags=("write",),
    mutates=True,
)
def create_event(
    actor_id: str,
    title: str,
    starts_at: str,
    owner_id: Optional[str] = None,
    ends_at: Optional[str] = None,
    description: str = "",
    notes: str = "",
    location: Optional[str] = None,
    meeting_url: Optional[str] = None,
    event_type_id: Optional[str] = None,
    event_type_name: Optional[str] = None,
    is_important: bool = False,
    is_recurring: Optional[bool] = None,
    recurrence_pattern: Optional[str] = None,
    shared_with: Optional[List[str]] = None,
) -> Dict[str, Any]:
    event = api_state.events.create_event(
        actor_id,
        _owner(actor_id, owner_id),
        title=title,
        starts_at=starts_at,
        ends_at=ends_at,
        description=description,
        notes=notes,
        location=location,
        meeting_url=meeting_url,
        event_type_id=event_type_id,
        event_type_name=event_type_name,
        is_important=is_important,
        is_recurring=is_recurring,
        recurrence_pattern=recurrence_pattern,
        shared_with=shared_with,
    )
    return serialize_event(event)


@register_api(
    "get_event",
    description="Fetch one event the caller may view.",
    category="events",
    tags=("read",),
)
def get_event(actor_id: str, event_id: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
    return serialize_event(api_state.events.get_event(actor_id, _owner(actor_id, owner_id), event_id))


@register_api(
    "update_event",
    description="Patch an event in an owner's calendar.",
    category="events",
    tags=("write",),
    mutates=True,
)
def update_event(
    actor_id: str,
    event_id: str,
    patch: Dict[str, Any],
    owner_id: Optional[str] = None,
) -> Dict[str, Any]:
    return serialize_event(api_state.events.update_event(actor_id, _owner(actor_id, owner_id), event_id, patch))


@register_api(
    "set_event_status",
    description="Set an event's status (scheduled, completed, overdue, cancelled).",
    category="events",
    tags=("write",),
    mutates=True,
)
def set_event_status(actor_id: str, event_id: str, status: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
    return serialize_event(api_state.events.set_status(actor_id, _owner(actor_id, owner_id), event_id, status))


@register_api(
    "delete_event",
    description="Delete an event from an owner's calendar.",
    category="events",
    tags=("write",),
    mutates=True,
)
def delete_event(actor_id: str, event_id: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
    deleted = api_state.events.delete_event(actor_id, _owner(actor_id, owner_id), event_id)
    return {"deleted": deleted, "event_id": event_id}


@register_api(
    "share_event",
    description="Replace an event's share list with user ids and/or the 'family' sentinel.",
    category="events",
    tags=("write", "sharing"),
    mutates=True,
)
def share_event(
    actor_id: str,
    event_id: str,
    shared_with: List[str],
    owner_id: Optional[str] = None,
) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    return serialize_event(api_state.sharing.set_shared_with(event_id, shared_with, owner, actor_id))


@register_api(
    "shared_with_me",
    description="Events other family members shared with the caller.",
    category="events",
    tags=("read", "sharing"),
)
def shared_with_me(actor_id: str) -> Dict[str, Any]:
    return {"events": serialize_events(api_state.sharing.shared_with_me(actor_id))}


@register_api(
    "sweep_statuses",
    description="Move stale scheduled events to completed or overdue.",
    category="events",
    tags=("write", "maintenance"),
    mutates=True,
)
def sweep_statuses(actor_id: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    api_state.access.require_edit(owner, actor_id)
    report = api_state.status.sweep(owner)
    return {
        "completed": list(report.completed),
        "overdue": list(report.overdue),
        "failed": list(report.failed),
        "listing_failed": report.listing_failed,
    }


# Views


@register_api(
    "month_grid",
    description="Build the 42-cell month grid (weeks start on Sunday) with type-colored indicators.",
    category="calendar",
    tags=("read",),
)
def month_grid(actor_id: str, year: int, month: int, owner_id: Optional[str] = None) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    api_state.access.require_calendar_view(owner, actor_id)
    return serialize_month_grid(api_state.calendar.build_month_grid(year, month, owner))


@register_api(
    "schedule",
    description="Events for one day, or the agenda (today, upcoming, then overdue) when no day is given.",
    category="calendar",
    tags=("read",),
)
def schedule(
    actor_id: str,
    owner_id: Optional[str] = None,
    day: Optional[str] = None,
    reference: Optional[str] = None,
) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    api_state.access.require_calendar_view(owner, actor_id)
    target = _parse_date(day) if day else None
    anchor = _parse_date(reference, "reference") if reference else None
    events = api_state.schedule.get_schedule(owner, day=target, reference=anchor)
    listed = [serialize_event(event) | {"in_progress": api_state.schedule.event_in_progress(event)} for event in events]
    return {"day": target.isoformat() if target else None, "events": listed}


@register_api(
    "user_stats",
    description="Count completed and upcoming events for an owner.",
    category="calendar",
    tags=("read", "stats"),
)
def user_stats(actor_id: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    api_state.access.require_calendar_view(owner, actor_id)
    return serialize_stats(api_state.stats.user_stats(owner))


@register_api(
    "completed_events",
    description="Completed events for an owner, most recently finished first.",
    category="calendar",
    tags=("read", "stats"),
)
def completed_events(actor_id: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    api_state.access.require_calendar_view(owner, actor_id)
    return {"events": serialize_events(api_state.stats.completed_events(owner))}


# Family


@register_api(
    "can_edit",
    description="Whether the caller may edit the owner's calendar.",
    category="family",
    tags=("read", "permissions"),
)
def can_edit(actor_id: str, owner_id: str) -> Dict[str, Any]:
    return {"owner_id": owner_id, "actor_id": actor_id, "can_edit": api_state.access.can_edit(owner_id, actor_id)}


@register_api(
    "family_members",
    description="The other members of the caller's family.",
    category="family",
    tags=("read",),
)
def family_members(actor_id: str) -> Dict[str, Any]:
    group = api_state.family.group(actor_id)
    members = api_state.family.members(actor_id)
    return {
        "family_id": group.id if group else None,
        "members": [serialize_profile(member) for member in members],
    }


@register_api(
    "add_family_member",
    description="Add a user without a family to the caller's family by email.",
    category="family",
    tags=("write",),
    mutates=True,
)
def add_family_member(actor_id: str, email: str) -> Dict[str, Any]:
    return serialize_profile(api_state.family.add_member(actor_id, email))


@register_api(
    "send_family_request",
    description="Invite a user by email to join the caller's family.",
    category="family",
    tags=("write",),
    mutates=True,
)
def send_family_request(actor_id: str, email: str) -> Dict[str, Any]:
    return serialize_notification(api_state.family.send_request(actor_id, email))


@register_api(
    "family_notifications",
    description="Pending family requests addressed to the caller.",
    category="family",
    tags=("read",),
)
def family_notifications(actor_id: str) -> Dict[str, Any]:
    notifications = api_state.family.notifications(actor_id)
    return {"notifications": [serialize_notification(item) for item in notifications]}


@register_api(
    "respond_family_request",
    description="Accept or decline a pending family request.",
    category="family",
    tags=("write",),
    mutates=True,
)
def respond_family_request(actor_id: str, notification_id: str, accept: bool) -> Dict[str, Any]:
    return serialize_notification(api_state.family.respond(actor_id, notification_id, accept))


@register_api(
    "remove_family_member",
    description="Remove another member from the caller's family.",
    category="family",
    tags=("write",),
    mutates=True,
)
def remove_family_member(actor_id: str, member_id: str) -> Dict[str, Any]:
    return serialize_profile(api_state.family.remove_member(actor_id, member_id))


@register_api(
    "leave_family",
    description="Leave the caller's family.",
    category="family",
    tags=("write",),
    mutates=True,
)
def leave_family(actor_id: str) -> Dict[str, Any]:
    return serialize_profile(api_state.family.leave(actor_id))


@register_api(
    "set_allowed_editors",
    description="Replace the list of family members allowed to edit the caller's calendar.",
    category="family",
    tags=("write", "permissions"),
    mutates=True,
)
def set_allowed_editors(actor_id: str, editors: List[str], owner_id: Optional[str] = None) -> Dict[str, Any]:
    owner = _owner(actor_id, owner_id)
    return serialize_profile(api_state.family.update_permissions(actor_id, owner, editors))
