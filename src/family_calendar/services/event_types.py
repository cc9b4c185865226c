from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import uuid4

from ..domain import EventType
from ..errors import Conflict, Forbidden, NotFound, ValidationError
from .context import ServiceContext

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPES: tuple[Dict[str, Any], ...] = (
    {
        "name": "cita",
        "label": "Cita",
        "icon": "event",
        "color_class": "text-purple-600",
        "icon_bg_class": "bg-purple-100 dark:bg-purple-900/30",
        "requires_end_time": True,
    },
    {
        "name": "cumpleaños",
        "label": "Cumpleaños",
        "icon": "cake",
        "color_class": "text-pink-500",
        "icon_bg_class": "bg-pink-100 dark:bg-pink-900/30",
        "requires_end_time": False,
    },
    {
        "name": "recordatorio",
        "label": "Recordatorio",
        "icon": "notifications",
        "color_class": "text-orange-500",
        "icon_bg_class": "bg-orange-100 dark:bg-orange-900/30",
        "requires_end_time": False,
    },
    {
        "name": "reunión",
        "label": "Reunión",
        "icon": "groups",
        "color_class": "text-indigo-500",
        "icon_bg_class": "bg-indigo-100 dark:bg-indigo-900/30",
        "requires_end_time": True,
    },
)

AVAILABLE_ICONS: tuple[str, ...] = (
    "event",
    "cake",
    "notifications",
    "groups",
    "celebration",
    "work",
    "medical_services",
    "family_restroom",
    "person",
    "flight",
    "assignment",
    "school",
    "pets",
    "fitness_center",
    "more_horiz",
    "restaurant",
    "shopping_cart",
    "directions_car",
    "home",
    "payments",
)

AVAILABLE_COLORS: tuple[Dict[str, str], ...] = (
    {"name": "Púrpura", "color_class": "text-purple-600", "icon_bg_class": "bg-purple-100 dark:bg-purple-900/30"},
    {"name": "Rosa", "color_class": "text-pink-500", "icon_bg_class": "bg-pink-100 dark:bg-pink-900/30"},
    {"name": "Naranja", "color_class": "text-orange-500", "icon_bg_class": "bg-orange-100 dark:bg-orange-900/30"},
    {"name": "Índigo", "color_class": "text-indigo-500", "icon_bg_class": "bg-indigo-100 dark:bg-indigo-900/30"},
    {"name": "Azul", "color_class": "text-blue-500", "icon_bg_class": "bg-blue-100 dark:bg-blue-900/30"},
    {"name": "Verde", "color_class": "text-green-500", "icon_bg_class": "bg-green-100 dark:bg-green-900/30"},
    {"name": "Rojo", "color_class": "text-red-500", "icon_bg_class": "bg-red-100 dark:bg-red-900/30"},
    {"name": "Verde Azulado", "color_class": "text-teal-500", "icon_bg_class": "bg-teal-100 dark:bg-teal-900/30"},
)

EDITABLE_FIELDS = frozenset(
    {
        "name",
        "label",
        "icon",
        "color_class",
        "icon_bg_class",
        "requires_end_time",
        "requires_location",
        "requires_url",
        "default_recurring",
    }
)
_FLAG_FIELDS = ("requires_end_time", "requires_location", "requires_url", "default_recurring")
_TOKEN_FIELDS = ("icon", "color_class", "icon_bg_class")


def _clean_patch(patch: Dict[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(patch) - EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(
            "Unknown event type fields.",
            fields={name: "This field cannot be edited." for name in unknown},
        )
    cleaned: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    for key, value in patch.items():
        if key == "name":
            name = (value or "").strip().lower() if isinstance(value, str) else ""
            if not name:
                errors["name"] = "Name is required."
            cleaned["name"] = name
        elif key in _TOKEN_FIELDS:
            if not isinstance(value, str) or not value.strip():
                errors[key] = "A non-empty token is required."
            else:
                cleaned[key] = value.strip()
        elif key in _FLAG_FIELDS:
            if not isinstance(value, bool):
                errors[key] = "Must be true or false."
            cleaned[key] = value
        else:
            cleaned[key] = (value or "").strip()
    if errors:
        raise ValidationError("Invalid event type.", fields=errors)
    return cleaned


@dataclass(slots=True)
class EventTypeRegistry:
    context: ServiceContext

    def list_types(self, owner_id: str) -> list[EventType]:
        """Return the owner's event types, seeding the defaults when there are none."""

        types = self.context.event_types.list_for_user(owner_id)
        if types:
            return types
        self._seed_defaults(owner_id)
        return self.context.event_types.list_for_user(owner_id)

    def _seed_defaults(self, owner_id: str) -> None:
        for template in DEFAULT_EVENT_TYPES:
            try:
                self.context.event_types.insert(EventType(id=str(uuid4()), user_id=owner_id, **template))
            except Conflict:
                # Another request seeded this one first.
                logger.debug("Default type %s already present for %s", template["name"], owner_id)
        logger.info("Seeded default event types for %s", owner_id)

    def get_type(self, type_id: str, owner_id: str) -> EventType:
        event_type = self.context.event_types.fetch(type_id)
        if event_type is None:
            raise NotFound(f"Event type {type_id} not found.")
        if event_type.user_id != owner_id:
            raise Forbidden()
        return event_type

    def find_for_owner(
        self,
        owner_id: str,
        *,
        type_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Optional[EventType]:
        """Resolve a type by id or name within the owner's catalog; ``None`` when absent."""

        if type_id:
            event_type = self.context.event_types.fetch(type_id)
            if event_type is None or event_type.user_id != owner_id:
                return None
            return event_type
        if name:
            return self.context.event_types.find_by_name(owner_id, name.strip())
        return None

    def create_type(self, owner_id: str, fields: Dict[str, Any]) -> EventType:
        cleaned = _clean_patch(fields)
        if "name" not in cleaned:
            raise ValidationError("Invalid event type.", fields={"name": "Name is required."})
        if self.context.event_types.find_by_name(owner_id, cleaned["name"]):
            raise Conflict(f"An event type named '{cleaned['name']}' already exists.")
        created = self.context.event_types.insert(EventType(id=str(uuid4()), user_id=owner_id, **cleaned))
        logger.info("Created event type %s (%s) for %s", created.id, created.name, owner_id)
        return created

    def update_type(self, type_id: str, patch: Dict[str, Any], owner_id: str) -> EventType:
        self.get_type(type_id, owner_id)
        cleaned = _clean_patch(patch)
        if not cleaned:
            return self.get_type(type_id, owner_id)
        if "name" in cleaned:
            clash = self.context.event_types.find_by_name(owner_id, cleaned["name"])
            if clash is not None and clash.id != type_id:
                raise Conflict(f"An event type named '{cleaned['name']}' already exists.")
        updated = self.context.event_types.update(type_id, cleaned)
        if updated is None:
            raise NotFound(f"Event type {type_id} not found.")
        return updated

    def delete_type(self, type_id: str, owner_id: str) -> bool:
        """Delete a type; its events are detached and fall back to their snapshot."""

        self.get_type(type_id, owner_id)
        detached = self.context.events.detach_type(type_id)
        deleted = self.context.event_types.delete(type_id)
        logger.info("Deleted event type %s for %s (%d events orphaned)", type_id, owner_id, detached)
        return deleted

    @staticmethod
    def palette() -> Dict[str, Any]:
        return {"icons": list(AVAILABLE_ICONS), "colors": [dict(color) for color in AVAILABLE_COLORS]}
