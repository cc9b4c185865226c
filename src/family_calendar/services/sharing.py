from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from ..domain import FAMILY_SHARE, CalendarEvent
from ..errors import NotFound, ValidationError
from .access import AccessControl
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SharingEngine:
    """Per-event visibility lists.

    Entries are stored as given; nothing checks that a listed member still
    belongs to the owner's family.
    """

    context: ServiceContext

    @property
    def access(self) -> AccessControl:
        return AccessControl(self.context)

    def set_shared_with(self, event_id: str, targets: Iterable[str], owner_id: str, actor_id: str) -> CalendarEvent:
        self.access.require_edit(owner_id, actor_id)
        event = self.context.events.fetch(event_id)
        if event is None or event.user_id != owner_id:
            raise NotFound(f"Event {event_id} not found.")
        cleaned: List[str] = []
        for target in targets:
            if not isinstance(target, str) or not target.strip():
                raise ValidationError("Invalid share target.", fields={"shared_with": "Entries must be user ids or 'family'."})
            if target.strip() not in cleaned:
                cleaned.append(target.strip())
        updated = self.context.events.update(
            event_id,
            {"shared_with": cleaned, "updated_at": self.context.clock.now().isoformat()},
        )
        if updated is None:
            raise NotFound(f"Event {event_id} not found.")
        logger.info("Event %s shared with %s by %s", event_id, cleaned, actor_id)
        return updated

    def shared_with_me(self, viewer_id: str) -> List[CalendarEvent]:
        """Events of fellow family members that list the viewer or the whole family."""

        viewer = self.context.profiles.fetch(viewer_id)
        if viewer is None or not viewer.family_id:
            return []
        members = [profile.id for profile in self.context.profiles.list_family(viewer.family_id)]
        events = self.context.events.list_shared_with(viewer_id, members)
        return [event for event in events if viewer_id in event.shared_with or FAMILY_SHARE in event.shared_with]
