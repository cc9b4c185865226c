from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..domain import FAMILY_SHARE, CalendarEvent, UserProfile
from ..errors import CalendarError, Forbidden, NotFound
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AccessControl:
    """Answers who may edit or view whose calendar.

    Lookups fail closed: a profile that cannot be loaded grants nothing.
    """

    context: ServiceContext

    def _profile(self, user_id: str) -> Optional[UserProfile]:
        try:
            return self.context.profiles.fetch(user_id)
        except (CalendarError, ValueError) as exc:
            logger.warning("Profile lookup for %s failed during permission check: %s", user_id, exc)
            return None

    def can_edit(self, owner_id: str, actor_id: str) -> bool:
        if actor_id == owner_id:
            return True
        owner = self._profile(owner_id)
        if owner is None:
            return False
        return actor_id in owner.allowed_editors

    def require_edit(self, owner_id: str, actor_id: str) -> None:
        if not self.can_edit(owner_id, actor_id):
            logger.info("Edit of %s's calendar denied to %s", owner_id, actor_id)
            raise Forbidden()

    def same_family(self, owner_id: str, actor_id: str) -> bool:
        owner = self._profile(owner_id)
        actor = self._profile(actor_id)
        if owner is None or actor is None or not owner.family_id:
            return False
        return owner.family_id == actor.family_id

    def can_view_calendar(self, owner_id: str, actor_id: str) -> bool:
        return self.can_edit(owner_id, actor_id) or self.same_family(owner_id, actor_id)

    def require_calendar_view(self, owner_id: str, actor_id: str) -> None:
        if not self.can_view_calendar(owner_id, actor_id):
            raise Forbidden()

    def can_view(self, event: CalendarEvent, actor_id: str) -> bool:
        if self.can_edit(event.user_id, actor_id):
            return True
        if actor_id in event.shared_with:
            return True
        if FAMILY_SHARE in event.shared_with:
            return self.same_family(event.user_id, actor_id)
        return False

    def set_allowed_editors(self, owner_id: str, editors: Iterable[str]) -> UserProfile:
        """Replace the owner's editor list.

        Callers must have checked that the acting user is ``owner_id``.
        """

        cleaned = list(dict.fromkeys(str(editor) for editor in editors if editor and editor != owner_id))
        updated = self.context.profiles.update(owner_id, {"allowed_editors": cleaned})
        if updated is None:
            raise NotFound(f"Profile {owner_id} not found.")
        logger.info("Allowed editors for %s set to %s", owner_id, cleaned)
        return updated
