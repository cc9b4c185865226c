from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import uuid4

from ..domain import (
    FamilyGroup,
    Notification,
    NotificationStatus,
    NotificationType,
    UserProfile,
)
from ..errors import Conflict, Forbidden, NotFound, ValidationError
from .access import AccessControl
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FamilyService:
    """Family membership, join requests, and delegated edit permissions.

    A family is the set of profiles sharing a ``family_id``; each user is in
    at most one.
    """

    context: ServiceContext

    def _profile(self, user_id: str) -> UserProfile:
        profile = self.context.profiles.fetch(user_id)
        if profile is None:
            raise NotFound(f"Profile {user_id} not found.")
        return profile

    def _profile_by_email(self, email: str) -> UserProfile:
        cleaned = (email or "").strip()
        if not cleaned:
            raise ValidationError("Email is required.", fields={"email": "Email is required."})
        profile = self.context.profiles.fetch_by_email(cleaned)
        if profile is None:
            raise NotFound("No user is registered with that email.")
        return profile

    def _ensure_family(self, profile: UserProfile) -> str:
        if profile.family_id:
            return profile.family_id
        family_id = str(uuid4())
        self.context.profiles.update(profile.id, {"family_id": family_id})
        logger.info("Created family %s for %s", family_id, profile.id)
        return family_id

    def group(self, user_id: str) -> Optional[FamilyGroup]:
        profile = self._profile(user_id)
        if not profile.family_id:
            return None
        members = self.context.profiles.list_family(profile.family_id)
        return FamilyGroup(id=profile.family_id, member_ids=frozenset(member.id for member in members))

    def members(self, user_id: str) -> List[UserProfile]:
        """Other members of the user's family."""

        profile = self._profile(user_id)
        if not profile.family_id:
            return []
        return [member for member in self.context.profiles.list_family(profile.family_id) if member.id != user_id]

    def add_member(self, actor_id: str, email: str) -> UserProfile:
        actor = self._profile(actor_id)
        target = self._profile_by_email(email)
        if target.id == actor.id:
            raise ValidationError("Cannot add yourself.", fields={"email": "That is your own account."})
        if actor.family_id and target.family_id == actor.family_id:
            raise Conflict("This user is already in your family group.")
        if target.family_id:
            raise Conflict("This user already belongs to another family group.")
        family_id = self._ensure_family(actor)
        updated = self.context.profiles.update(target.id, {"family_id": family_id})
        if updated is None:
            raise NotFound("No user is registered with that email.")
        logger.info("%s added %s to family %s", actor_id, target.id, family_id)
        return updated

    def send_request(self, actor_id: str, email: str) -> Notification:
        """Invite a user who already has a family to join the actor's family."""

        actor = self._profile(actor_id)
        target = self._profile_by_email(email)
        if target.id == actor.id:
            raise ValidationError("Cannot invite yourself.", fields={"email": "That is your own account."})
        if actor.family_id and target.family_id == actor.family_id:
            raise Conflict("This user is already in your family group.")
        if self.context.notifications.find_pending(actor.id, target.id):
            raise Conflict("A request to this user is already pending.")
        family_id = self._ensure_family(actor)
        notification = Notification(
            id=str(uuid4()),
            type=NotificationType.FAMILY_REQUEST,
            from_user_id=actor.id,
            to_user_id=target.id,
            payload={"family_id": family_id, "from_user_name": actor.display_name},
            status=NotificationStatus.PENDING,
            created_at=self.context.clock.now(),
        )
        created = self.context.notifications.insert(notification)
        logger.info("Family request %s sent from %s to %s", created.id, actor.id, target.id)
        return created

    def notifications(self, actor_id: str) -> List[Notification]:
        return self.context.notifications.list_for_recipient(actor_id, NotificationStatus.PENDING)

    def respond(self, actor_id: str, notification_id: str, accept: bool) -> Notification:
        notification = self.context.notifications.fetch(notification_id)
        if notification is None or notification.to_user_id != actor_id:
            raise Forbidden()
        if notification.status is not NotificationStatus.PENDING:
            raise Conflict("This request has already been answered.")
        status = NotificationStatus.ACCEPTED if accept else NotificationStatus.DECLINED
        if accept:
            family_id = notification.family_id
            if not family_id:
                raise ValidationError("Request carries no family.", fields={"payload": "Missing family id."})
            self.context.profiles.update(actor_id, {"family_id": family_id})
            logger.info("%s joined family %s", actor_id, family_id)
        updated = self.context.notifications.update_status(notification_id, status)
        if updated is None:
            raise NotFound(f"Notification {notification_id} not found.")
        return updated

    def remove_member(self, actor_id: str, member_id: str) -> UserProfile:
        actor = self._profile(actor_id)
        member = self.context.profiles.fetch(member_id)
        if member is None or not actor.family_id or member.family_id != actor.family_id:
            raise Forbidden()
        updated = self.context.profiles.update(member_id, {"family_id": None})
        if updated is None:
            raise NotFound(f"Profile {member_id} not found.")
        logger.info("%s removed %s from family %s", actor_id, member_id, actor.family_id)
        return updated

    def leave(self, actor_id: str) -> UserProfile:
        actor = self._profile(actor_id)
        if not actor.family_id:
            raise Conflict("You are not in a family group.")
        updated = self.context.profiles.update(actor_id, {"family_id": None})
        if updated is None:
            raise NotFound(f"Profile {actor_id} not found.")
        logger.info("%s left family %s", actor_id, actor.family_id)
        return updated

    def update_permissions(self, actor_id: str, owner_id: str, editors: Iterable[str]) -> UserProfile:
        if actor_id != owner_id:
            raise Forbidden()
        return AccessControl(self.context).set_allowed_editors(owner_id, editors)
