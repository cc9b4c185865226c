from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..domain import UserProfile, UserStatus
from ..errors import Conflict, NotFound, ValidationError
from .context import ServiceContext

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"full_name", "username", "avatar_url", "status"})


@dataclass(slots=True)
class ProfileService:
    """Public profile rows for users the auth provider has already signed up."""

    context: ServiceContext

    def register(
        self,
        user_id: str,
        email: str,
        *,
        full_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> UserProfile:
        email = (email or "").strip()
        if not email or "@" not in email:
            raise ValidationError("Invalid email.", fields={"email": "A valid email is required."})
        existing = self.context.profiles.fetch_by_email(email)
        if existing is not None and existing.id != user_id:
            raise Conflict("That email is already registered.")
        current = existing if existing is not None else self.context.profiles.fetch(user_id)
        if current is not None:
            return self._refresh(current, email, full_name=full_name, avatar_url=avatar_url)
        now = self.context.clock.now()
        profile = UserProfile(
            id=user_id,
            email=email,
            full_name=full_name,
            username=email.split("@")[0],
            avatar_url=avatar_url or "account_circle",
            status=UserStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            last_seen_at=now,
        )
        saved = self.context.profiles.upsert(profile)
        logger.info("Registered profile %s", saved.id)
        return saved

    def _refresh(
        self,
        current: UserProfile,
        email: str,
        *,
        full_name: Optional[str],
        avatar_url: Optional[str],
    ) -> UserProfile:
        # Membership, editors and creation time belong to the existing row.
        now = self.context.clock.now().isoformat()
        changes: Dict[str, Any] = {"email": email, "updated_at": now, "last_seen_at": now}
        if full_name is not None:
            changes["full_name"] = full_name
        if avatar_url is not None:
            changes["avatar_url"] = avatar_url
        refreshed = self.context.profiles.update(current.id, changes)
        if refreshed is None:
            raise NotFound(f"Profile {current.id} not found.")
        logger.info("Refreshed profile %s", refreshed.id)
        return refreshed

    def get(self, user_id: str) -> UserProfile:
        profile = self.context.profiles.fetch(user_id)
        if profile is None:
            raise NotFound(f"Profile {user_id} not found.")
        return profile

    def update(self, user_id: str, patch: Dict[str, Any]) -> UserProfile:
        unknown = sorted(set(patch) - EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(
                "Unknown profile fields.",
                fields={name: "This field cannot be edited here." for name in unknown},
            )
        changes = dict(patch)
        if "status" in changes:
            try:
                changes["status"] = UserStatus(changes["status"]).value
            except ValueError as exc:
                raise ValidationError("Invalid status.", fields={"status": "Use active or inactive."}) from exc
        changes["updated_at"] = self.context.clock.now().isoformat()
        updated = self.context.profiles.update(user_id, changes)
        if updated is None:
            raise NotFound(f"Profile {user_id} not found.")
        return updated
