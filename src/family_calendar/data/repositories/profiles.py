from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...domain import UserProfile
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class ProfileRepository:
    gateway: SupabaseGateway
    table_name: str

    def fetch(self, user_id: str) -> Optional[UserProfile]:
        record = self.gateway.first(
            self.gateway.table(self.table_name).select("*").eq("id", user_id).limit(1)
        )
        return UserProfile.from_record(record) if record else None

    def fetch_by_email(self, email: str) -> Optional[UserProfile]:
        record = self.gateway.first(
            self.gateway.table(self.table_name).select("*").ilike("email", email).limit(1)
        )
        return UserProfile.from_record(record) if record else None

    def list_family(self, family_id: str) -> list[UserProfile]:
        records = self.gateway.rows(
            self.gateway.table(self.table_name)
            .select("*")
            .eq("family_id", family_id)
            .order("full_name")
        )
        return [UserProfile.from_record(record) for record in records]

    def upsert(self, profile: UserProfile) -> UserProfile:
        record = self.gateway.first(
            self.gateway.table(self.table_name).upsert(profile.to_record(), on_conflict="id")
        )
        return UserProfile.from_record(record or profile.to_record())

    def update(self, user_id: str, patch: Dict[str, Any]) -> Optional[UserProfile]:
        record = self.gateway.first(
            self.gateway.table(self.table_name).update(patch).eq("id", user_id)
        )
        return UserProfile.from_record(record) if record else None
