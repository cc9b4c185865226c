from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...domain import EventType
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class EventTypeRepository:
    """Supabase ``event_types`` table. A unique index on (user_id, lower(name)) backs name conflicts."""

    gateway: SupabaseGateway
    table_name: str

    def list_for_user(self, user_id: str) -> list[EventType]:
        records = self.gateway.rows(
            self.gateway.table(self.table_name)
            .select("*")
            .eq("user_id", user_id)
            .order("name")
        )
        return [EventType.from_record(record) for record in records]

    def fetch(self, type_id: str) -> Optional[EventType]:
        record = self.gateway.first(
            self.gateway.table(self.table_name).select("*").eq("id", type_id).limit(1)
        )
        return EventType.from_record(record) if record else None

    def find_by_name(self, user_id: str, name: str) -> Optional[EventType]:
        record = self.gateway.first(
            self.gateway.table(self.table_name)
            .select("*")
            .eq("user_id", user_id)
            .ilike("name", name)
            .limit(1)
        )
        return EventType.from_record(record) if record else None

    def insert(self, event_type: EventType) -> EventType:
        record = self.gateway.first(self.gateway.table(self.table_name).insert(event_type.to_record()))
        return EventType.from_record(record or event_type.to_record())

    def update(self, type_id: str, patch: Dict[str, Any]) -> Optional[EventType]:
        record = self.gateway.first(
            self.gateway.table(self.table_name).update(patch).eq("id", type_id)
        )
        return EventType.from_record(record) if record else None

    def delete(self, type_id: str) -> bool:
        deleted = self.gateway.rows(self.gateway.table(self.table_name).delete().eq("id", type_id))
        return bool(deleted)
