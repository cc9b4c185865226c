from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ...domain import FAMILY_SHARE, CalendarEvent, EventStatus
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class EventRepository:
    gateway: SupabaseGateway
    table_name: str
    event_types_table: str

    def _select_clause(self) -> str:
        return f"*, event_type:{self.event_types_table}(*)" if self.event_types_table else "*"

    def _hydrate(self, records: Iterable[Dict[str, Any]]) -> List[CalendarEvent]:
        events: list[CalendarEvent] = []
        for record in records:
            type_payload = record.pop("event_type", None)
            events.append(CalendarEvent.from_record(record, event_type=type_payload))
        return events

    def _base_query(self):
        return self.gateway.table(self.table_name).select(self._select_clause())

    def fetch(self, event_id: str) -> Optional[CalendarEvent]:
        records = self.gateway.rows(self._base_query().eq("id", event_id).limit(1))
        hydrated = self._hydrate(records)
        return hydrated[0] if hydrated else None

    def list_for_user(self, user_id: str) -> List[CalendarEvent]:
        records = self.gateway.rows(
            self._base_query().eq("user_id", user_id).order("starts_at", desc=False)
        )
        return self._hydrate(records)

    def list_between(self, user_id: str, start: datetime, end: datetime) -> List[CalendarEvent]:
        records = self.gateway.rows(
            self._base_query()
            .eq("user_id", user_id)
            .gte("starts_at", start.isoformat())
            .lt("starts_at", end.isoformat())
            .order("starts_at", desc=False)
        )
        return self._hydrate(records)

    def list_by_status(self, user_id: str, statuses: Iterable[EventStatus]) -> List[CalendarEvent]:
        records = self.gateway.rows(
            self._base_query()
            .eq("user_id", user_id)
            .in_("status", EventStatus.spellings(statuses))
            .order("starts_at", desc=False)
        )
        return self._hydrate(records)

    def list_agenda(self, user_id: str, since: datetime) -> List[CalendarEvent]:
        overdue = ",".join(EventStatus.spellings([EventStatus.OVERDUE]))
        records = self.gateway.rows(
            self._base_query()
            .eq("user_id", user_id)
            .or_(f"starts_at.gte.{since.isoformat()},status.in.({overdue})")
            .order("starts_at", desc=False)
        )
        return self._hydrate(records)

    def list_shared_with(self, viewer_id: str, owner_ids: Iterable[str]) -> List[CalendarEvent]:
        """Events of ``owner_ids`` listing the viewer or the family sentinel."""

        owners = [owner for owner in owner_ids if owner != viewer_id]
        if not owners:
            return []
        records = self.gateway.rows(
            self._base_query()
            .in_("user_id", owners)
            .ov("shared_with", [viewer_id, FAMILY_SHARE])
            .order("starts_at", desc=False)
        )
        return self._hydrate(records)

    def insert(self, event: CalendarEvent) -> CalendarEvent:
        self.gateway.rows(self.gateway.table(self.table_name).insert(event.to_record()))
        return self.fetch(event.id) or event

    def update(self, event_id: str, patch: Dict[str, Any]) -> Optional[CalendarEvent]:
        updated = self.gateway.rows(
            self.gateway.table(self.table_name).update(patch).eq("id", event_id)
        )
        if not updated:
            return None
        return self.fetch(event_id)

    def update_status(self, event_id: str, status: EventStatus) -> bool:
        updated = self.gateway.rows(
            self.gateway.table(self.table_name)
            .update({"status": status.value})
            .eq("id", event_id)
        )
        return bool(updated)

    def detach_type(self, type_id: str) -> int:
        updated = self.gateway.rows(
            self.gateway.table(self.table_name)
            .update({"event_type_id": None})
            .eq("event_type_id", type_id)
        )
        return len(updated)

    def delete(self, event_id: str) -> bool:
        deleted = self.gateway.rows(self.gateway.table(self.table_name).delete().eq("id", event_id))
        return bool(deleted)
