from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..core.clock import SystemClock
from ..core.store import LocalStore
from ..domain import (
    FAMILY_SHARE,
    CalendarEvent,
    EventStatus,
    EventType,
    Notification,
    NotificationStatus,
    UserProfile,
)
from ..errors import Conflict


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _find_index(rows: List[Dict[str, Any]], key: str, value: Any) -> Optional[int]:
    for index, row in enumerate(rows):
        if row.get(key) == value:
            return index
    return None


@dataclass(slots=True)
class LocalProfileRepository:
    store: LocalStore

    def fetch(self, user_id: str) -> Optional[UserProfile]:
        record = self.store.read(
            lambda state: next((row for row in state["profiles"] if row["id"] == user_id), None)
        )
        return UserProfile.from_record(record) if record else None

    def fetch_by_email(self, email: str) -> Optional[UserProfile]:
        needle = email.strip().lower()
        record = self.store.read(
            lambda state: next(
                (row for row in state["profiles"] if (row.get("email") or "").lower() == needle),
                None,
            )
        )
        return UserProfile.from_record(record) if record else None

    def list_family(self, family_id: str) -> list[UserProfile]:
        records = self.store.read(
            lambda state: [row for row in state["profiles"] if row.get("family_id") == family_id]
        )
        profiles = [UserProfile.from_record(record) for record in records]
        return sorted(profiles, key=lambda profile: profile.display_name.lower())

    def upsert(self, profile: UserProfile) -> UserProfile:
        record = profile.to_record()

        def _upsert(state: Dict[str, Any]) -> Dict[str, Any]:
            rows = state["profiles"]
            index = _find_index(rows, "id", profile.id)
            if index is None:
                rows.append(record)
            else:
                rows[index] = record
            return record

        return UserProfile.from_record(self.store.mutate(_upsert))

    def update(self, user_id: str, patch: Dict[str, Any]) -> Optional[UserProfile]:
        def _update(state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
            rows = state["profiles"]
            index = _find_index(rows, "id", user_id)
            if index is None:
                return None
            rows[index] = {**rows[index], **patch}
            return rows[index]

        record = self.store.mutate(_update)
        return UserProfile.from_record(record) if record else None


@dataclass(slots=True)
class LocalEventTypeRepository:
    store: LocalStore

    @staticmethod
    def _name_taken(rows: List[Dict[str, Any]], user_id: str, name: str, *, exclude: Optional[str] = None) -> bool:
        folded = name.casefold()
        return any(
            row["user_id"] == user_id and row["name"].casefold() == folded and row["id"] != exclude
            for row in rows
        )

    def list_for_user(self, user_id: str) -> list[EventType]:
        records = self.store.read(
            lambda state: [row for row in state["event_types"] if row["user_id"] == user_id]
        )
        types = [EventType.from_record(record) for record in records]
        return sorted(types, key=lambda item: item.name)

    def fetch(self, type_id: str) -> Optional[EventType]:
        record = self.store.read(
            lambda state: next((row for row in state["event_types"] if row["id"] == type_id), None)
        )
        return EventType.from_record(record) if record else None

    def find_by_name(self, user_id: str, name: str) -> Optional[EventType]:
        folded = name.casefold()
        record = self.store.read(
            lambda state: next(
                (
                    row
                    for row in state["event_types"]
                    if row["user_id"] == user_id and row["name"].casefold() == folded
                ),
                None,
            )
        )
        return EventType.from_record(record) if record else None

    def insert(self, event_type: EventType) -> EventType:
        record = event_type.to_record()

        def _insert(state: Dict[str, Any]) -> Dict[str, Any]:
            rows = state["event_types"]
            if self._name_taken(rows, event_type.user_id, event_type.name):
                raise Conflict(f"An event type named '{event_type.name}' already exists.")
            rows.append(record)
            return record

        return EventType.from_record(self.store.mutate(_insert))

    def update(self, type_id: str, patch: Dict[str, Any]) -> Optional[EventType]:
        def _update(state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
            rows = state["event_types"]
            index = _find_index(rows, "id", type_id)
            if index is None:
                return None
            merged = {**rows[index], **patch}
            if "name" in patch and self._name_taken(rows, merged["user_id"], merged["name"], exclude=type_id):
                raise Conflict(f"An event type named '{merged['name']}' already exists.")
            rows[index] = merged
            return merged

        record = self.store.mutate(_update)
        return EventType.from_record(record) if record else None

    def delete(self, type_id: str) -> bool:
        def _delete(state: Dict[str, Any]) -> bool:
            rows = state["event_types"]
            index = _find_index(rows, "id", type_id)
            if index is None:
                return False
            del rows[index]
            return True

        return self.store.mutate(_delete)


@dataclass(slots=True)
class LocalEventRepository:
    """Event rows joined client-side with their event type, ordered by start."""

    store: LocalStore
    clock: SystemClock = field(default_factory=SystemClock)

    def _instant(self, value: Any) -> datetime:
        """Stored start as an aware datetime; naive values are calendar-local."""

        return self.clock.localize(_parse_timestamp(value))

    def _select(self, predicate) -> List[CalendarEvent]:
        def _query(state: Dict[str, Any]) -> List[tuple[Dict[str, Any], Optional[Dict[str, Any]]]]:
            types = {row["id"]: row for row in state["event_types"]}
            return [
                (row, types.get(row.get("event_type_id")))
                for row in state["events"]
                if predicate(row)
            ]

        pairs = self.store.read(_query)
        events = [CalendarEvent.from_record(row, event_type=type_row) for row, type_row in pairs]
        return sorted(events, key=lambda event: self._instant(event.starts_at))

    def fetch(self, event_id: str) -> Optional[CalendarEvent]:
        matches = self._select(lambda row: row["id"] == event_id)
        return matches[0] if matches else None

    def list_for_user(self, user_id: str) -> List[CalendarEvent]:
        return self._select(lambda row: row["user_id"] == user_id)

    def list_between(self, user_id: str, start: datetime, end: datetime) -> List[CalendarEvent]:
        return self._select(
            lambda row: row["user_id"] == user_id and start <= self._instant(row["starts_at"]) < end
        )

    def list_by_status(self, user_id: str, statuses: Iterable[EventStatus]) -> List[CalendarEvent]:
        wanted = {status.value for status in statuses}
        return self._select(
            lambda row: row["user_id"] == user_id and EventStatus(row.get("status") or "scheduled").value in wanted
        )

    def list_agenda(self, user_id: str, since: datetime) -> List[CalendarEvent]:
        return self._select(
            lambda row: row["user_id"] == user_id
            and (
                self._instant(row["starts_at"]) >= since
                or EventStatus(row.get("status") or "scheduled") is EventStatus.OVERDUE
            )
        )

    def list_shared_with(self, viewer_id: str, owner_ids: Iterable[str]) -> List[CalendarEvent]:
        owners = {owner for owner in owner_ids if owner != viewer_id}
        targets = {viewer_id, FAMILY_SHARE}
        return self._select(
            lambda row: row["user_id"] in owners and bool(targets.intersection(row.get("shared_with") or []))
        )

    def insert(self, event: CalendarEvent) -> CalendarEvent:
        record = event.to_record()

        def _insert(state: Dict[str, Any]) -> None:
            if _find_index(state["events"], "id", event.id) is not None:
                raise Conflict(f"Event {event.id} already exists.")
            state["events"].append(record)

        self.store.mutate(_insert)
        return self.fetch(event.id) or event

    def update(self, event_id: str, patch: Dict[str, Any]) -> Optional[CalendarEvent]:
        def _update(state: Dict[str, Any]) -> bool:
            rows = state["events"]
            index = _find_index(rows, "id", event_id)
            if index is None:
                return False
            rows[index] = {**rows[index], **patch}
            return True

        if not self.store.mutate(_update):
            return None
        return self.fetch(event_id)

    def update_status(self, event_id: str, status: EventStatus) -> bool:
        return self.update(event_id, {"status": status.value}) is not None

    def detach_type(self, type_id: str) -> int:
        def _detach(state: Dict[str, Any]) -> int:
            count = 0
            for row in state["events"]:
                if row.get("event_type_id") == type_id:
                    row["event_type_id"] = None
                    count += 1
            return count

        return self.store.mutate(_detach)

    def delete(self, event_id: str) -> bool:
        def _delete(state: Dict[str, Any]) -> bool:
            rows = state["events"]
            index = _find_index(rows, "id", event_id)
            if index is None:
                return False
            del rows[index]
            return True

        return self.store.mutate(_delete)


@dataclass(slots=True)
class LocalNotificationRepository:
    store: LocalStore

    def insert(self, notification: Notification) -> Notification:
        record = notification.to_record()

        def _insert(state: Dict[str, Any]) -> Dict[str, Any]:
            state["notifications"].append(record)
            return record

        return Notification.from_record(self.store.mutate(_insert))

    def fetch(self, notification_id: str) -> Optional[Notification]:
        record = self.store.read(
            lambda state: next((row for row in state["notifications"] if row["id"] == notification_id), None)
        )
        return Notification.from_record(record) if record else None

    def list_for_recipient(self, user_id: str, status: NotificationStatus) -> list[Notification]:
        records = self.store.read(
            lambda state: [
                row
                for row in state["notifications"]
                if row["to_user_id"] == user_id and row.get("status") == status.value
            ]
        )
        return [Notification.from_record(record) for record in reversed(records)]

    def find_pending(self, from_user_id: str, to_user_id: str) -> Optional[Notification]:
        record = self.store.read(
            lambda state: next(
                (
                    row
                    for row in state["notifications"]
                    if row["from_user_id"] == from_user_id
                    and row["to_user_id"] == to_user_id
                    and row.get("status") == NotificationStatus.PENDING.value
                ),
                None,
            )
        )
        return Notification.from_record(record) if record else None

    def update_status(self, notification_id: str, status: NotificationStatus) -> Optional[Notification]:
        def _update(state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
            rows = state["notifications"]
            index = _find_index(rows, "id", notification_id)
            if index is None:
                return None
            rows[index]["status"] = status.value
            return rows[index]

        record = self.store.mutate(_update)
        return Notification.from_record(record) if record else None


__all__ = [
    "LocalEventRepository",
    "LocalEventTypeRepository",
    "LocalNotificationRepository",
    "LocalProfileRepository",
]
