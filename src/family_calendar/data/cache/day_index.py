from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List

from ...core.clock import SystemClock
from ...domain import CalendarEvent


@dataclass
class DayIndex:
    """Events bucketed by the local calendar day they start on.

    Buckets keep fetch order, so callers that fetch by ascending start get
    per-day lists in the same order.
    """

    clock: SystemClock
    events_by_id: Dict[str, CalendarEvent] = field(default_factory=dict)
    days_index: Dict[date, List[str]] = field(default_factory=dict)

    def hydrate(self, events: Iterable[CalendarEvent]) -> "DayIndex":
        self.clear()
        for event in events:
            self._index_event(event)
        return self

    def _index_event(self, event: CalendarEvent) -> None:
        self.events_by_id[event.id] = event
        day = self.clock.local_date(event.starts_at)
        self.days_index.setdefault(day, []).append(event.id)

    def events_for_day(self, target_day: date) -> List[CalendarEvent]:
        identifiers = self.days_index.get(target_day, [])
        return [self.events_by_id[event_id] for event_id in identifiers]

    def clear(self) -> None:
        self.events_by_id.clear()
        self.days_index.clear()
