from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..domain import CalendarEvent, EventStatus
from .context import ServiceContext
from .status import StatusMaintainer


@dataclass(frozen=True, slots=True)
class UserStats:
    completed_tasks: int
    upcoming_events: int


@dataclass(slots=True)
class StatsService:
    context: ServiceContext

    def user_stats(self, owner_id: str) -> UserStats:
        StatusMaintainer(self.context).sweep(owner_id)
        clock = self.context.clock
        now = clock.now()
        events = self.context.events.list_for_user(owner_id)
        completed = sum(1 for event in events if event.status is EventStatus.COMPLETED)
        upcoming = sum(
            1
            for event in events
            if clock.localize(event.starts_at) > now and event.status is not EventStatus.CANCELLED
        )
        return UserStats(completed_tasks=completed, upcoming_events=upcoming)

    def completed_events(self, owner_id: str) -> List[CalendarEvent]:
        """Completed events, most recently finished first."""

        StatusMaintainer(self.context).sweep(owner_id)
        clock = self.context.clock
        events = self.context.events.list_by_status(owner_id, (EventStatus.COMPLETED,))
        return sorted(events, key=lambda event: clock.localize(event.effective_end), reverse=True)
