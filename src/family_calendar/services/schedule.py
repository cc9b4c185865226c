from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from ..domain import CalendarEvent
from .context import ServiceContext
from .status import StatusMaintainer, is_in_progress

TIER_TODAY = 0
TIER_FUTURE = 1
TIER_PAST = 2


@dataclass(slots=True)
class ScheduleAggregator:
    """Day and agenda views over an owner's events.

    The agenda puts what needs attention first: today, then upcoming, then
    stale or overdue items. Overdue events are always included, whatever
    month is on display.
    """

    context: ServiceContext

    def _local_midnight(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.context.clock.tzinfo)

    def tier(self, event: CalendarEvent, today: date) -> int:
        starts_on = self.context.clock.local_date(event.starts_at)
        if starts_on == today:
            return TIER_TODAY
        if starts_on > today:
            return TIER_FUTURE
        return TIER_PAST

    def event_in_progress(self, event: CalendarEvent, now: Optional[datetime] = None) -> bool:
        clock = self.context.clock
        return is_in_progress(event, now or clock.now(), clock)

    def get_schedule(
        self,
        owner_id: str,
        day: Optional[date] = None,
        reference: Optional[date] = None,
    ) -> List[CalendarEvent]:
        StatusMaintainer(self.context).sweep(owner_id)
        clock = self.context.clock

        if day is not None:
            events = self.context.events.list_between(
                owner_id,
                self._local_midnight(day),
                self._local_midnight(day + timedelta(days=1)),
            )
            selected = [event for event in events if clock.local_date(event.starts_at) == day]
            return sorted(selected, key=lambda event: clock.localize(event.starts_at))

        today = clock.today()
        month_start = (reference or today).replace(day=1)
        since = self._local_midnight(max(month_start, today))
        events = self.context.events.list_agenda(owner_id, since)
        return sorted(
            events,
            key=lambda event: (self.tier(event, today), clock.localize(event.starts_at)),
        )
