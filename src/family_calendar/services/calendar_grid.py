from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

from ..data.cache import DayIndex
from ..domain import CalendarEvent
from ..errors import ValidationError
from .context import ServiceContext

GRID_CELLS = 42
MAX_INDICATORS = 3
FALLBACK_INDICATOR = "bg-gray-400"

# Foreground colour family -> dot token, first match wins.
INDICATOR_TOKENS: Tuple[Tuple[str, str], ...] = (
    ("text-primary", "bg-primary"),
    ("text-sky", "bg-sky-500"),
    ("text-orange", "bg-orange-500"),
    ("text-red", "bg-red-500"),
    ("text-purple", "bg-purple-500"),
    ("text-slate", "bg-slate-500"),
    ("text-indigo", "bg-indigo-500"),
    ("text-pink", "bg-pink-500"),
    ("text-blue", "bg-blue-500"),
    ("text-green", "bg-green-500"),
    ("text-teal", "bg-teal-500"),
)


def indicator_for(event: CalendarEvent) -> str:
    color = event.appearance.color_class
    for prefix, token in INDICATOR_TOKENS:
        if prefix in color:
            return token
    return FALLBACK_INDICATOR


@dataclass(frozen=True, slots=True)
class CalendarCell:
    day: int
    is_current_month: bool = False
    is_prev_month: bool = False
    is_next_month: bool = False
    is_today: bool = False
    indicators: Tuple[str, ...] = ()
    event_count: int = 0

    @property
    def is_ghost(self) -> bool:
        return not self.is_current_month


@dataclass(frozen=True, slots=True)
class MonthGrid:
    year: int
    month: int
    cells: Tuple[CalendarCell, ...]

    @property
    def weeks(self) -> List[Tuple[CalendarCell, ...]]:
        return [self.cells[index : index + 7] for index in range(0, len(self.cells), 7)]


@dataclass(slots=True)
class CalendarAggregator:
    """Six-week month grids with per-day event dots. Weeks start on Sunday."""

    context: ServiceContext

    def _local_midnight(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.context.clock.tzinfo)

    def build_month_grid(self, year: int, month: int, owner_id: str) -> MonthGrid:
        if not 1 <= month <= 12:
            raise ValidationError("Invalid month.", fields={"month": "Month must be between 1 and 12."})
        first = date(year, month, 1)
        days_in_month = calendar.monthrange(year, month)[1]
        next_first = first + timedelta(days=days_in_month)

        events = self.context.events.list_between(
            owner_id,
            self._local_midnight(first),
            self._local_midnight(next_first),
        )
        index = DayIndex(self.context.clock).hydrate(events)
        today = self.context.clock.today()

        cells: List[CalendarCell] = []
        leading = (first.weekday() + 1) % 7
        prev_last = first - timedelta(days=1)
        for offset in range(leading, 0, -1):
            cells.append(CalendarCell(day=prev_last.day - offset + 1, is_prev_month=True))

        for day_number in range(1, days_in_month + 1):
            current = date(year, month, day_number)
            day_events = index.events_for_day(current)
            cells.append(
                CalendarCell(
                    day=day_number,
                    is_current_month=True,
                    is_today=current == today,
                    indicators=tuple(indicator_for(event) for event in day_events[:MAX_INDICATORS]),
                    event_count=len(day_events),
                )
            )

        for day_number in range(1, GRID_CELLS - len(cells) + 1):
            cells.append(CalendarCell(day=day_number, is_next_month=True))

        return MonthGrid(year=year, month=month, cells=tuple(cells))
