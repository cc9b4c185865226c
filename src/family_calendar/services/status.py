from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ..core.clock import SystemClock
from ..domain import CalendarEvent, EventStatus
from ..errors import CalendarError
from .context import ServiceContext

logger = logging.getLogger(__name__)

AUTO_COMPLETE_TYPE_NAMES = frozenset({"recordatorio", "cumpleaños", "reminder", "birthday"})
SWEEPABLE_STATUSES = (EventStatus.SCHEDULED, EventStatus.OVERDUE)


def is_auto_completable(event: CalendarEvent) -> bool:
    """Reminders, birthdays and events without a live type complete on their own."""

    if event.event_type_id is None or event.event_type is None:
        return True
    return event.event_type.name.casefold() in AUTO_COMPLETE_TYPE_NAMES


def next_status(event: CalendarEvent, now: datetime, clock: SystemClock) -> Optional[EventStatus]:
    """Return the status ``event`` should move to at ``now``, or ``None`` to leave it."""

    if event.status not in SWEEPABLE_STATUSES:
        return None
    if clock.localize(event.effective_end) >= now:
        return None
    if is_auto_completable(event):
        return EventStatus.COMPLETED
    if event.status is EventStatus.SCHEDULED:
        return EventStatus.OVERDUE
    return None


def is_in_progress(event: CalendarEvent, now: datetime, clock: SystemClock) -> bool:
    if event.status is not EventStatus.SCHEDULED or event.ends_at is None:
        return False
    return clock.localize(event.starts_at) <= now < clock.localize(event.ends_at)


@dataclass(slots=True)
class SweepReport:
    completed: List[str] = field(default_factory=list)
    overdue: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    listing_failed: bool = False

    @property
    def changed(self) -> int:
        return len(self.completed) + len(self.overdue)


@dataclass(slots=True)
class StatusMaintainer:
    """Moves stale events to ``completed`` or ``overdue`` ahead of reads.

    The sweep is best effort: backend failures are logged and the affected
    events simply keep their previous status until the next read.
    """

    context: ServiceContext

    def sweep(self, owner_id: str) -> SweepReport:
        try:
            events = self.context.events.list_by_status(owner_id, SWEEPABLE_STATUSES)
        except (CalendarError, ValueError) as exc:
            logger.warning("Status sweep for %s skipped: %s", owner_id, exc)
            return SweepReport(listing_failed=True)
        report = self.sweep_events(events)
        if report.changed or report.failed:
            logger.info(
                "Status sweep for %s: %d completed, %d overdue, %d failed",
                owner_id,
                len(report.completed),
                len(report.overdue),
                len(report.failed),
            )
        return report

    def sweep_events(self, events: Iterable[CalendarEvent]) -> SweepReport:
        """Apply transitions to already-fetched events, updating them in place."""

        clock = self.context.clock
        now = clock.now()
        report = SweepReport()
        for event in events:
            target = next_status(event, now, clock)
            if target is None:
                continue
            try:
                self.context.events.update_status(event.id, target)
            except (CalendarError, ValueError) as exc:
                logger.warning("Could not move event %s to %s: %s", event.id, target.value, exc)
                report.failed.append(event.id)
                continue
            event.status = target
            if target is EventStatus.COMPLETED:
                report.completed.append(event.id)
            else:
                report.overdue.append(event.id)
        return report
