from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class SystemClock:
    """Wall clock bound to the calendar's timezone.

    Every "today" and "now" decision in the services goes through a clock so
    that status sweeps and agenda tiers can be pinned in tests.
    """

    timezone: str = "UTC"

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    def now(self) -> datetime:
        return datetime.now(self.tzinfo)

    def today(self) -> date:
        return self.now().date()

    def localize(self, value: datetime) -> datetime:
        """Return ``value`` in the calendar timezone; naive values are taken as local."""

        if value.tzinfo is None:
            return value.replace(tzinfo=self.tzinfo)
        return value.astimezone(self.tzinfo)

    def local_date(self, value: datetime) -> date:
        return self.localize(value).date()


@dataclass(frozen=True)
class FixedClock(SystemClock):
    instant: datetime = datetime(2024, 1, 1, 12, 0)

    def now(self) -> datetime:
        return self.localize(self.instant)


__all__ = ["FixedClock", "SystemClock"]
