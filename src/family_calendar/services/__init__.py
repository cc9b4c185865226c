"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .access import AccessControl
from .calendar_grid import CalendarAggregator, CalendarCell, MonthGrid
from .context import ServiceContext
from .event_types import DEFAULT_EVENT_TYPES, EventTypeRegistry
from .events import EventService
from .family import FamilyService
from .profiles import ProfileService
from .schedule import ScheduleAggregator
from .sharing import SharingEngine
from .stats import StatsService, UserStats
from .status import StatusMaintainer, SweepReport

__all__ = [
    "AccessControl",
    "CalendarAggregator",
    "CalendarCell",
    "DEFAULT_EVENT_TYPES",
    "EventService",
    "EventTypeRegistry",
    "FamilyService",
    "MonthGrid",
    "ProfileService",
    "ScheduleAggregator",
    "ServiceContext",
    "SharingEngine",
    "StatsService",
    "StatusMaintainer",
    "SweepReport",
    "UserStats",
]
