from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..services import (
    AccessControl,
    CalendarAggregator,
    EventService,
    EventTypeRegistry,
    FamilyService,
    ProfileService,
    ScheduleAggregator,
    ServiceContext,
    SharingEngine,
    StatsService,
    StatusMaintainer,
)


@dataclass(slots=True)
class ApiState:
    """Services shared by every registered API function.

    The context is built on first use so importing the API does not touch
    storage. Services are resolved through it on every access, so ``bind``
    only has to swap the context.
    """

    _context: Optional[ServiceContext] = None

    @property
    def context(self) -> ServiceContext:
        if self._context is None:
            self._context = ServiceContext()
        return self._context

    def bind(self, context: ServiceContext) -> None:
        self._context = context

    @property
    def access(self) -> AccessControl:
        return AccessControl(self.context)

    @property
    def calendar(self) -> CalendarAggregator:
        return CalendarAggregator(self.context)

    @property
    def events(self) -> EventService:
        return EventService(self.context)

    @property
    def event_types(self) -> EventTypeRegistry:
        return EventTypeRegistry(self.context)

    @property
    def family(self) -> FamilyService:
        return FamilyService(self.context)

    @property
    def profiles(self) -> ProfileService:
        return ProfileService(self.context)

    @property
    def schedule(self) -> ScheduleAggregator:
        return ScheduleAggregator(self.context)

    @property
    def sharing(self) -> SharingEngine:
        return SharingEngine(self.context)

    @property
    def stats(self) -> StatsService:
        return StatsService(self.context)

    @property
    def status(self) -> StatusMaintainer:
        return StatusMaintainer(self.context)


api_state = ApiState()
