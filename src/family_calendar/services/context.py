from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..config import BACKEND_LOCAL, BACKEND_SUPABASE, AppSettings, get_settings
from ..core import LocalStore, SystemClock
from ..data import (
    LocalEventRepository,
    LocalEventTypeRepository,
    LocalNotificationRepository,
    LocalProfileRepository,
    SupabaseGateway,
)
from ..data.repositories import (
    EventRepository,
    EventTypeRepository,
    NotificationRepository,
    ProfileRepository,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, clock, and repositories."""

    settings: AppSettings = field(default_factory=get_settings)
    clock: Optional[SystemClock] = None
    store_path: Optional[Path] = None
    gateway: Optional[SupabaseGateway] = field(init=False, default=None)
    store: Optional[LocalStore] = field(init=False, default=None)
    profiles: Any = field(init=False)
    event_types: Any = field(init=False)
    events: Any = field(init=False)
    notifications: Any = field(init=False)

    def __post_init__(self) -> None:
        if self.clock is None:
            self.clock = SystemClock(self.settings.calendar.timezone)

        backend = self.settings.storage.backend
        if backend == BACKEND_SUPABASE:
            self._wire_supabase()
        elif backend == BACKEND_LOCAL:
            self._wire_local()
        else:
            raise ValueError(f"Unknown storage backend: {backend!r}")
        logger.debug("Service context ready (backend=%s, timezone=%s)", backend, self.clock.timezone)

    def _wire_supabase(self) -> None:
        storage = self.settings.storage
        self.gateway = SupabaseGateway(self.settings.supabase)
        self.profiles = ProfileRepository(gateway=self.gateway, table_name=storage.profiles_table)
        self.event_types = EventTypeRepository(gateway=self.gateway, table_name=storage.event_types_table)
        self.events = EventRepository(
            gateway=self.gateway,
            table_name=storage.events_table,
            event_types_table=storage.event_types_table,
        )
        self.notifications = NotificationRepository(
            gateway=self.gateway,
            table_name=storage.notifications_table,
        )

    def _wire_local(self) -> None:
        self.store = LocalStore(self.store_path or self.settings.storage.data_file)
        self.profiles = LocalProfileRepository(self.store)
        self.event_types = LocalEventTypeRepository(self.store)
        self.events = LocalEventRepository(self.store, self.clock)
        self.notifications = LocalNotificationRepository(self.store)
