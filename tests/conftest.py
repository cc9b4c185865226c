from datetime import datetime, timezone

import pytest

from family_calendar.config import (
    AppSettings,
    CalendarSettings,
    ServerSettings,
    StorageSettings,
    SupabaseSettings,
)
from family_calendar.core import FixedClock
from family_calendar.services import (
    EventService,
    EventTypeRegistry,
    FamilyService,
    ProfileService,
    ServiceContext,
)

# Sunday 2024-03-10, 11:00 UTC.
NOW = datetime(2024, 3, 10, 11, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings(tmp_path):
    return AppSettings(
        supabase=SupabaseSettings(url=None, anon_key=None),
        storage=StorageSettings(
            backend="local",
            data_file=tmp_path / "store.json",
            profiles_table="profiles",
            event_types_table="event_types",
            events_table="events",
            notifications_table="notifications",
        ),
        calendar=CalendarSettings(timezone="UTC"),
        server=ServerSettings(host="127.0.0.1", port=8000, mcp_port=8765, log_level="INFO"),
    )


@pytest.fixture
def context(settings, tmp_path):
    return ServiceContext(
        settings=settings,
        clock=FixedClock(timezone="UTC", instant=NOW),
        store_path=tmp_path / "store.json",
    )


@pytest.fixture
def users(context):
    """Owner ``ana``, editor ``ben``, family viewer ``cleo`` and outsider ``finn``."""

    profiles = ProfileService(context)
    for user_id in ("ana", "ben", "cleo", "finn"):
        profiles.register(user_id, f"{user_id}@example.com", full_name=user_id.title())
    return ("ana", "ben", "cleo", "finn")


@pytest.fixture
def family(context, users):
    service = FamilyService(context)
    service.add_member("ana", "ben@example.com")
    service.add_member("ana", "cleo@example.com")
    service.update_permissions("ana", "ana", ["ben"])
    return service


@pytest.fixture
def types(context, users):
    registry = EventTypeRegistry(context)
    catalog = registry.list_types("ana")
    return {item.name: item for item in catalog}


@pytest.fixture
def events(context):
    return EventService(context)
