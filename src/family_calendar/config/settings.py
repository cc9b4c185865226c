from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

BACKEND_LOCAL = "local"
BACKEND_SUPABASE = "supabase"


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    data_file: Optional[Path]
    profiles_table: str
    event_types_table: str
    events_table: str
    notifications_table: str


@dataclass(frozen=True)
class CalendarSettings:
    timezone: str


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    mcp_port: int
    log_level: str


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    calendar: CalendarSettings
    server: ServerSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    data_file = os.getenv("FAMCAL_DATA_FILE")
    storage = StorageSettings(
        backend=os.getenv("FAMCAL_BACKEND", BACKEND_LOCAL).lower(),
        data_file=Path(data_file) if data_file else None,
        profiles_table=os.getenv("SUPABASE_PROFILES_TABLE", "profiles"),
        event_types_table=os.getenv("SUPABASE_EVENT_TYPES_TABLE", "event_types"),
        events_table=os.getenv("SUPABASE_EVENTS_TABLE", "events"),
        notifications_table=os.getenv("SUPABASE_NOTIFICATIONS_TABLE", "notifications"),
    )

    calendar = CalendarSettings(timezone=os.getenv("FAMCAL_TIMEZONE", "UTC"))

    server = ServerSettings(
        host=os.getenv("FAMCAL_HOST", "127.0.0.1"),
        port=_int_from_env("FAMCAL_PORT", 8000),
        mcp_port=_int_from_env("FAMCAL_MCP_PORT", 8765),
        log_level=os.getenv("FAMCAL_LOG_LEVEL", "INFO"),
    )

    return AppSettings(supabase=supabase, storage=storage, calendar=calendar, server=server)
