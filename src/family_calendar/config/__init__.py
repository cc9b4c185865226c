"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    BACKEND_LOCAL,
    BACKEND_SUPABASE,
    AppSettings,
    CalendarSettings,
    ServerSettings,
    StorageSettings,
    SupabaseSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "BACKEND_LOCAL",
    "BACKEND_SUPABASE",
    "CalendarSettings",
    "ServerSettings",
    "StorageSettings",
    "SupabaseSettings",
    "get_settings",
]
