"""Core configuration, clock and local persistence utilities."""

from .clock import FixedClock, SystemClock
from .config import APP_NAME, DATA_DIR, LOG_FILE, STORE_FILE, ensure_data_dir
from .store import DEFAULT_STORE_STATE, LocalStore

__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "DEFAULT_STORE_STATE",
    "FixedClock",
    "LOG_FILE",
    "LocalStore",
    "STORE_FILE",
    "SystemClock",
    "ensure_data_dir",
]
