from __future__ import annotations

import threading
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import orjson

from .config import STORE_FILE, ensure_data_dir


DEFAULT_STORE_STATE: Dict[str, Any] = {
    "profiles": [],
    "event_types": [],
    "events": [],
    "notifications": [],
    "metadata": {"schema_version": 1},
}


class LocalStore:
    """Single-file JSON persistence for running without Supabase."""

    def __init__(self, path: Optional[Path] = None) -> None:
        if path is None:
            ensure_data_dir()
        self._path = path or STORE_FILE
        self._state: Optional[Dict[str, Any]] = None
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_materialized(self) -> None:
        if self._state is not None:
            return
        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = orjson.dumps(DEFAULT_STORE_STATE, option=orjson.OPT_INDENT_2)
            self._path.write_bytes(payload + b"\n")
            self._state = deepcopy(DEFAULT_STORE_STATE)
            return
        raw = self._path.read_bytes()
        if not raw:
            self._state = deepcopy(DEFAULT_STORE_STATE)
            return
        self._state = orjson.loads(raw)
        # Backfill missing keys when upgrading.
        for key, value in DEFAULT_STORE_STATE.items():
            if key not in self._state:
                self._state[key] = deepcopy(value)

    @property
    def data(self) -> Dict[str, Any]:
        with self._lock:
            self._ensure_materialized()
            assert self._state is not None
            return self._state

    def persist(self) -> None:
        if self._state is None:
            return
        payload = orjson.dumps(self._state, option=orjson.OPT_INDENT_2)
        self._path.write_bytes(payload + b"\n")

    def read(self, callback: Callable[[Dict[str, Any]], Any]) -> Any:
        with self._lock:
            self._ensure_materialized()
            assert self._state is not None
            return deepcopy(callback(self._state))

    def mutate(self, callback: Callable[[Dict[str, Any]], Any]) -> Any:
        with self._lock:
            self._ensure_materialized()
            assert self._state is not None
            result = callback(self._state)
            self.persist()
            return deepcopy(result)


__all__ = ["DEFAULT_STORE_STATE", "LocalStore"]
