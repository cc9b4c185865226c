"""In-memory indexes built over fetched events."""

from __future__ import annotations

from .day_index import DayIndex

__all__ = ["DayIndex"]
