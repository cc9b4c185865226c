"""Family Calendar application package."""

from __future__ import annotations

from .cli import main as main
from .errors import CalendarError, Conflict, Forbidden, NotFound, Transient, ValidationError

__all__ = ["CalendarError", "Conflict", "Forbidden", "NotFound", "Transient", "ValidationError", "main"]
