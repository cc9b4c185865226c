from __future__ import annotations

from typing import Dict, Optional


class CalendarError(Exception):
    """Base class for every error the calendar core surfaces to callers."""

    status_code: int = 500
    code: str = "calendar_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, object]:
        return {"error": self.code, "message": self.message}


class NotFound(CalendarError):
    """Raised when an identifier cannot be resolved within the caller's scope."""

    status_code = 404
    code = "not_found"


class Forbidden(CalendarError):
    """Raised when the acting user lacks permission for the target calendar."""

    status_code = 403
    code = "forbidden"

    def __init__(self, message: str = "Access denied.") -> None:
        super().__init__(message)


class Conflict(CalendarError):
    """Raised on unique-key collisions and invalid state transitions."""

    status_code = 409
    code = "conflict"


class ValidationError(CalendarError):
    """Raised for malformed input. ``fields`` maps field names to messages."""

    status_code = 422
    code = "validation_error"

    def __init__(self, message: str, *, fields: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.fields: Dict[str, str] = dict(fields or {})

    def to_payload(self) -> Dict[str, object]:
        payload = super().to_payload()
        payload["fields"] = self.fields
        return payload


class Transient(CalendarError):
    """Raised when the persistence backend is unavailable; callers may retry."""

    status_code = 503
    code = "transient"


__all__ = [
    "CalendarError",
    "Conflict",
    "Forbidden",
    "NotFound",
    "Transient",
    "ValidationError",
]
