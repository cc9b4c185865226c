from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from ..config.settings import SupabaseSettings
from ..errors import Conflict, Transient

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"


class SupabaseNotInitializedError(Transient):
    """Raised when accessing the Supabase client before it can be created."""


@dataclass
class SupabaseGateway:
    """Thin wrapper around the Supabase Python client that types backend failures."""

    settings: SupabaseSettings
    _client: Optional[Client] = None

    def ensure_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            missing = ", ".join(self.settings.missing_env_vars)
            raise SupabaseNotInitializedError(f"Supabase settings are incomplete: {missing}")
        self._client = create_client(self.settings.url, self.settings.anon_key)
        return self._client

    def table(self, name: str):
        return self.ensure_client().table(name)

    def execute(self, query: Any) -> Any:
        """Run a postgrest query, translating failures into calendar errors.

        Returns ``None`` when a single-row query matched nothing.
        """

        try:
            return query.execute()
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise Conflict(exc.message or "Duplicate value.") from exc
            if exc.code == NO_ROWS:
                return None
            logger.warning("Supabase request failed: %s (%s)", exc.message, exc.code)
            raise Transient("The calendar backend rejected the request.") from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase transport error: %s", exc)
            raise Transient("The calendar backend is unavailable.") from exc

    def rows(self, query: Any) -> list[dict]:
        response = self.execute(query)
        if response is None:
            return []
        return list(response.data or [])

    def first(self, query: Any) -> Optional[dict]:
        records = self.rows(query)
        return records[0] if records else None
