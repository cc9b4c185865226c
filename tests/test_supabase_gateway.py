from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from family_calendar.config import SupabaseSettings
from family_calendar.data import SupabaseGateway, SupabaseNotInitializedError
from family_calendar.data.repositories import EventRepository
from family_calendar.errors import Conflict, Transient
from family_calendar.services.status import SWEEPABLE_STATUSES


def _failing(exc):
    query = MagicMock()
    query.execute.side_effect = exc
    return query


def _api_error(code):
    return APIError({"message": "backend said no", "code": code, "hint": None, "details": None})


@pytest.fixture
def gateway():
    return SupabaseGateway(SupabaseSettings(url=None, anon_key=None))


class TestExecute:
    def test_unique_violation_is_a_conflict(self, gateway):
        with pytest.raises(Conflict):
            gateway.execute(_failing(_api_error("23505")))

    def test_no_rows_is_none(self, gateway):
        assert gateway.execute(_failing(_api_error("PGRST116"))) is None
        assert gateway.first(_failing(_api_error("PGRST116"))) is None

    def test_other_api_errors_are_transient(self, gateway):
        with pytest.raises(Transient):
            gateway.execute(_failing(_api_error("42501")))

    def test_transport_errors_are_transient(self, gateway):
        with pytest.raises(Transient):
            gateway.execute(_failing(httpx.ConnectError("refused")))

    def test_rows_unwraps_response_data(self, gateway):
        query = MagicMock()
        query.execute.return_value = MagicMock(data=[{"id": "a"}, {"id": "b"}])
        assert gateway.rows(query) == [{"id": "a"}, {"id": "b"}]
        assert gateway.first(query) == {"id": "a"}


def test_missing_settings_are_named(gateway):
    with pytest.raises(SupabaseNotInitializedError) as excinfo:
        gateway.ensure_client()
    assert "SUPABASE_URL" in str(excinfo.value)
    assert isinstance(excinfo.value, Transient)


class TestEventQueries:
    @pytest.fixture
    def repository(self):
        gateway = MagicMock()
        gateway.rows.return_value = []
        return EventRepository(gateway=gateway, table_name="events", event_types_table="event_types")

    def _filtered(self, repository):
        return repository.gateway.table.return_value.select.return_value.eq.return_value

    def test_sweep_listing_matches_old_status_spellings(self, repository):
        repository.list_by_status("ana", SWEEPABLE_STATUSES)

        column, values = self._filtered(repository).in_.call_args.args
        assert column == "status"
        assert set(values) == {"scheduled", "overdue", "pending", "planned", "programado", "vencido"}

    def test_agenda_keeps_old_overdue_spelling(self, repository):
        repository.list_agenda("ana", datetime(2024, 3, 10, tzinfo=timezone.utc))

        (clause,) = self._filtered(repository).or_.call_args.args
        assert clause.endswith("status.in.(overdue,vencido)")
