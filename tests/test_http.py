import pytest
from fastapi.testclient import TestClient

from family_calendar.api import ApiState, api_state, call_api, endpoints, get_api_functions
from family_calendar.config import get_settings
from family_calendar.services.http import ACTOR_HEADER, app


@pytest.fixture
def client(context, family):
    api_state.bind(context)
    return TestClient(app)


def _call(client, name, actor=None, **arguments):
    headers = {ACTOR_HEADER: actor} if actor else {}
    return client.post(f"/api/functions/{name}", json={"arguments": arguments}, headers=headers)


class TestRegistry:
    def test_every_surface_function_is_listed(self, client):
        response = client.get("/api/functions")

        assert response.status_code == 200
        names = {item["name"] for item in response.json()["functions"]}
        assert {"create_event", "month_grid", "schedule", "share_event", "can_edit"} <= names

    def test_parameter_schema_marks_required_arguments(self):
        create = next(item for item in get_api_functions("events") if item.name == "create_event")
        schema = create.parameter_schema
        assert set(schema["required"]) == {"actor_id", "title", "starts_at"}
        assert schema["properties"]["shared_with"]["type"] == "array"
        assert schema["properties"]["is_important"] == {"type": "boolean", "default": False}

    def test_meta_tool_lists_itself(self, client):
        tools = call_api("list_available_tools")["tools"]
        assert "list_available_tools" in {tool["name"] for tool in tools}


class TestInvoke:
    def test_header_supplies_actor(self, client):
        response = _call(client, "create_event", actor="ben", owner_id="ana", title="Swim", starts_at="2024-03-12T17:00:00Z")

        assert response.status_code == 200
        event = response.json()["result"]
        assert event["user_id"] == "ana"
        assert event["created_by"] == "ben"
        assert event["appearance"]["link"] == "orphaned"

    def test_forbidden_maps_to_403(self, client):
        created = _call(client, "create_event", actor="ana", title="Private", starts_at="2024-03-12T08:00:00Z")
        event_id = created.json()["result"]["id"]

        response = _call(client, "get_event", actor="finn", owner_id="ana", event_id=event_id)

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_validation_maps_to_422_with_fields(self, client):
        response = _call(client, "create_event", actor="ana", title="", starts_at="2024-03-12T08:00:00Z")

        assert response.status_code == 422
        assert "title" in response.json()["fields"]

    def test_unknown_function_is_404(self, client):
        assert _call(client, "launch_rocket", actor="ana").status_code == 404

    def test_bad_arguments_are_400(self, client):
        assert _call(client, "can_edit", actor="ana", nonsense=1).status_code == 400

    def test_month_grid_and_can_edit(self, client):
        grid = _call(client, "month_grid", actor="cleo", owner_id="ana", year=2024, month=3)
        assert grid.status_code == 200
        assert len(grid.json()["result"]["cells"]) == 42

        assert _call(client, "can_edit", actor="ben", owner_id="ana").json()["result"]["can_edit"] is True
        assert _call(client, "month_grid", actor="finn", owner_id="ana", year=2024, month=3).status_code == 403

    def test_event_types_listing_seeds_defaults(self, client):
        response = _call(client, "list_event_types", actor="ana")
        labels = {item["label"] for item in response.json()["result"]["event_types"]}
        assert labels == {"Cita", "Cumpleaños", "Recordatorio", "Reunión"}

    def test_profile_registration_is_self_only(self, client):
        response = _call(client, "register_profile", actor="finn", user_id="ana", email="finn@example.com")

        assert response.status_code == 403
        own = _call(client, "register_profile", actor="ana", user_id="ana", email="ana@example.com")
        assert own.status_code == 200
        assert own.json()["result"]["allowed_editors"] == ["ben"]


def test_fresh_state_builds_its_context_on_first_call(monkeypatch, tmp_path):
    monkeypatch.setenv("FAMCAL_BACKEND", "local")
    monkeypatch.setenv("FAMCAL_DATA_FILE", str(tmp_path / "fresh.json"))
    get_settings.cache_clear()
    monkeypatch.setattr(endpoints, "api_state", ApiState())
    try:
        profile = call_api("register_profile", actor_id="zoe", user_id="zoe", email="zoe@example.com")
        listed = call_api("list_event_types", actor_id="zoe")
    finally:
        get_settings.cache_clear()

    assert profile["username"] == "zoe"
    assert len(listed["event_types"]) == 4
    assert (tmp_path / "fresh.json").exists()
