import pytest

from family_calendar.domain import TypeLink
from family_calendar.errors import Conflict, Forbidden, NotFound, ValidationError
from family_calendar.services import DEFAULT_EVENT_TYPES, EventTypeRegistry


@pytest.fixture
def registry(context, users):
    return EventTypeRegistry(context)


class TestSeeding:
    def test_first_listing_seeds_the_four_defaults(self, registry):
        catalog = {item.name: item for item in registry.list_types("ana")}

        assert set(catalog) == {"cita", "cumpleaños", "recordatorio", "reunión"}
        assert catalog["cita"].requires_end_time is True
        assert catalog["reunión"].requires_end_time is True
        assert catalog["cumpleaños"].requires_end_time is False
        assert catalog["recordatorio"].requires_end_time is False

    def test_second_listing_does_not_duplicate(self, registry):
        registry.list_types("ana")
        assert len(registry.list_types("ana")) == len(DEFAULT_EVENT_TYPES)

    def test_catalogs_are_per_owner(self, registry):
        ana = {item.id for item in registry.list_types("ana")}
        ben = {item.id for item in registry.list_types("ben")}
        assert ana.isdisjoint(ben)


class TestCrud:
    def test_create_and_update_round_trip(self, registry):
        created = registry.create_type("ana", {"name": " Dentista ", "label": "Dentista", "icon": "medical_services"})
        assert created.name == "dentista"
        assert created.requires_end_time is True

        updated = registry.update_type(created.id, {"color_class": "text-teal-500", "requires_location": True}, "ana")

        fetched = registry.get_type(created.id, "ana")
        assert fetched == updated
        assert fetched.color_class == "text-teal-500"
        assert fetched.requires_location is True
        assert fetched.icon == "medical_services"

    def test_duplicate_name_is_a_conflict(self, registry):
        registry.list_types("ana")
        with pytest.raises(Conflict):
            registry.create_type("ana", {"name": "Cita"})

    def test_rename_onto_existing_name_is_a_conflict(self, registry):
        catalog = {item.name: item for item in registry.list_types("ana")}
        with pytest.raises(Conflict):
            registry.update_type(catalog["cita"].id, {"name": "reunión"}, "ana")

    def test_update_of_foreign_type_is_forbidden(self, registry):
        foreign = registry.list_types("ben")[0]
        with pytest.raises(Forbidden):
            registry.update_type(foreign.id, {"label": "Mine"}, "ana")

    def test_unknown_type_is_not_found(self, registry):
        with pytest.raises(NotFound):
            registry.delete_type("missing", "ana")

    def test_bad_fields_are_reported_per_field(self, registry):
        with pytest.raises(ValidationError) as excinfo:
            registry.create_type("ana", {"name": "", "requires_url": "yes", "owner": "x"})
        assert "owner" in excinfo.value.fields

        with pytest.raises(ValidationError) as excinfo:
            registry.create_type("ana", {"name": "", "requires_url": "yes"})
        assert set(excinfo.value.fields) == {"name", "requires_url"}

    def test_palette_lists_icons_and_colors(self):
        palette = EventTypeRegistry.palette()
        assert "event" in palette["icons"]
        assert {"color_class", "icon_bg_class", "name"} <= set(palette["colors"][0])


class TestDeletion:
    def test_deleting_a_type_orphans_its_events(self, context, registry, events, types):
        reminder = types["recordatorio"]
        event = events.create_event(
            "ana",
            "ana",
            title="Call grandma",
            starts_at="2024-03-20T09:00:00+00:00",
            event_type_id=reminder.id,
        )
        assert event.appearance.link is TypeLink.RESOLVED

        assert registry.delete_type(reminder.id, "ana") is True

        orphan = context.events.fetch(event.id)
        assert orphan.event_type_id is None
        assert orphan.appearance.link is TypeLink.ORPHANED
        assert orphan.appearance.color_class == reminder.color_class
        assert orphan.appearance.icon == reminder.icon
