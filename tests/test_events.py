import pytest

from family_calendar.domain import EventStatus, RecurrencePattern, TypeLink
from family_calendar.errors import Forbidden, NotFound, ValidationError


class TestCreate:
    def test_meeting_without_end_is_rejected(self, events, types, users):
        with pytest.raises(ValidationError) as excinfo:
            events.create_event(
                "ana",
                "ana",
                title="Board",
                starts_at="2024-03-12T09:00:00+00:00",
                event_type_name="Reunión",
            )
        assert set(excinfo.value.fields) == {"ends_at"}

    def test_field_errors_are_collected(self, events, users):
        with pytest.raises(ValidationError) as excinfo:
            events.create_event(
                "ana",
                "ana",
                title="  ",
                starts_at="2024-03-12T09:00:00+00:00",
                ends_at="2024-03-12T08:00:00+00:00",
                is_recurring=True,
            )
        assert set(excinfo.value.fields) == {"title", "ends_at", "recurrence_pattern"}

    def test_unknown_type_is_a_validation_error(self, events, types):
        with pytest.raises(ValidationError):
            events.create_event("ana", "ana", title="X", starts_at="2024-03-12T09:00:00", event_type_name="gym")

    def test_unparseable_start_is_a_validation_error(self, events, users):
        with pytest.raises(ValidationError) as excinfo:
            events.create_event("ana", "ana", title="X", starts_at="next tuesday")
        assert "starts_at" in excinfo.value.fields

    def test_type_defaults_and_snapshot_are_applied(self, context, events, types):
        birthday = types["cumpleaños"]
        context.event_types.update(birthday.id, {"default_recurring": True})

        event = events.create_event(
            "ana",
            "ana",
            title="Cleo turns 9",
            starts_at="2024-05-02T00:00:00",
            event_type_id=birthday.id,
            recurrence_pattern="yearly",
        )

        assert event.is_recurring is True
        assert event.recurrence_pattern is RecurrencePattern.YEARLY
        assert event.fallback_color_class == birthday.color_class
        assert event.appearance.link is TypeLink.RESOLVED
        assert event.status is EventStatus.SCHEDULED
        assert event.starts_at.utcoffset().total_seconds() == 0


class TestUpdate:
    @pytest.fixture
    def checkup(self, events, types, family):
        return events.create_event(
            "ana",
            "ana",
            title="Checkup",
            starts_at="2024-03-14T09:00:00+00:00",
            ends_at="2024-03-14T09:30:00+00:00",
            event_type_id=types["cita"].id,
        )

    def test_editor_patch_is_saved(self, events, checkup):
        updated = events.update_event("ben", "ana", checkup.id, {"title": "Dental checkup", "is_important": True})

        assert updated.title == "Dental checkup"
        assert updated.is_important is True
        assert updated.created_by == "ana"

    def test_changing_type_refreshes_snapshot(self, events, types, checkup):
        reminder = types["recordatorio"]

        updated = events.update_event("ana", "ana", checkup.id, {"event_type_id": reminder.id, "ends_at": None})

        assert updated.event_type_id == reminder.id
        assert updated.fallback_icon == reminder.icon
        assert updated.ends_at is None

    def test_clearing_end_of_meeting_type_is_rejected(self, events, checkup):
        with pytest.raises(ValidationError):
            events.update_event("ana", "ana", checkup.id, {"ends_at": None})

    def test_non_editor_is_forbidden(self, events, checkup):
        with pytest.raises(Forbidden):
            events.update_event("cleo", "ana", checkup.id, {"title": "Hijacked"})

    def test_unknown_event_is_not_found(self, events, family):
        with pytest.raises(NotFound):
            events.update_event("ana", "ana", "missing", {"title": "X"})

    def test_event_outside_owner_calendar_is_not_found(self, events, checkup):
        with pytest.raises(NotFound):
            events.update_event("ben", "ben", checkup.id, {"title": "X"})

    def test_readonly_fields_are_rejected(self, events, checkup):
        with pytest.raises(ValidationError) as excinfo:
            events.update_event("ana", "ana", checkup.id, {"user_id": "ben"})
        assert "user_id" in excinfo.value.fields

    def test_status_aliases_are_accepted(self, events, checkup):
        assert events.set_status("ana", "ana", checkup.id, "completado").status is EventStatus.COMPLETED

    def test_unknown_status_is_rejected(self, events, checkup):
        with pytest.raises(ValidationError):
            events.set_status("ana", "ana", checkup.id, "postponed")

    def test_status_change_ignores_later_type_requirements(self, context, events, types, checkup):
        context.event_types.update(types["cita"].id, {"requires_location": True})

        cancelled = events.set_status("ben", "ana", checkup.id, "cancelled")

        assert cancelled.status is EventStatus.CANCELLED
        assert cancelled.location is None
        with pytest.raises(ValidationError):
            events.update_event("ana", "ana", checkup.id, {"title": "Moved checkup"})

    def test_status_change_needs_edit_rights(self, events, checkup):
        with pytest.raises(Forbidden):
            events.set_status("cleo", "ana", checkup.id, "cancelled")

    def test_delete(self, context, events, checkup):
        with pytest.raises(Forbidden):
            events.delete_event("finn", "ana", checkup.id)
        assert events.delete_event("ana", "ana", checkup.id) is True
        assert context.events.fetch(checkup.id) is None


def test_get_event_applies_pending_transition(events, types, family):
    meeting = events.create_event(
        "ana",
        "ana",
        title="Morning sync",
        starts_at="2024-03-10T08:00:00+00:00",
        ends_at="2024-03-10T08:30:00+00:00",
        event_type_id=types["reunión"].id,
    )

    assert events.get_event("ben", "ana", meeting.id).status is EventStatus.OVERDUE
