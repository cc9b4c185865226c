from dataclasses import replace
from datetime import datetime, timezone

import pytest

from family_calendar.core import FixedClock
from family_calendar.data import LocalEventRepository
from family_calendar.domain import CalendarEvent, EventStatus
from family_calendar.errors import Transient
from family_calendar.services import ServiceContext, StatusMaintainer
from family_calendar.services.status import is_in_progress, next_status


@pytest.fixture
def maintainer(context):
    return StatusMaintainer(context)


def _status(context, event_id):
    return context.events.fetch(event_id).status


class TestSweep:
    def test_past_meeting_becomes_overdue(self, context, maintainer, events, types):
        meeting = events.create_event(
            "ana",
            "ana",
            title="Parents' evening",
            starts_at="2024-03-10T09:00:00+00:00",
            ends_at="2024-03-10T10:00:00+00:00",
            event_type_id=types["reunión"].id,
        )

        report = maintainer.sweep("ana")

        assert report.overdue == [meeting.id]
        assert _status(context, meeting.id) is EventStatus.OVERDUE

    def test_past_reminder_completes(self, context, maintainer, events, types):
        reminder = events.create_event(
            "ana",
            "ana",
            title="Take out bins",
            starts_at="2024-03-10T08:00:00+00:00",
            event_type_id=types["recordatorio"].id,
        )

        report = maintainer.sweep("ana")

        assert report.completed == [reminder.id]
        assert _status(context, reminder.id) is EventStatus.COMPLETED

    def test_event_without_type_completes(self, context, maintainer, events):
        plain = events.create_event("ana", "ana", title="Errand", starts_at="2024-03-09T08:00:00+00:00")

        maintainer.sweep("ana")

        assert _status(context, plain.id) is EventStatus.COMPLETED

    def test_cancelled_and_future_events_are_left_alone(self, context, maintainer, events, types):
        cancelled = events.create_event("ana", "ana", title="Old", starts_at="2024-03-01T08:00:00+00:00")
        events.set_status("ana", "ana", cancelled.id, "cancelled")
        future = events.create_event(
            "ana",
            "ana",
            title="Planning",
            starts_at="2024-03-11T09:00:00+00:00",
            ends_at="2024-03-11T10:00:00+00:00",
            event_type_id=types["reunión"].id,
        )

        maintainer.sweep("ana")

        assert _status(context, cancelled.id) is EventStatus.CANCELLED
        assert _status(context, future.id) is EventStatus.SCHEDULED

    def test_in_progress_event_stays_scheduled(self, context, maintainer, events, types, now):
        running = events.create_event(
            "ana",
            "ana",
            title="Standup",
            starts_at="2024-03-10T10:30:00+00:00",
            ends_at="2024-03-10T11:30:00+00:00",
            event_type_id=types["reunión"].id,
        )

        maintainer.sweep("ana")

        assert _status(context, running.id) is EventStatus.SCHEDULED
        assert is_in_progress(context.events.fetch(running.id), now, context.clock)

    def test_sweep_is_idempotent(self, context, maintainer, events, types):
        meeting = events.create_event(
            "ana",
            "ana",
            title="Review",
            starts_at="2024-03-10T09:00:00+00:00",
            ends_at="2024-03-10T10:00:00+00:00",
            event_type_id=types["reunión"].id,
        )
        events.create_event("ana", "ana", title="Note", starts_at="2024-03-10T07:00:00+00:00")

        first = maintainer.sweep("ana")
        second = maintainer.sweep("ana")

        assert first.changed == 2
        assert second.changed == 0
        assert _status(context, meeting.id) is EventStatus.OVERDUE

    def test_failed_update_keeps_previous_status(self, context, maintainer, events, monkeypatch):
        plain = events.create_event("ana", "ana", title="Errand", starts_at="2024-03-09T08:00:00+00:00")

        def _unavailable(self, event_id, status):
            raise Transient("backend down")

        monkeypatch.setattr(LocalEventRepository, "update_status", _unavailable)
        report = maintainer.sweep("ana")

        assert report.failed == [plain.id]
        assert report.changed == 0
        monkeypatch.undo()
        assert _status(context, plain.id) is EventStatus.SCHEDULED

    def test_listing_failure_is_reported_not_raised(self, maintainer, monkeypatch):
        def _unavailable(self, user_id, statuses):
            raise Transient("backend down")

        monkeypatch.setattr(LocalEventRepository, "list_by_status", _unavailable)

        assert maintainer.sweep("ana").listing_failed is True


class TestNextStatus:
    def test_boundary_end_equal_to_now_is_not_stale(self, now):
        clock = FixedClock(timezone="UTC", instant=now)
        event = CalendarEvent(id="e", user_id="ana", title="Edge", starts_at=now)
        assert next_status(event, clock.now(), clock) is None

    def test_naive_times_are_read_in_calendar_timezone(self):
        clock = FixedClock(timezone="Europe/Madrid", instant=datetime(2024, 3, 10, 12, 0))
        # Naive 12:30 end is Madrid time, so still ahead of 12:00 Madrid.
        event = CalendarEvent(
            id="e",
            user_id="ana",
            title="Lunch",
            starts_at=datetime(2024, 3, 10, 11, 0),
            ends_at=datetime(2024, 3, 10, 12, 30),
        )
        assert next_status(event, clock.now(), clock) is None
        late = CalendarEvent(
            id="f",
            user_id="ana",
            title="Brunch",
            starts_at=datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc),
        )
        assert next_status(late, clock.now(), clock) is EventStatus.COMPLETED


class TestStoredRows:
    def _store(self, context, event_id, status, starts_at):
        record = CalendarEvent(id=event_id, user_id="ana", title="Stored", starts_at=starts_at).to_record()
        record["status"] = status
        context.store.mutate(lambda state: state["events"].append(record))

    def test_old_status_spelling_is_swept(self, context, maintainer):
        self._store(context, "legacy", "pending", datetime(2024, 3, 9, 8, 0, tzinfo=timezone.utc))

        report = maintainer.sweep("ana")

        assert report.completed == ["legacy"]
        assert _status(context, "legacy") is EventStatus.COMPLETED

    def test_unreadable_status_fails_the_listing(self, context, maintainer):
        self._store(context, "broken", "postponed", datetime(2024, 3, 9, 8, 0, tzinfo=timezone.utc))

        assert maintainer.sweep("ana").listing_failed is True

    def test_unconfigured_supabase_fails_the_listing(self, settings):
        offline = ServiceContext(settings=replace(settings, storage=replace(settings.storage, backend="supabase")))

        assert StatusMaintainer(offline).sweep("ana").listing_failed is True
