from datetime import date, datetime

import pytest

from family_calendar.core import FixedClock
from family_calendar.domain import CalendarEvent, EventStatus
from family_calendar.services import ScheduleAggregator, ServiceContext, StatsService
from family_calendar.services.schedule import TIER_FUTURE, TIER_PAST, TIER_TODAY


@pytest.fixture
def schedule(context):
    return ScheduleAggregator(context)


@pytest.fixture
def timeline(events, types):
    """A handful of events around Sunday 2024-03-10 11:00 UTC."""

    meeting = types["reunión"].id
    reminder = types["recordatorio"].id
    return {
        "stale_meeting": events.create_event(
            "ana", "ana", title="Budget", starts_at="2024-03-05T09:00:00+00:00",
            ends_at="2024-03-05T10:00:00+00:00", event_type_id=meeting,
        ),
        "stale_reminder": events.create_event(
            "ana", "ana", title="Water plants", starts_at="2024-03-05T08:00:00+00:00", event_type_id=reminder,
        ),
        "later_today": events.create_event(
            "ana", "ana", title="Piano", starts_at="2024-03-10T15:00:00+00:00",
            ends_at="2024-03-10T16:00:00+00:00", event_type_id=meeting,
        ),
        "earlier_today": events.create_event(
            "ana", "ana", title="Breakfast", starts_at="2024-03-10T08:00:00+00:00",
            ends_at="2024-03-10T09:00:00+00:00", event_type_id=meeting,
        ),
        "next_week": events.create_event(
            "ana", "ana", title="Trip", starts_at="2024-03-17T07:00:00+00:00", event_type_id=reminder,
        ),
        "tomorrow": events.create_event(
            "ana", "ana", title="School run", starts_at="2024-03-11T07:30:00+00:00", event_type_id=reminder,
        ),
        "cancelled_future": events.create_event(
            "ana", "ana", title="Cancelled", starts_at="2024-03-12T07:30:00+00:00", event_type_id=reminder,
        ),
    }


class TestDaySchedule:
    def test_only_events_of_that_day_in_start_order(self, schedule, timeline):
        listed = schedule.get_schedule("ana", day=date(2024, 3, 10))
        assert [event.title for event in listed] == ["Breakfast", "Piano"]

    def test_empty_day(self, schedule, timeline):
        assert schedule.get_schedule("ana", day=date(2024, 3, 20)) == []


class TestAgenda:
    def test_today_then_future_then_overdue(self, schedule, timeline):
        listed = schedule.get_schedule("ana")

        assert [event.title for event in listed] == [
            "Breakfast",
            "Piano",
            "School run",
            "Cancelled",
            "Trip",
            "Budget",
        ]
        assert listed[0].status is EventStatus.OVERDUE
        assert listed[-1].status is EventStatus.OVERDUE

    def test_completed_past_events_drop_out(self, schedule, timeline):
        titles = {event.title for event in schedule.get_schedule("ana")}
        assert "Water plants" not in titles

    def test_tiers_are_by_local_date(self, schedule, timeline):
        today = date(2024, 3, 10)
        assert schedule.tier(timeline["earlier_today"], today) == TIER_TODAY
        assert schedule.tier(timeline["next_week"], today) == TIER_FUTURE
        assert schedule.tier(timeline["stale_meeting"], today) == TIER_PAST

    def test_reference_in_a_later_month_moves_the_floor(self, schedule, timeline, events):
        events.create_event("ana", "ana", title="Easter", starts_at="2024-04-01T10:00:00+00:00")

        listed = schedule.get_schedule("ana", reference=date(2024, 4, 15))

        # Breakfast is overdue but started today, so it still ranks first.
        assert [event.title for event in listed] == ["Breakfast", "Easter", "Budget"]


class TestStats:
    def test_counts_after_sweep(self, context, timeline, events):
        events.set_status("ana", "ana", timeline["cancelled_future"].id, "cancelled")

        stats = StatsService(context).user_stats("ana")

        # Water plants completes on sweep; cancelled future events are not upcoming.
        assert stats.completed_tasks == 1
        assert stats.upcoming_events == 3

    def test_completed_events_newest_first(self, context, timeline, events):
        events.set_status("ana", "ana", timeline["tomorrow"].id, "completed")

        completed = StatsService(context).completed_events("ana")

        assert [event.title for event in completed] == ["School run", "Water plants"]


def test_in_progress_is_derived_not_stored(context, schedule, events, types):
    running = events.create_event(
        "ana", "ana", title="Standup", starts_at="2024-03-10T10:45:00+00:00",
        ends_at="2024-03-10T11:15:00+00:00", event_type_id=types["reunión"].id,
    )

    assert schedule.event_in_progress(running)
    assert context.events.fetch(running.id).status is EventStatus.SCHEDULED
    assert not schedule.event_in_progress(running, now=running.ends_at)


def test_naive_stored_start_falls_on_its_local_day(settings, tmp_path):
    madrid = ServiceContext(
        settings=settings,
        clock=FixedClock(timezone="Europe/Madrid", instant=datetime(2024, 3, 10, 12, 0)),
        store_path=tmp_path / "madrid.json",
    )
    # Written without an offset by an older client: 23:30 Madrid time.
    record = CalendarEvent(id="late", user_id="ana", title="Late call", starts_at=datetime(2024, 3, 11, 23, 30)).to_record()
    madrid.store.mutate(lambda state: state["events"].append(record))

    listed = ScheduleAggregator(madrid).get_schedule("ana", day=date(2024, 3, 11))

    assert [event.title for event in listed] == ["Late call"]
    assert ScheduleAggregator(madrid).get_schedule("ana", day=date(2024, 3, 12)) == []
