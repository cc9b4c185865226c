import pytest

from family_calendar.errors import Forbidden, NotFound, ValidationError
from family_calendar.services import SharingEngine


@pytest.fixture
def sharing(context):
    return SharingEngine(context)


@pytest.fixture
def dinner(events, family):
    return events.create_event("ana", "ana", title="Dinner", starts_at="2024-03-15T19:00:00+00:00")


class TestSetSharedWith:
    def test_family_sentinel_reaches_every_member(self, sharing, events, dinner):
        sharing.set_shared_with(dinner.id, ["family"], "ana", "ana")

        assert [event.id for event in sharing.shared_with_me("cleo")] == [dinner.id]
        assert events.get_event("cleo", "ana", dinner.id).title == "Dinner"
        assert sharing.shared_with_me("finn") == []
        with pytest.raises(Forbidden):
            events.get_event("finn", "ana", dinner.id)

    def test_explicit_share_targets_one_member(self, sharing, family, dinner):
        family.add_member("ana", "finn@example.com")

        updated = sharing.set_shared_with(dinner.id, ["cleo", "cleo"], "ana", "ana")

        assert updated.shared_with == ["cleo"]
        assert [event.id for event in sharing.shared_with_me("cleo")] == [dinner.id]
        assert sharing.shared_with_me("finn") == []

    def test_editor_may_share_on_owners_behalf(self, sharing, dinner):
        updated = sharing.set_shared_with(dinner.id, ["family"], "ana", "ben")
        assert updated.shared_with == ["family"]

    def test_outsider_cannot_share(self, sharing, dinner):
        with pytest.raises(Forbidden):
            sharing.set_shared_with(dinner.id, ["family"], "ana", "finn")

    def test_blank_target_is_rejected(self, sharing, dinner):
        with pytest.raises(ValidationError) as excinfo:
            sharing.set_shared_with(dinner.id, ["cleo", "  "], "ana", "ana")
        assert "shared_with" in excinfo.value.fields

    def test_event_of_another_owner_is_not_found(self, sharing, dinner):
        with pytest.raises(NotFound):
            sharing.set_shared_with(dinner.id, ["family"], "ben", "ben")

    def test_own_events_never_appear_in_shared_with_me(self, sharing, dinner):
        sharing.set_shared_with(dinner.id, ["family"], "ana", "ana")
        assert sharing.shared_with_me("ana") == []
