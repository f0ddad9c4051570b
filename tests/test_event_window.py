from cloakroom.models import Event, HandoverReport, Role, is_event_active
from cloakroom.services.account_service import AccountService
from cloakroom.services.handover_service import assigned_active_event, can_access_handover


def make_event(event_id="event_1", starts_at=1000, ends_at=2000):
    return Event(id=event_id, name="Gala", starts_at=starts_at, ends_at=ends_at, created_at=0)


def test_active_bounds_are_inclusive():
    event = make_event()
    assert is_event_active(event, 1000)
    assert is_event_active(event, 2000)
    assert is_event_active(event, 1500)
    assert not is_event_active(event, 999)
    assert not is_event_active(event, 2001)


def _assigned_staff(storage, event_id="event_1", authorized=True):
    return AccountService.create(
        storage, Role.STAFF, "Sam", "sam@example.com", "pw", is_authorized=authorized, authorized_event_id=event_id,
    )


def test_assigned_event_must_exist_and_be_active(storage):
    staff = _assigned_staff(storage)
    # イベントが存在しない場合は拒否
    assert assigned_active_event(storage, staff, 1500) is None

    storage.events.save(make_event())
    assert assigned_active_event(storage, staff, 1500).id == "event_1"
    assert assigned_active_event(storage, staff, 2001) is None


def test_unauthorized_staff_has_no_event(storage):
    storage.events.save(make_event())
    staff = _assigned_staff(storage, authorized=False)
    assert assigned_active_event(storage, staff, 1500) is None


def test_handover_access_rules(storage, admin):
    storage.events.save(make_event())
    staff = _assigned_staff(storage)
    tagged = HandoverReport(id="h1", coat_number="1", full_name="A", event_id="event_1", created_at=10)
    other = HandoverReport(id="h2", coat_number="2", full_name="B", event_id="event_2", created_at=1500)
    untagged_inside = HandoverReport(id="h3", coat_number="3", full_name="C", created_at=1200)
    untagged_outside = HandoverReport(id="h4", coat_number="4", full_name="D", created_at=500)

    assert can_access_handover(storage, staff, tagged, 1500)
    assert not can_access_handover(storage, staff, other, 1500)
    assert can_access_handover(storage, staff, untagged_inside, 1500)
    assert not can_access_handover(storage, staff, untagged_outside, 1500)
    # イベント終了後は何も見られない
    assert not can_access_handover(storage, staff, tagged, 2500)
    assert can_access_handover(storage, admin, other, 2500)
