import pytest

from cloakroom.models import Event, HandoverReport, now_ms


@pytest.fixture
def live_event(storage):
    now = now_ms()
    event = Event(id="event_live", name="Opera Night", starts_at=now - 60_000, ends_at=now + 3_600_000, created_at=now)
    storage.events.save(event)
    return event


@pytest.fixture
def assigned_staff(storage, staff, live_event):
    updated = staff.model_copy(update={"authorized_event_id": live_event.id})
    storage.staff.save(updated)
    return updated


def _payload(handover_id="handover_1", **extra):
    return {"id": handover_id, "coatNumber": "42", "fullName": "Guest One", **extra}


def test_requires_login(client):
    assert client.get("/api/handover").status_code == 401
    assert client.post("/api/handover", json=_payload()).status_code == 401


def test_staff_without_event_cannot_create(staff_client):
    resp = staff_client.post("/api/handover", json=_payload())
    assert resp.status_code == 403


def test_staff_with_past_event_cannot_create(staff_client, storage, assigned_staff, live_event):
    storage.events.save(live_event.model_copy(update={"ends_at": now_ms() - 1}))
    assert staff_client.post("/api/handover", json=_payload()).status_code == 403


def test_staff_create_is_tagged_with_event(staff_client, assigned_staff, live_event):
    resp = staff_client.post("/api/handover", json=_payload(photos=["data:image/png;base64,AAA"], clothType="Coat"))
    assert resp.status_code == 201
    body = resp.json()
    assert body["eventId"] == live_event.id
    assert body["eventName"] == "Opera Night"
    assert body["staff"] == assigned_staff.full_name
    assert body["photos"] == ["data:image/png;base64,AAA"]
    assert body["clothType"] == "Coat"

    assert staff_client.get("/api/handover/handover_1").json()["coatNumber"] == "42"


def test_missing_fields(admin_client):
    assert admin_client.post("/api/handover", json={"id": "h"}).status_code == 400


def test_staff_only_sees_own_event(staff_client, storage, assigned_staff):
    storage.handovers.save(HandoverReport(id="mine", coat_number="1", full_name="A", event_id="event_live", created_at=1))
    storage.handovers.save(HandoverReport(id="other", coat_number="2", full_name="B", event_id="event_x", created_at=2))
    items = staff_client.get("/api/handover").json()["items"]
    assert [r["id"] for r in items] == ["mine"]
    # 存在を明かさない
    assert staff_client.get("/api/handover/other").status_code == 404


def test_admin_search_and_delete(admin_client, storage):
    storage.handovers.save(HandoverReport(id="h1", coat_number="A-17", full_name="Maria Pop", created_at=1))
    storage.handovers.save(HandoverReport(id="h2", coat_number="B-03", full_name="Ion Ionescu", created_at=2))
    assert [r["id"] for r in admin_client.get("/api/handover").json()["items"]] == ["h2", "h1"]
    assert [r["id"] for r in admin_client.get("/api/handover", params={"q": "maria"}).json()["items"]] == ["h1"]

    assert admin_client.delete("/api/handover", params={"id": "h1"}).json() == {"ok": True}
    assert admin_client.get("/api/handover/h1").status_code == 404


def test_staff_cannot_delete(staff_client):
    assert staff_client.delete("/api/handover", params={"id": "h1"}).status_code == 403


def test_admin_create_with_unknown_event(admin_client):
    assert admin_client.post("/api/handover", json=_payload(eventId="event_nope")).status_code == 400


def test_health_reports_memory_backend(client):
    body = client.get("/api/health").json()
    assert body["ok"] is True
    assert body["store"]["backend"] == "memory"
