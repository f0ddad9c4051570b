import pytest
from fastapi.testclient import TestClient

from cloakroom.exceptions import ConflictError
from cloakroom.main import create_app
from cloakroom.models import Event, PasswordResetToken, Session, StaffUser
from cloakroom.services.account_service import AccountService
from cloakroom.storage import memory_storage, sql_storage


@pytest.fixture(params=["memory", "sql"])
def any_storage(request, tmp_path):
    if request.param == "memory":
        return memory_storage()
    return sql_storage(f"sqlite:///{tmp_path / 'cloakroom.db'}")


def _event(event_id, starts_at, name="Event"):
    return Event(id=event_id, name=name, starts_at=starts_at, ends_at=starts_at + 100, created_at=starts_at)


def test_save_is_an_upsert_by_key(any_storage):
    repo = any_storage.events
    repo.save(_event("event_1", 10, name="First"))
    repo.save(_event("event_1", 10, name="Renamed"))
    assert repo.count() == 1
    assert repo.get("event_1").name == "Renamed"


def test_list_sorts_and_limits(any_storage):
    repo = any_storage.events
    for event_id, starts_at in [("event_b", 30), ("event_a", 10), ("event_c", 20)]:
        repo.save(_event(event_id, starts_at))
    assert [e.id for e in repo.list(sort_by="starts_at")] == ["event_a", "event_c", "event_b"]
    assert [e.id for e in repo.list(sort_by="starts_at", descending=True, limit=2)] == ["event_b", "event_c"]
    assert [e.id for e in repo.list(name="Event", starts_at=20)] == ["event_c"]


def test_search_is_case_insensitive(any_storage):
    repo = any_storage.events
    repo.save(_event("event_1", 1, name="Summer Gala"))
    repo.save(_event("event_2", 2, name="Winter Ball"))
    assert [e.id for e in repo.search("gala", ["name"])] == ["event_1"]
    assert repo.search("nothing", ["name"]) == []


def test_delete_is_idempotent(any_storage):
    repo = any_storage.events
    repo.save(_event("event_1", 1))
    assert repo.delete("event_1") is True
    assert repo.delete("event_1") is False
    assert repo.get("event_1") is None


def test_token_keyed_collections(any_storage):
    session = Session(token="tok_1", staff_id="staff_1", created_at=1, expires_at=2)
    any_storage.sessions.save(session)
    assert any_storage.sessions.get("tok_1") == session
    assert any_storage.sessions.find_one(staff_id="staff_1").token == "tok_1"


def test_update_if_applies_only_once(any_storage):
    record = PasswordResetToken(token="reset_1", staff_id="staff_1", created_at=1, expires_at=2)
    any_storage.reset_tokens.save(record)
    repo = any_storage.reset_tokens
    assert repo.update_if("reset_1", {"used": False}, {"used": True}) is True
    assert repo.update_if("reset_1", {"used": False}, {"used": True}) is False
    assert repo.get("reset_1").used is True
    assert repo.update_if("missing", {"used": False}, {"used": True}) is False


def test_memory_repository_returns_copies():
    storage = memory_storage()
    storage.events.save(_event("event_1", 1, name="Original"))
    loaded = storage.events.get("event_1")
    loaded.name = "Mutated"
    assert storage.events.get("event_1").name == "Original"


def test_search_treats_wildcards_literally(any_storage):
    repo = any_storage.events
    repo.save(_event("event_1", 1, name="Gala"))
    repo.save(_event("event_2", 2, name="100% Fun_Run"))
    assert repo.search("%", ["name"]) == [repo.get("event_2")]
    assert repo.search("G_la", ["name"]) == []
    assert [e.id for e in repo.search("fun_run", ["name"])] == ["event_2"]


def _staff(staff_id, email):
    return StaffUser(id=staff_id, full_name="S", email=email, password_hash="x", created_at=1)


def test_duplicate_email_is_a_conflict(any_storage):
    repo = any_storage.staff
    repo.save(_staff("staff_1", "dup@x.com"))
    with pytest.raises(ConflictError):
        repo.save(_staff("staff_2", "dup@x.com"))
    repo.save(_staff("staff_1", "dup@x.com").model_copy(update={"full_name": "Renamed"}))
    assert repo.count() == 1
    assert repo.get("staff_1").full_name == "Renamed"


def test_racing_registrations_get_409(tmp_path, monkeypatch):
    storage = sql_storage(f"sqlite:///{tmp_path / 'cloakroom.db'}")
    # 事前チェックをすり抜けた状態を再現する
    monkeypatch.setattr(AccountService, "_ensure_unique_email", staticmethod(lambda *args, **kwargs: None))
    body = {"fullName": "Rita", "email": "rita@example.com", "password": "pw123"}
    with TestClient(create_app(storage)) as client:
        assert client.post("/api/auth/register", json=body).status_code == 201
        resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 409
    assert resp.json()["error"] == "Email already exists"
    assert storage.staff.count() == 1
