from cloakroom.models import now_ms
from conftest import login


def _request(client, email, **extra):
    resp = client.post("/api/auth/reset/request", json={"email": email, **extra})
    assert resp.status_code == 200
    return resp.json()


def test_unknown_email_answers_ok_without_token(client, storage):
    body = _request(client, "nobody@example.com")
    assert body == {"ok": True}
    assert storage.reset_tokens.count() == 0


def test_missing_email(client):
    assert client.post("/api/auth/reset/request", json={}).status_code == 400


def test_token_has_thirty_minute_window(client, storage, staff):
    token = _request(client, staff.email.upper())["token"]
    record = storage.reset_tokens.get(token)
    assert record.staff_id == staff.id
    assert record.used is False
    assert record.expires_at - record.created_at == 30 * 60 * 1000


def test_redeem_once_then_login_with_new_password(client, staff):
    token = _request(client, staff.email)["token"]
    resp = client.post("/api/auth/reset/confirm", json={"token": token, "password": "brand-new"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    assert login(client, staff.email, "brand-new").status_code == 200
    assert login(client, staff.email).status_code == 401


def test_second_redemption_fails(client, staff, storage):
    token = _request(client, staff.email)["token"]
    assert client.post("/api/auth/reset/perform", json={"token": token, "password": "first-pw"}).status_code == 200

    resp = client.post("/api/auth/reset/confirm", json={"token": token, "password": "second-pw"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid or expired token"
    assert login(client, staff.email, "first-pw").status_code == 200
    assert storage.reset_tokens.get(token).used is True


def test_expired_token_is_rejected(client, staff, storage):
    token = _request(client, staff.email)["token"]
    record = storage.reset_tokens.get(token)
    storage.reset_tokens.save(record.model_copy(update={"expires_at": now_ms() - 1}))
    resp = client.post("/api/auth/reset/confirm", json={"token": token, "password": "whatever"})
    assert resp.status_code == 400


def test_unknown_token_and_missing_fields(client):
    assert client.post("/api/auth/reset/confirm", json={"token": "reset_nope", "password": "x"}).status_code == 400
    assert client.post("/api/auth/reset/confirm", json={"token": "reset_nope"}).status_code == 400


def test_admin_reset(client, admin):
    token = _request(client, admin.email, type="admin")["token"]
    assert client.post("/api/auth/reset/confirm", json={"token": token, "password": "admin-new"}).status_code == 200
    assert login(client, admin.email, "admin-new", type="admin").status_code == 200
