import pytest

from cloakroom.utils.role_gate import GateDecision, decide
from conftest import login


@pytest.mark.parametrize("path", ["/private/login", "/private/reset/request", "/private/reset/reset_abc_123"])
def test_public_paths_bypass_auth(path):
    assert decide(path, has_session=False) is GateDecision.ALLOW
    assert decide(path, has_session=True, role_hint="staff") is GateDecision.ALLOW


def test_reset_token_page_is_single_segment_only():
    assert decide("/private/reset/abc/extra", has_session=False) is GateDecision.LOGIN


@pytest.mark.parametrize("path", ["/private", "/private/handover", "/private/handovers/h1", "/private/admin"])
def test_missing_session_goes_to_login(path):
    assert decide(path, has_session=False) is GateDecision.LOGIN


@pytest.mark.parametrize("path,expected", [
    ("/private", GateDecision.ALLOW),
    ("/private/handover", GateDecision.ALLOW),
    ("/private/handovers", GateDecision.ALLOW),
    ("/private/handovers/h1", GateDecision.ALLOW),
    ("/private/admin", GateDecision.FORBIDDEN),
    ("/private/admin/events", GateDecision.FORBIDDEN),
    ("/private/reports", GateDecision.FORBIDDEN),
    ("/private/handoverish", GateDecision.FORBIDDEN),
])
def test_staff_hint_allow_list(path, expected):
    assert decide(path, has_session=True, role_hint="staff") is expected


def test_admin_hint_reaches_everything():
    assert decide("/private/admin/events", has_session=True, role_hint="admin") is GateDecision.ALLOW


def test_unprotected_paths_are_untouched():
    assert decide("/api/events", has_session=False) is GateDecision.ALLOW
    assert decide("/not-allowed", has_session=False) is GateDecision.ALLOW


def test_no_cookie_redirects_to_login(client):
    resp = client.get("/private/admin", follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/private/login"


def test_login_page_is_reachable_without_cookie(client):
    resp = client.get("/private/login")
    assert resp.status_code == 200
    assert 'data-page="login"' in resp.text


def test_staff_and_admin_get_different_outcomes_for_same_path(staff_client, admin_client):
    staff_resp = staff_client.get("/private/admin/events", follow_redirects=False)
    assert staff_resp.status_code == 403
    assert 'data-page="not_allowed"' in staff_resp.text

    admin_resp = admin_client.get("/private/admin/events", follow_redirects=False)
    assert admin_resp.status_code == 200
    assert 'data-page="admin"' in admin_resp.text


def test_staff_non_get_request_is_rewritten_to_not_allowed_page(staff_client):
    resp = staff_client.post("/private/admin/x", follow_redirects=False)
    assert resp.status_code == 403
    assert 'data-page="not_allowed"' in resp.text


def test_staff_reaches_allowed_pages(staff_client):
    assert 'data-page="handover"' in staff_client.get("/private/handover").text
    assert 'data-page="home"' in staff_client.get("/private").text


def test_forged_admin_hint_is_rejected_by_handler(staff_client, make_client):
    forged = make_client()
    forged.cookies.set("cloack_session", staff_client.cookies.get("cloack_session"))
    forged.cookies.set("cloack_role", "admin")
    resp = forged.get("/private/admin", follow_redirects=False)
    assert resp.status_code == 403
    assert 'data-page="not_allowed"' in resp.text


def test_forged_session_cookie_is_rejected_by_handler(client):
    client.cookies.set("cloack_session", "made-up-token")
    client.cookies.set("cloack_role", "admin")
    resp = client.get("/private/admin", follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/private/login"
    assert client.post("/api/events", json={"name": "x"}).status_code == 401


def test_security_headers(client):
    resp = client.get("/api/health")
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "DENY"
