import os

# cloakroom の設定はインポート時に読み込まれるため先に環境変数を設定する
os.environ["DEBUG"] = "true"
os.environ["DATABASE_URL"] = ""
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["EXPOSE_RESET_TOKEN"] = "true"
os.environ["EXPOSE_PHONE_CODE"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from cloakroom.main import create_app
from cloakroom.models import Role
from cloakroom.services.account_service import AccountService
from cloakroom.storage import memory_storage
from cloakroom.utils.rate_limiter import api_limiter, login_limiter

PASSWORD = "hunter22"


@pytest.fixture(autouse=True)
def reset_limiters():
    login_limiter.reset()
    api_limiter.reset()
    yield
    login_limiter.reset()
    api_limiter.reset()


@pytest.fixture
def storage():
    return memory_storage()


@pytest.fixture
def app(storage):
    return create_app(storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_client(app):
    """別 Cookie を持つクライアントを追加で作る"""
    clients = []

    def _make():
        c = TestClient(app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def staff(storage):
    return AccountService.create(storage, Role.STAFF, "Sam Staff", "sam@example.com", PASSWORD)


@pytest.fixture
def admin(storage):
    return AccountService.create(storage, Role.ADMIN, "Ada Admin", "ada@example.com", PASSWORD)


def login(client, email, password=PASSWORD, type="staff", **extra):
    return client.post("/api/auth/login", json={"email": email, "password": password, "type": type, **extra})


@pytest.fixture
def staff_client(client, staff):
    resp = login(client, staff.email)
    assert resp.status_code == 200
    return client


@pytest.fixture
def admin_client(make_client, admin):
    c = make_client()
    resp = login(c, admin.email, type="admin")
    assert resp.status_code == 200
    return c
