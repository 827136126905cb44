import pytest
from unittest.mock import MagicMock

import auth
from infrastructure.identity_api import IdentityApi
from infrastructure.repositories.sqlite_session_store import SQLiteSessionStore

BASE_URL = "http://identity.test/api"

ALICE = {
    "id": "u-1",
    "username": "alice",
    "nickname": "Alice",
    "email": "alice@example.com",
    "phone": None,
    "avatar_url": None,
    "role": 1,
    "created_at": "2026-01-01T00:00:00Z",
}


@pytest.fixture
def store(tmp_path):
    session_store = SQLiteSessionStore(str(tmp_path / "session.db"))
    session_store.init_db()
    return session_store


@pytest.fixture
def client(store):
    return auth.AuthClient(IdentityApi(BASE_URL, timeout=5), store)


@pytest.fixture
def make_response():
    def _make(status_code=200, body=None):
        resp = MagicMock()
        resp.status_code = status_code
        resp.ok = status_code < 400
        resp.json.return_value = body
        return resp
    return _make


@pytest.fixture
def login_body():
    def _body(token="tok-alice", refresh_token="ref-alice", user=ALICE, is_new_user=False):
        data = {"user": user, "access_token": token, "is_new_user": is_new_user}
        if refresh_token is not None:
            data["refresh_token"] = refresh_token
        return {"success": True, "message": "Login successful", "data": data}
    return _body
