import requests
from unittest.mock import patch

from conftest import ALICE
from use_cases.results import AuthFailure, AuthSuccess
from use_cases.session_models import GithubIdentity, Session, UserProfile


@patch("infrastructure.identity_api.requests.request")
def test_successful_login_persists_session(mock_request, client, store, make_response, login_body):
    mock_request.return_value = make_response(200, login_body(is_new_user=True))

    result = client.login_with_password("alice", "secret1")

    assert isinstance(result, AuthSuccess)
    assert result.data.is_new_user is True
    assert result.data.display_name == "alice"
    session = store.load()
    assert session.access_token == "tok-alice"
    assert session.access_token == result.data.session.access_token
    assert session.refresh_token == "ref-alice"
    assert session.user.nickname == "Alice"
    assert mock_request.call_args.kwargs["json"] == {"identifier": "alice", "password": "secret1"}


@patch("infrastructure.identity_api.requests.request")
def test_invalid_credentials_leave_store_untouched(mock_request, client, store, make_response):
    store.save(Session(access_token="previous"))
    mock_request.return_value = make_response(401, {"success": False, "message": "invalid credentials"})

    result = client.login_with_password("alice", "wrongpass")

    assert result == AuthFailure(message="invalid credentials", kind="BUSINESS")
    assert store.load() == Session(access_token="previous")


@patch("infrastructure.identity_api.requests.request")
def test_login_network_error_is_reported_not_raised(mock_request, client, store):
    mock_request.side_effect = requests.ConnectionError("down")

    result = client.login_with_password("alice", "secret1")

    assert result.kind == "NETWORK"
    assert store.load() is None


@patch("infrastructure.identity_api.requests.request")
def test_success_without_token_is_not_persisted(mock_request, client, store, make_response):
    mock_request.return_value = make_response(200, {"success": True, "message": "", "data": {"user": ALICE}})

    result = client.login_with_password("alice", "secret1")

    assert result.kind == "NETWORK"
    assert store.load() is None


@patch("infrastructure.identity_api.requests.request")
def test_non_numeric_role_falls_back_to_zero(mock_request, client, store, make_response, login_body):
    mock_request.return_value = make_response(200, login_body(user={**ALICE, "role": "admin"}))

    result = client.login_with_password("alice", "secret1")

    assert isinstance(result, AuthSuccess)
    assert result.data.session.user.role == 0
    assert store.load().user.role == 0


@patch("use_cases.session_models.UserProfile.from_dict", side_effect=ValueError("bad profile"))
@patch("infrastructure.identity_api.requests.request")
def test_unreadable_profile_is_network_failure_and_not_persisted(
    mock_request, mock_from_dict, client, store, make_response, login_body
):
    mock_request.return_value = make_response(200, login_body())

    result = client.login_with_password("alice", "secret1")

    assert isinstance(result, AuthFailure)
    assert result.kind == "NETWORK"
    assert store.load() is None


@patch("infrastructure.identity_api.requests.request")
def test_send_reset_code(mock_request, client, make_response):
    mock_request.return_value = make_response(200, {"success": True, "message": "Code sent"})

    result = client.send_reset_code("alice")

    assert result == AuthSuccess(data=None, message="Code sent")
    args = mock_request.call_args
    assert args.args == ("POST", "http://identity.test/api/auth/forgot-password")
    assert args.kwargs["json"] == {"identifier": "alice"}


@patch("infrastructure.identity_api.requests.request")
def test_reset_password_payload(mock_request, client, make_response):
    mock_request.return_value = make_response(400, {"success": False, "message": "code expired", "error_code": "CODE_EXPIRED"})

    result = client.reset_password("alice", "123456", "newpass1")

    assert result.error_code == "CODE_EXPIRED"
    assert mock_request.call_args.kwargs["json"] == {
        "identifier": "alice",
        "verification_code": "123456",
        "new_password": "newpass1",
    }


@patch("infrastructure.identity_api.requests.request")
def test_email_verification_endpoints(mock_request, client, make_response):
    mock_request.return_value = make_response(200, {"success": True, "message": "ok"})

    assert client.send_email_verification_code("bob@example.com").ok
    assert mock_request.call_args.args[1].endswith("/auth/send-email-verification")
    assert mock_request.call_args.kwargs["json"] == {"email": "bob@example.com"}

    assert client.verify_email_code("bob@example.com", "135790").ok
    assert mock_request.call_args.args[1].endswith("/auth/verify-email")
    assert mock_request.call_args.kwargs["json"] == {"email": "bob@example.com", "verification_code": "135790"}


@patch("infrastructure.identity_api.requests.request")
def test_register_sends_optional_fields_only_when_present(mock_request, client, store, make_response, login_body):
    bob = dict(ALICE, id="u-2", username="bob123", nickname="Bobby")
    mock_request.return_value = make_response(200, login_body(token="tok-bob", refresh_token=None, user=bob))

    result = client.register("bob123", "secret1", "Bobby", email="bob@example.com", email_code="135790")

    assert result.ok
    assert mock_request.call_args.kwargs["json"] == {
        "username": "bob123",
        "password": "secret1",
        "nickname": "Bobby",
        "email": "bob@example.com",
        "email_verification_code": "135790",
    }
    assert store.load().access_token == "tok-bob"

    client.register("carol", "secret1", "Carol", email_code="999999", phone="13800138000")
    assert mock_request.call_args.kwargs["json"] == {
        "username": "carol",
        "password": "secret1",
        "nickname": "Carol",
        "phone": "13800138000",
    }


@patch("infrastructure.identity_api.requests.request")
def test_duplicate_username_is_business_failure(mock_request, client, store, make_response):
    mock_request.return_value = make_response(409, {"success": False, "message": "username taken", "error_code": "DUPLICATE"})

    result = client.register("bob123", "secret1", "Bobby", email="bob@example.com", email_code="135790")

    assert result == AuthFailure(message="username taken", kind="BUSINESS", error_code="DUPLICATE")
    assert store.load() is None


@patch("infrastructure.identity_api.requests.request")
def test_change_password_uses_stored_bearer_token(mock_request, client, store, make_response):
    store.save(Session(access_token="tok-alice"))
    mock_request.return_value = make_response(200, {"success": True, "message": "changed"})

    result = client.change_password("u-1", "secret1", "secret2")

    assert result.ok
    args = mock_request.call_args
    assert args.args == ("PUT", "http://identity.test/api/auth/change-password")
    assert args.kwargs["headers"]["Authorization"] == "Bearer tok-alice"
    assert args.kwargs["json"] == {"user_id": "u-1", "old_password": "secret1", "new_password": "secret2"}


@patch("infrastructure.identity_api.requests.request")
def test_github_oauth_exchange_persists_session(mock_request, client, store, make_response, login_body):
    mock_request.return_value = make_response(200, login_body(token="tok-gh"))

    result = client.oauth_exchange(GithubIdentity(github_id="42", username="alice", nickname="Alice"))

    assert result.ok
    assert mock_request.call_args.kwargs["json"] == {"github_id": "42", "username": "alice", "nickname": "Alice"}
    assert store.load().access_token == "tok-gh"


@patch("infrastructure.identity_api.requests.request")
def test_github_oauth_rejection_uses_fallback_message(mock_request, client, store, make_response):
    mock_request.return_value = make_response(401, {"success": False, "message": ""})

    result = client.oauth_exchange(GithubIdentity(github_id="42", username="alice", nickname="Alice"))

    assert result == AuthFailure(message="GitHub login failed", kind="BUSINESS")
    assert store.load() is None


@patch("infrastructure.identity_api.requests.request")
def test_logout_clears_tokens_without_network(mock_request, client, store):
    store.save(Session(access_token="tok", refresh_token="ref"))

    client.logout()

    assert store.load() is None
    assert store.get_access_token() is None
    mock_request.assert_not_called()


def test_current_user(client, store):
    assert client.current_user() == AuthFailure(message="Not logged in")

    store.save(Session(access_token="tok"))
    assert client.current_user() == AuthFailure(message="User info not found")

    profile = UserProfile.from_dict(ALICE)
    store.save(Session(access_token="tok", user=profile))
    assert client.current_user() == AuthSuccess(data=profile)
