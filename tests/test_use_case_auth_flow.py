from use_cases import auth_flow
from use_cases.session_models import Session, UserProfile


def test_gate_stops_without_session(store):
    result = auth_flow.ensure_authenticated_session(store)

    assert result.status == "STOP"
    assert result.reason == "auth_required"
    assert result.user_id is None
    assert store.is_authenticated() is False


def test_gate_continues_with_token_only(store):
    store.save(Session(access_token="tok"))

    result = auth_flow.ensure_authenticated_session(store)

    assert result.status == "CONTINUE"
    assert result.user is None
    assert store.is_authenticated() is True


def test_gate_exposes_stored_profile(store):
    store.save(Session(access_token="tok", user=UserProfile(id="42", username="tester")))

    result = auth_flow.ensure_authenticated_session(store)

    assert result.status == "CONTINUE"
    assert result.user_id == "42"


def test_gate_rereads_store_after_logout(client, store):
    store.save(Session(access_token="tok"))
    assert auth_flow.ensure_authenticated_session(store).status == "CONTINUE"

    client.logout()

    assert auth_flow.ensure_authenticated_session(store).status == "STOP"
