from unittest.mock import MagicMock, patch

import streamlit as st

import auth
from infrastructure.config import AppConfig
from use_cases import bootstrap
from use_cases.cooldown import ResendCooldown
from use_cases.register_flow import RegisterFlow
from utils import session_manager


def test_init_session_state():
    st.session_state.clear()
    session_manager.init_session_state()

    assert st.session_state.auth_screen == "login"
    assert st.session_state.browser_id is None
    assert st.session_state.auth_client is None
    assert st.session_state.login_flow is None
    assert st.session_state.register_flow is None
    assert st.session_state.change_password_flow is None


def test_flows_are_created_once():
    st.session_state.clear()
    session_manager.init_session_state()
    client = MagicMock(spec=auth.AuthClient)

    flow = session_manager.get_login_flow(client)

    assert session_manager.get_login_flow(client) is flow


def test_switch_screen_tears_down_register_flow():
    st.session_state.clear()
    session_manager.init_session_state()
    cooldown = MagicMock(spec=ResendCooldown)
    st.session_state.register_flow = RegisterFlow(MagicMock(spec=auth.AuthClient), cooldown)

    session_manager.switch_screen("login")

    cooldown.cancel.assert_called_once()
    assert st.session_state.register_flow is None
    assert st.session_state.auth_screen == "login"


@patch("streamlit.rerun")
def test_logout(mock_rerun):
    st.session_state.clear()
    session_manager.init_session_state()
    client = MagicMock(spec=auth.AuthClient)
    session_manager.get_change_password_flow(client)
    st.session_state.auth_screen = "register"

    session_manager.logout(client)

    client.logout.assert_called_once()
    mock_rerun.assert_called_once()
    assert st.session_state.change_password_flow is None
    assert st.session_state.auth_screen == "login"


@patch("utils.session_manager.persist_browser_cookie")
@patch("streamlit.context")
def test_browser_id_is_restored_from_cookie(mock_context, mock_persist):
    st.session_state.clear()
    session_manager.init_session_state()
    known_id = "b" * 43
    mock_context.cookies = {session_manager.BROWSER_COOKIE: known_id}

    assert session_manager.get_browser_id() == known_id
    mock_persist.assert_not_called()


@patch("utils.session_manager.persist_browser_cookie")
@patch("streamlit.context")
def test_new_browser_gets_a_fresh_id(mock_context, mock_persist):
    mock_context.cookies = {session_manager.BROWSER_COOKIE: "not a valid id!"}
    issued = []
    for _ in range(2):
        st.session_state.clear()
        session_manager.init_session_state()
        issued.append(session_manager.get_browser_id())

    assert issued[0] != issued[1]
    assert all(session_manager.BROWSER_ID_PATTERN.fullmatch(browser_id) for browser_id in issued)
    assert mock_persist.call_count == 2
    mock_persist.assert_called_with(issued[1])


@patch("utils.session_manager.persist_browser_cookie")
def test_auth_client_is_bound_to_this_browser(mock_persist, tmp_path):
    st.session_state.clear()
    session_manager.init_session_state()
    st.session_state.browser_id = "c" * 43
    services = bootstrap.run_startup(
        AppConfig(api_base_url="http://identity.test/api", session_db_path=str(tmp_path / "s.db"))
    ).services

    client = session_manager.get_auth_client(services)

    assert client.store.browser_id == "c" * 43
    assert session_manager.get_auth_client(services) is client
    mock_persist.assert_not_called()
