import logging
import re
import secrets
from typing import Optional
from urllib.parse import unquote

import streamlit as st
import streamlit.components.v1 as components

from auth import AuthClient
from use_cases.bootstrap import AppServices
from use_cases.change_password_flow import ChangePasswordFlow
from use_cases.cooldown import ResendCooldown
from use_cases.login_flow import LoginFlow
from use_cases.register_flow import RegisterFlow

"""
SESSION STATE CONTRACT

Screen flows live in st.session_state for the lifetime of the browser tab.
The persisted login itself lives in the SessionStore, never here.

browser_id: str | None
    key of this browser's rows in the SessionStore; read from the
    whaletown_browser_id cookie or issued on first visit

auth_client: AuthClient | None
    identity client bound to this browser's SessionStore rows

auth_screen: "login" | "register"
    which unauthenticated screen is mounted
    default: "login"

login_flow: LoginFlow | None
    state machine of the login screen; dropped when the screen changes

register_flow: RegisterFlow | None
    state machine of the registration screen; its cooldown is cancelled
    when dropped

change_password_flow: ChangePasswordFlow | None
    change-password form inside the dashboard
"""

log = logging.getLogger(__name__)

FLOW_KEYS = ("login_flow", "register_flow", "change_password_flow")

BROWSER_COOKIE = "whaletown_browser_id"
BROWSER_COOKIE_MAX_AGE = 2592000  # 30 days
BROWSER_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{32,64}")


def init_session_state():
    if "browser_id" not in st.session_state:
        st.session_state.browser_id = None
    if "auth_client" not in st.session_state:
        st.session_state.auth_client = None
    if "auth_screen" not in st.session_state:
        st.session_state.auth_screen = "login"
    for key in FLOW_KEYS:
        if key not in st.session_state:
            st.session_state[key] = None


def _browser_id_from_cookie() -> Optional[str]:
    try:
        raw = st.context.cookies.get(BROWSER_COOKIE)
    except Exception:
        # During some tests contexts might not be fully available
        raw = None
    if not raw:
        return None
    browser_id = unquote(raw)
    return browser_id if BROWSER_ID_PATTERN.fullmatch(browser_id) else None


def persist_browser_cookie(browser_id: str):
    # Use both document.cookie and parent.document.cookie for iframe compatibility
    components.html(
        f"""
        <script>
            var cookieStr = "{BROWSER_COOKIE}=" + encodeURIComponent("{browser_id}") + "; path=/; max-age={BROWSER_COOKIE_MAX_AGE}; SameSite=Lax";
            document.cookie = cookieStr;
            try {{ window.parent.document.cookie = cookieStr; }} catch (e) {{}}
        </script>
        """,
        height=0,
    )


def get_browser_id() -> str:
    """Id of this browser's session rows, restored from its cookie when present."""
    if st.session_state.browser_id is None:
        browser_id = _browser_id_from_cookie()
        if browser_id is None:
            browser_id = secrets.token_urlsafe(32)
            persist_browser_cookie(browser_id)
            log.info("Issued a new browser session id")
        st.session_state.browser_id = browser_id
    return st.session_state.browser_id


def get_auth_client(services: AppServices) -> AuthClient:
    if st.session_state.auth_client is None:
        st.session_state.auth_client = services.client_for(get_browser_id())
    return st.session_state.auth_client


def get_login_flow(client: AuthClient) -> LoginFlow:
    if st.session_state.login_flow is None:
        st.session_state.login_flow = LoginFlow(client)
    return st.session_state.login_flow


def get_register_flow(client: AuthClient, cooldown_seconds: int = 60) -> RegisterFlow:
    if st.session_state.register_flow is None:
        st.session_state.register_flow = RegisterFlow(client, ResendCooldown(seconds=cooldown_seconds))
    return st.session_state.register_flow


def get_change_password_flow(client: AuthClient) -> ChangePasswordFlow:
    if st.session_state.change_password_flow is None:
        st.session_state.change_password_flow = ChangePasswordFlow(client)
    return st.session_state.change_password_flow


def discard_flows():
    discard_auth_screens()
    st.session_state.change_password_flow = None


def discard_auth_screens():
    register_flow = st.session_state.get("register_flow")
    if register_flow is not None:
        register_flow.teardown()
    st.session_state.login_flow = None
    st.session_state.register_flow = None


def switch_screen(screen: str):
    """Mount another auth screen; the previous screen's state is discarded."""
    discard_flows()
    st.session_state.auth_screen = screen


def logout(client: AuthClient):
    client.logout()
    discard_flows()
    st.session_state.auth_screen = "login"
    log.info("User logged out")
    st.rerun()
