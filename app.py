import streamlit as st

from infrastructure.observability import setup_observability
setup_observability()

from infrastructure.config import load_config
from use_cases import auth_flow, bootstrap
from utils import session_manager
from views import dashboard_view, login_view, register_view

st.set_page_config(page_title="Whaletown", page_icon="🐋", layout="centered")


@st.cache_resource
def get_startup() -> bootstrap.StartupResult:
    return bootstrap.run_startup(load_config())


services = get_startup().services
session_manager.init_session_state()
# Each browser gets its own slice of the session store.
client = session_manager.get_auth_client(services)

# --- SESSION GATE ---
gate = auth_flow.ensure_authenticated_session(client.store)

if gate.status == "CONTINUE":
    # Auth screens are gone once a session exists.
    session_manager.discard_auth_screens()
    dashboard_view.render_dashboard(client, gate.user)
elif st.session_state.auth_screen == "register":
    register_view.render_register_screen(client, services.config.resend_cooldown_seconds)
else:
    login_view.render_auth_screen(client)
