import streamlit as st

from auth import AuthClient
from use_cases.register_flow import RegisterFlow
from utils import session_manager
from views.login_view import show_feedback


def render_register_screen(client: AuthClient, cooldown_seconds: int = 60):
    flow = session_manager.get_register_flow(client, cooldown_seconds)
    state = flow.state

    st.title("🐋 Resident registration")
    st.caption("Fill in your details to get your town ID card")
    show_feedback(flow)

    username = st.text_input("Username (used to log in) *", value=state.username)
    nickname = st.text_input("Nickname *", value=state.nickname)
    email = st.text_input("Email *", value=state.email)

    col_code, col_send = st.columns([3, 1])
    email_code = col_code.text_input("Email verification code *", value=state.email_code)
    with col_send:
        _render_send_code(flow, email)

    phone = st.text_input("Phone (optional)", value=state.phone)
    password = st.text_input("Password *", type="password")

    if st.button("🚀 Registering..." if flow.loading else "Register", disabled=flow.loading):
        flow.update(
            username=username,
            nickname=nickname,
            email=email,
            email_code=email_code,
            phone=phone,
            password=password,
        )
        flow.submit()
        st.rerun()

    if st.button("Already a resident? Log in"):
        session_manager.switch_screen("login")
        st.rerun()


def _render_send_code(flow: RegisterFlow, email: str):
    ticking = flow.cooldown.active

    # Reruns on its own every second while the countdown runs.
    @st.fragment(run_every=1 if ticking else None)
    def send_code_button():
        label = f"{flow.countdown}s" if flow.cooldown.active else "Get code"
        if st.button(label, key="send_email_code", disabled=not flow.can_send_code):
            flow.update(email=email)
            flow.send_email_code()
            st.rerun()
        if ticking and not flow.cooldown.active:
            # Countdown over: remount without the timer.
            st.rerun()

    send_code_button()
