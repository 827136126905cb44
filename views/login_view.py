import streamlit as st

from auth import AuthClient
from utils import session_manager

MODE_LABELS = {"PASSWORD": "Password login", "CODE": "Code login"}


def show_feedback(flow):
    if flow.state.error:
        st.error(f"⚠️ {flow.state.error}")
    elif flow.state.message:
        st.success(flow.state.message)


def render_auth_screen(client: AuthClient):
    flow = session_manager.get_login_flow(client)

    st.title("🐋 Whaletown")
    st.caption("Start your journey through town!")
    show_feedback(flow)

    if flow.state.mode == "RESET":
        _render_reset(flow)
    else:
        _render_login(flow)


def _render_login(flow):
    modes = list(MODE_LABELS)
    mode = st.radio(
        "Login mode",
        modes,
        index=modes.index(flow.state.mode),
        format_func=MODE_LABELS.get,
        horizontal=True,
        label_visibility="collapsed",
    )
    if mode != flow.state.mode:
        flow.select_mode(mode)
        st.rerun()

    password_mode = flow.state.mode == "PASSWORD"
    with st.form("login_form", clear_on_submit=False):
        identifier = st.text_input(
            "Username / phone / email" if password_mode else "Phone number",
            value=flow.state.identifier,
        )
        if password_mode:
            password = st.text_input("Password", type="password")
        else:
            st.text_input("Verification code")
        submitted = st.form_submit_button(
            "🚀 Connecting..." if flow.loading else "Enter town",
            disabled=flow.loading,
        )

    if submitted:
        if password_mode:
            flow.update(identifier=identifier, password=password)
        else:
            flow.update(identifier=identifier)
        flow.submit()
        st.rerun()

    col_forgot, col_register = st.columns(2)
    if col_forgot.button("Forgot password?"):
        flow.forgot_password()
        st.rerun()
    if col_register.button("Register a resident ID"):
        session_manager.switch_screen("register")
        st.rerun()


def _render_reset(flow):
    st.subheader("Reset password")
    identifier = st.text_input("Account / phone / email", value=flow.state.identifier)
    code = st.text_input("Verification code", value=flow.state.verification_code)
    if st.button(
        "Sent" if flow.state.code_sent else "Get code",
        disabled=not flow.can_send_reset_code,
    ):
        flow.update(identifier=identifier, verification_code=code)
        flow.send_reset_code()
        st.rerun()

    new_password = st.text_input("New password", type="password")
    col_confirm, col_cancel = st.columns(2)
    if col_confirm.button("Confirm reset", disabled=flow.loading):
        flow.update(identifier=identifier, verification_code=code, new_password=new_password)
        flow.submit()
        st.rerun()
    if col_cancel.button("Cancel"):
        flow.cancel_reset()
        st.rerun()
