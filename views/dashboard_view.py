from typing import Optional

import streamlit as st

from auth import AuthClient
from use_cases.session_models import UserProfile, display_nickname
from utils import session_manager
from views.login_view import show_feedback


def render_dashboard(client: AuthClient, user: Optional[UserProfile]):
    col_title, col_logout = st.columns([4, 1])
    col_title.title(f"LV.1 {display_nickname(user)}")
    if col_logout.button("Log out"):
        session_manager.logout(client)

    with st.expander("Change password"):
        _render_change_password(client)


def _render_change_password(client: AuthClient):
    flow = session_manager.get_change_password_flow(client)
    show_feedback(flow)

    with st.form("change_password_form", clear_on_submit=True):
        old_password = st.text_input("Current password", type="password")
        new_password = st.text_input("New password", type="password")
        confirm_password = st.text_input("Confirm new password", type="password")
        submitted = st.form_submit_button("Change password", disabled=flow.loading)

    if submitted:
        flow.update(
            old_password=old_password,
            new_password=new_password,
            confirm_password=confirm_password,
        )
        flow.submit()
        st.rerun()
