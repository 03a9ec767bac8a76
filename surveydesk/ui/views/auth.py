"""
Login and registration screens.
"""

import streamlit as st

from surveydesk.core.exceptions import SurveyDeskError
from surveydesk.services.session import SessionController


def render_login(controller: SessionController) -> None:
    st.subheader("Login")
    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", use_container_width=True)

    if submitted:
        try:
            controller.login(username.strip(), password)
        except SurveyDeskError as exc:
            st.error(exc.detail)
        else:
            st.rerun()

    st.caption("Don't have an account?")
    if st.button("Register"):
        controller.show_register()
        st.rerun()


def render_register(controller: SessionController) -> None:
    st.subheader("Register")
    with st.form("register_form"):
        username = st.text_input("Username")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        admin = st.checkbox("Register as Admin")
        submitted = st.form_submit_button("Register", use_container_width=True)

    if submitted:
        try:
            controller.register(username.strip(), email.strip(), password, admin=admin)
        except SurveyDeskError as exc:
            st.error(exc.detail)
        else:
            st.toast("Registration successful! Please login.")
            st.rerun()

    st.caption("Already have an account?")
    if st.button("Login"):
        controller.show_login()
        st.rerun()
