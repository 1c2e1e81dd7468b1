# client/ui/login.py

import os
import json
import streamlit as st
from dotenv import load_dotenv
from streamlit_cookies_manager import EncryptedCookieManager
from services.api import ApiError, login_user, register_user
from services.session import ClientSession

load_dotenv()

COOKIE_PASSWORD = os.getenv("COOKIE_PASSWORD", "dev-cookie-password-change-me")

cookies = EncryptedCookieManager(prefix="image-feed/", password=COOKIE_PASSWORD)
if not cookies.ready():
    st.stop()


def load_session() -> ClientSession:
    """
    Returns the page's ClientSession, restoring it from cookies on first load.
    """
    if "client_session" not in st.session_state:
        session = ClientSession()
        token = cookies.get("access_token")
        user = cookies.get("user")
        if token and user:
            session.login(token, json.loads(user))
        st.session_state["client_session"] = session
    return st.session_state["client_session"]


def remember(session: ClientSession):
    cookies["access_token"] = session.token or ""
    cookies["user"] = json.dumps(session.user) if session.user else ""
    cookies.save()


def logout(session: ClientSession):
    session.logout()
    remember(session)


def login_page(session: ClientSession):
    st.title("🔐 Log in")

    if "show_register" not in st.session_state:
        st.session_state["show_register"] = False

    if st.session_state["show_register"]:
        show_register_form(session)
    else:
        show_login_form(session)


def _start_session(session, result):
    session.login(result["access_token"], result["user"])
    remember(session)


def show_login_form(session):
    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in")

    if submitted:
        with st.spinner("Logging in..."):
            try:
                _start_session(session, login_user(username, password))
            except ApiError as e:
                st.error(f"❌ Login failed: {e.detail}")
            else:
                st.success("✅ Logged in")
                st.rerun()

    if st.button("Create an account"):
        st.session_state["show_register"] = True
        st.rerun()


def show_register_form(session):
    st.subheader("📝 Register")

    new_user = st.text_input("Username", key="new_user")
    new_pass = st.text_input("Password", type="password", key="new_pass")

    if st.button("Register"):
        with st.spinner("Creating account..."):
            try:
                _start_session(session, register_user(new_user, new_pass))
            except ApiError as e:
                st.error(f"❌ Registration failed: {e.detail}")
            else:
                st.session_state["show_register"] = False
                st.rerun()

    if st.button("← Back to login"):
        st.session_state["show_register"] = False
        st.rerun()
