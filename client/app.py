# client/app.py

import streamlit as st
from dotenv import load_dotenv
from services.api import SessionExpired
from ui.login import load_session, login_page, logout
from ui.feed import feed_page
from ui.upload import upload_page
from ui.profile import profile_page


load_dotenv()


def main_page(session):
    st.sidebar.markdown(f"## 👋 {session.username}")

    if st.sidebar.button("🖼️ Feed"):
        st.session_state["page"] = "feed"
    if st.sidebar.button("📤 Upload"):
        st.session_state["page"] = "upload"
    if st.sidebar.button("👤 Profile"):
        st.session_state["page"] = "profile"
    if st.sidebar.button("🔓 Log out"):
        logout(session)
        st.session_state.clear()
        st.rerun()

    page = st.session_state.get("page", "feed")
    if page == "upload":
        upload_page(session)
    elif page == "profile":
        profile_page(session)
    else:
        feed_page(session)


def anonymous_page(session):
    # the feed is public; logging in is only needed to interact with it
    if st.sidebar.button("🔐 Log in"):
        st.session_state["page"] = "login"
    if st.sidebar.button("🖼️ Feed"):
        st.session_state["page"] = "feed"

    if st.session_state.get("page") == "login":
        login_page(session)
    else:
        feed_page(session)


session = load_session()

# token rejected by the server during the previous run
if st.session_state.get("was_authenticated") and not session.is_authenticated:
    logout(session)
    st.session_state["page"] = "login"
    st.warning("Your session has expired. Please log in again.")

st.session_state["was_authenticated"] = session.is_authenticated

try:
    if session.is_authenticated:
        main_page(session)
    else:
        anonymous_page(session)
except SessionExpired:
    st.rerun()
