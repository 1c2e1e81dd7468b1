# client/ui/profile.py

import streamlit as st
from services.api import ApiError, delete_image, list_images, media_url, update_profile


def profile_page(session):
    st.title(f"👤 {session.username}")

    with st.form("profile_form"):
        new_name = st.text_input("Username", value=session.username or "")
        submitted = st.form_submit_button("Save")

    if submitted:
        try:
            update_profile(session, new_name)
        except ApiError as e:
            st.error(f"❌ {e.detail}")
        else:
            st.success("✅ Username updated")
            st.rerun()

    st.subheader("My uploads")
    page = st.session_state.get("profile_page", 1)
    result = list_images(session, page=page, uploader=session.user["id"])

    if not result["data"]:
        st.info("You have not uploaded anything yet.")

    for image in result["data"]:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.image(media_url(image["url"]), width=240)
            st.caption(f"❤️ {image['likes']} · 💬 {len(image['comments'])}")
        with col2:
            if st.button("🗑️", key=f"profile-delete-{image['id']}"):
                try:
                    delete_image(session, image["id"])
                except ApiError as e:
                    st.error(e.detail)
                else:
                    st.session_state.pop("feed_view", None)
                    st.rerun()

    pagination = result["pagination"]
    col_prev, col_next = st.columns(2)
    if pagination["hasPrev"] and col_prev.button("← Newer"):
        st.session_state["profile_page"] = page - 1
        st.rerun()
    if pagination["hasNext"] and col_next.button("Older →"):
        st.session_state["profile_page"] = page + 1
        st.rerun()
