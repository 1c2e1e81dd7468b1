# client/ui/feed.py

import streamlit as st
from services.api import ApiError, media_url
from services.feed_view import FeedView


def _feed_view(session) -> FeedView:
    if "feed_view" not in st.session_state:
        st.session_state["feed_view"] = FeedView(session)
    view = st.session_state["feed_view"]
    view.session = session
    return view


def feed_page(session):
    st.title("🖼️ Feed")
    view = _feed_view(session)

    term = st.text_input("🔍 Search descriptions and comments", value=view.search_term)
    if term.strip() != view.search_term or not view.page:
        view.set_search(term)

    if st.button("🔄 Refresh"):
        view.refresh()

    if not view.images:
        st.info("No images yet.")

    for image in list(view.images):
        render_image(view, session, image)

    if view.has_next and st.button("⬇️ Load more"):
        view.load_more()
        st.rerun()


def render_image(view, session, image):
    image_id = image["id"]
    with st.container(border=True):
        st.image(media_url(image["url"]), use_container_width=True)
        st.caption(f"by {image['uploader']['username']} · {image['createdAt'][:16].replace('T', ' ')}")
        if image.get("description"):
            st.markdown(image["description"])

        liked = view.is_liked(image_id)
        col1, col2 = st.columns([1, 5])
        with col1:
            label = f"{'💔' if liked else '❤️'} {image['likes']}"
            if st.button(label, key=f"like-{image_id}", disabled=not session.is_authenticated):
                if not view.toggle_like(image_id):
                    st.error("Could not update like.")
                st.rerun()
        with col2:
            own = session.user and session.user.get("id") == image["uploaderId"]
            if own and st.button("🗑️ Delete", key=f"delete-{image_id}"):
                try:
                    view.remove(image_id)
                except ApiError as e:
                    st.error(e.detail)
                else:
                    st.rerun()

        for c in image.get("comments", []):
            st.markdown(f"**{c['author']['username']}**: {c['text']}")

        if session.is_authenticated:
            draft = st.text_input(
                "Add a comment",
                value=view.drafts.get(image_id, ""),
                key=f"draft-{image_id}",
            )
            view.set_draft(image_id, draft)
            if st.button("💬 Post", key=f"comment-{image_id}"):
                if view.submit_comment(image_id):
                    st.session_state.pop(f"draft-{image_id}", None)
                    st.rerun()
                else:
                    st.warning("Comment not posted.")
