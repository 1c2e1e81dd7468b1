# client/ui/upload.py

import streamlit as st
from services.api import ApiError, upload_image


ACCEPTED_TYPES = ["jpg", "jpeg", "png", "gif", "webp"]
MAX_UPLOAD_MB = 5


def upload_page(session):
    st.title("📤 Upload")

    uploaded = st.file_uploader(
        f"Choose an image (JPEG, PNG, GIF or WebP, up to {MAX_UPLOAD_MB} MB)",
        type=ACCEPTED_TYPES,
        key="image_upload",
    )
    description = st.text_area("Description (optional)")

    if uploaded is not None:
        st.image(uploaded, width=320)

    if uploaded is not None and st.button("💾 Upload"):
        with st.spinner("Uploading..."):
            try:
                image = upload_image(
                    session,
                    uploaded.name,
                    uploaded.getvalue(),
                    uploaded.type,
                    description.strip() or None,
                )
            except ApiError as e:
                st.error(f"❌ Upload failed: {e.detail}")
                return

        st.success(f"✅ Uploaded {image.get('originalName') or image['filename']}")
        st.session_state.pop("feed_view", None)
