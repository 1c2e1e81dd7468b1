# client/services/feed_view.py

import logging
from services import api as default_api


logger = logging.getLogger(__name__)


class FeedView:
    """
    Client-side state of the feed page.

    `liked` only knows about likes made from this client session; the
    server keeps no per-user like state, so "unlike" is offered only
    for ids in it. Like changes are applied locally first and rolled
    back if the server call fails.
    """

    def __init__(self, session, api=default_api, page_size=10):
        self.session = session
        self.api = api
        self.page_size = page_size

        self.images = []
        self.liked = set()
        self.drafts = {}
        self.search_term = ""
        self.page = 0
        self.total_pages = 0
        self.has_next = True
        self.loading = False

    # -------------------------------
    # Paging & search
    # -------------------------------

    def _fetch(self, page):
        self.loading = True
        try:
            return self.api.list_images(
                self.session,
                page=page,
                limit=self.page_size,
                search=self.search_term or None,
            )
        finally:
            self.loading = False

    def _apply(self, result, page, append):
        new_images = result["data"]
        self.images = self.images + new_images if append else list(new_images)
        pagination = result["pagination"]
        self.has_next = pagination["hasNext"]
        self.total_pages = pagination["totalPages"]
        self.page = page

    def refresh(self):
        self._apply(self._fetch(1), 1, append=False)

    def set_search(self, term):
        term = (term or "").strip()
        if term == self.search_term and self.page:
            return
        self.search_term = term
        self.images = []
        self.refresh()

    def load_more(self) -> bool:
        if self.loading or not self.has_next:
            return False
        next_page = self.page + 1
        self._apply(self._fetch(next_page), next_page, append=True)
        return True

    def _find(self, image_id):
        for image in self.images:
            if image["id"] == image_id:
                return image
        return None

    # -------------------------------
    # Likes
    # -------------------------------

    def is_liked(self, image_id) -> bool:
        return image_id in self.liked

    def toggle_like(self, image_id) -> bool:
        image = self._find(image_id)
        if image is None:
            return False

        previous = image["likes"]
        unliking = image_id in self.liked

        if unliking:
            image["likes"] = max(0, previous - 1)
            self.liked.discard(image_id)
        else:
            image["likes"] = previous + 1
            self.liked.add(image_id)

        try:
            if unliking:
                self.api.unlike_image(self.session, image_id)
            else:
                self.api.like_image(self.session, image_id)
        except Exception:
            logger.exception("Failed to toggle like on image %s", image_id)
            image["likes"] = previous
            if unliking:
                self.liked.add(image_id)
            else:
                self.liked.discard(image_id)
            return False
        return True

    # -------------------------------
    # Comments
    # -------------------------------

    def set_draft(self, image_id, text):
        self.drafts[image_id] = text

    def submit_comment(self, image_id) -> bool:
        """
        Sends the draft for `image_id`. On success the comment is appended
        locally under the session's own identity and the draft cleared.
        """
        text = (self.drafts.get(image_id) or "").strip()
        image = self._find(image_id)
        if not text or image is None:
            return False

        try:
            self.api.comment_image(self.session, image_id, text)
        except Exception:
            logger.exception("Failed to comment on image %s", image_id)
            return False

        user = self.session.user or {}
        image.setdefault("comments", []).append({
            "text": text,
            "author": {"id": user.get("id", 0), "username": user.get("username", "Unknown")},
        })
        self.drafts[image_id] = ""
        return True

    def remove(self, image_id):
        self.api.delete_image(self.session, image_id)
        self.images = [image for image in self.images if image["id"] != image_id]
        self.liked.discard(image_id)
        self.drafts.pop(image_id, None)
