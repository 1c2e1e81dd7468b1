# server/core/feed.py

import logging
import math
from dataclasses import dataclass, field
from sqlalchemy.orm import Session
from core.config import ALLOWED_MIME_TYPES, MAX_DB_INTEGER, MAX_PAGE, MAX_PAGE_SIZE, MAX_UPLOAD_BYTES
from core.errors import NotFoundError, ValidationError
from core.media import MediaStore
from core.repository import FeedRepository
from models.image import Comment, Image


logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


def _storable(value: int) -> bool:
    return -MAX_DB_INTEGER - 1 <= value <= MAX_DB_INTEGER


def _require_storable(image_id: int):
    # ids past the column range cannot exist, and SQLite refuses to bind them
    if not _storable(image_id):
        raise NotFoundError("Image not found")


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def compute(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit)
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass
class FeedPage:
    items: list[Image] = field(default_factory=list)
    pagination: Pagination | None = None


class FeedService:
    """
    Orchestrates the image feed over the repository and the media directory.

    The database and the media directory are not updated transactionally.
    Listing hides rows whose file has gone missing, so a crash between the
    two halves of a delete leaves nothing visible behind.
    """

    def __init__(self, db: Session, media: MediaStore):
        self.repo = FeedRepository(db)
        self.media = media

    # -------------------------------
    # Upload
    # -------------------------------

    def upload(
        self,
        data: bytes,
        mime_type: str | None,
        size_bytes: int,
        original_name: str | None,
        description: str | None,
        uploader_id: int,
    ) -> Image:
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(f"Unsupported file type: {mime_type}")
        if size_bytes > MAX_UPLOAD_BYTES:
            raise ValidationError(f"File exceeds the {MAX_UPLOAD_BYTES} byte limit")

        key = self.media.generate_key(original_name, mime_type)
        self.media.save(key, data)

        description = (description or "").strip() or None
        try:
            image = self.repo.add_image(
                filename=key,
                original_name=original_name,
                url=self.media.url_for(key),
                description=description,
                uploader_id=uploader_id,
            )
        except Exception:
            logger.exception("Persisting upload %s failed, removing file", key)
            self.media.remove(key)
            raise

        logger.info("User %s uploaded %s as image %s (%d bytes)", uploader_id, key, image.id, size_bytes)
        return self.repo.get_image(image.id, with_relations=True)

    # -------------------------------
    # Listing
    # -------------------------------

    def list(
        self,
        search_term: str | None = None,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
        uploader_id: int | None = None,
    ) -> FeedPage:
        """
        Returns one page of the feed.

        Pagination is computed from the matching row count *before* rows
        with missing files are dropped, so a page may hold fewer than
        `page_size` items while `has_next` is still true.
        """
        if page < 1 or page_size < 1:
            raise ValidationError("page and limit must be positive")
        if page > MAX_PAGE or page_size > MAX_PAGE_SIZE:
            raise ValidationError(f"page must be at most {MAX_PAGE} and limit at most {MAX_PAGE_SIZE}")
        if uploader_id is not None and not _storable(uploader_id):
            raise ValidationError("uploader is out of range")

        term = (search_term or "").strip() or None
        total, rows = self.repo.search(term, page, page_size, uploader_id=uploader_id)

        items = []
        for image in rows:
            if self.media.exists(image.filename):
                items.append(image)
            else:
                logger.debug("Skipping image %s, file %s is missing", image.id, image.filename)

        return FeedPage(items=items, pagination=Pagination.compute(page, page_size, total))

    # -------------------------------
    # Likes
    # -------------------------------

    def like(self, image_id: int) -> Image:
        _require_storable(image_id)
        if not self.repo.increment_likes(image_id):
            raise NotFoundError("Image not found")
        return self.repo.get_image(image_id, with_relations=True)

    def unlike(self, image_id: int) -> Image:
        _require_storable(image_id)
        if not self.repo.decrement_likes(image_id):
            raise NotFoundError("Image not found")
        return self.repo.get_image(image_id, with_relations=True)

    # -------------------------------
    # Comments
    # -------------------------------

    def comment(self, image_id: int, text: str | None, author_id: int) -> Comment:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Comment text must not be empty")
        _require_storable(image_id)
        if not self.repo.get_image(image_id):
            raise NotFoundError("Image not found")
        return self.repo.add_comment(image_id, text, author_id)

    # -------------------------------
    # Deletion
    # -------------------------------

    def delete(self, image_id: int):
        _require_storable(image_id)
        image = self.repo.get_image(image_id)
        if not image:
            logger.warning("Image %s not found for deletion", image_id)
            raise NotFoundError("Image not found")

        if self.media.remove(image.filename):
            logger.debug("Deleted file %s", image.filename)
        else:
            logger.warning("File %s already missing, deleting record anyway", image.filename)

        self.repo.delete_image(image)
        logger.info("Deleted image %s", image_id)
