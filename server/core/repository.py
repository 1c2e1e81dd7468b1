# server/core/repository.py

from sqlalchemy.orm import Session, selectinload
from models.image import Comment, Image


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FeedRepository:
    """
    Persistence for images and their comments.
    Like counters are changed with single UPDATE statements so concurrent
    requests never lose an increment.
    """

    def __init__(self, db: Session):
        self.db = db

    def _with_relations(self, query):
        return query.options(
            selectinload(Image.uploader),
            selectinload(Image.comments).selectinload(Comment.author),
        )

    def get_image(self, image_id: int, with_relations: bool = False) -> Image | None:
        query = self.db.query(Image).filter(Image.id == image_id)
        if with_relations:
            query = self._with_relations(query)
        return query.first()

    def add_image(self, **fields) -> Image:
        image = Image(**fields)
        self.db.add(image)
        self.db.commit()
        self.db.refresh(image)
        return image

    def delete_image(self, image: Image):
        self.db.delete(image)
        self.db.commit()

    def search(self, term: str | None, page: int, page_size: int, uploader_id: int | None = None):
        """
        Returns (total, rows) for one page of the feed, newest first.
        A term matches the description or the text of any comment, ignoring case.
        """
        query = self.db.query(Image)
        if term:
            pattern = f"%{_escape_like(term)}%"
            query = query.filter(
                Image.description.ilike(pattern, escape="\\")
                | Image.comments.any(Comment.text.ilike(pattern, escape="\\"))
            )
        if uploader_id is not None:
            query = query.filter(Image.uploader_id == uploader_id)

        total = query.count()
        rows = (
            self._with_relations(query)
            .order_by(Image.created_at.desc(), Image.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return total, rows

    def increment_likes(self, image_id: int) -> bool:
        updated = (
            self.db.query(Image)
            .filter(Image.id == image_id)
            .update({Image.likes: Image.likes + 1}, synchronize_session=False)
        )
        self.db.commit()
        return updated > 0

    def decrement_likes(self, image_id: int) -> bool:
        """
        Lowers the counter unless it is already zero.
        Returns False only when the image does not exist.
        """
        updated = (
            self.db.query(Image)
            .filter(Image.id == image_id, Image.likes > 0)
            .update({Image.likes: Image.likes - 1}, synchronize_session=False)
        )
        self.db.commit()
        if updated:
            return True
        return self.db.query(Image.id).filter(Image.id == image_id).first() is not None

    def add_comment(self, image_id: int, text: str, author_id: int) -> Comment:
        comment = Comment(image_id=image_id, text=text, author_id=author_id)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment
