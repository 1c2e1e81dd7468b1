# server/models/image.py

from datetime import datetime
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from . import Base


class Image(Base):
    """
    Metadata for an uploaded file. The bytes live in the media directory
    under `filename`; this row only references them.
    """
    __tablename__ = "images"
    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_images_likes_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, unique=True, nullable=False)
    original_name = Column(String, nullable=True)
    url = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    likes = Column(Integer, nullable=False, default=0)
    uploader_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)

    uploader = relationship("User", back_populates="images")
    comments = relationship(
        "Comment",
        back_populates="image",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, filename={self.filename})>"


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    image_id = Column(Integer, ForeignKey("images.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    image = relationship("Image", back_populates="comments")
    author = relationship("User")
