# server/models/user.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from . import Base


USERNAME_MAX_LENGTH = 50


class User(Base):
    """
    Account row. The unique index on `username` is what actually keeps two
    concurrent registrations from producing duplicate names.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    images = relationship("Image", back_populates="uploader")

    def public(self) -> dict:
        return {"id": self.id, "username": self.username}
