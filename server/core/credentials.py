# server/core/credentials.py

import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.errors import ConflictError
from models.user import User


logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Reads and writes user rows. Uniqueness of usernames is left to the
    database constraint; a violated constraint surfaces as ConflictError.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def create(self, username: str, hashed_password: str) -> User:
        user = User(username=username, hashed_password=hashed_password)
        self.db.add(user)
        self._commit_unique(username)
        self.db.refresh(user)
        return user

    def rename(self, user: User, username: str) -> User:
        user.username = username
        self._commit_unique(username)
        self.db.refresh(user)
        return user

    def _commit_unique(self, username: str):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Username %r rejected by unique constraint", username)
            raise ConflictError("Username already exists")
