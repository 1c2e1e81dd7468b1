# server/api/deps.py

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from core.config import MEDIA_DIR
from core.errors import AuthenticationError
from core.feed import FeedService
from core.media import MediaStore
from core.session import SessionIssuer, TokenIdentity, decode_access_token
from database import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)

media_store = MediaStore(MEDIA_DIR)


def get_media_store() -> MediaStore:
    return media_store


def get_session_issuer(db: Session = Depends(get_db)) -> SessionIssuer:
    return SessionIssuer(db)


def get_feed_service(
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
) -> FeedService:
    return FeedService(db, media)


def get_current_user(token: str | None = Depends(oauth2_scheme)) -> TokenIdentity:
    if not token:
        raise AuthenticationError("Not authenticated")
    return decode_access_token(token)
