# server/core/session.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, BCRYPT_ROUNDS, SECRET_KEY
from core.credentials import CredentialStore
from core.errors import AuthenticationError, ConflictError, NotFoundError
from models.user import User


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class TokenIdentity:
    user_id: int
    username: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user.id), "username": user.username, "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenIdentity:
    """
    Recovers the identity embedded in a bearer token.
    Any defect (bad signature, expiry, missing claims) fails closed.
    """
    credentials_error = AuthenticationError("Could not validate credentials")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_error

    subject = payload.get("sub")
    username = payload.get("username")
    if subject is None or username is None:
        raise credentials_error
    try:
        return TokenIdentity(user_id=int(subject), username=username)
    except (TypeError, ValueError):
        raise credentials_error


def _session_payload(user: User) -> dict:
    token = create_access_token(user)
    return {
        "token": token,
        "access_token": token,
        "token_type": "bearer",
        "user": user.public(),
    }


class SessionIssuer:

    def __init__(self, db: Session):
        self.credentials = CredentialStore(db)

    def register(self, username: str, password: str) -> dict:
        if self.credentials.get_by_username(username):
            logger.info("Registration refused, username %r taken", username)
            raise ConflictError("Username already exists")
        user = self.credentials.create(username, get_password_hash(password))
        logger.info("Registered user %s (%r)", user.id, user.username)
        return _session_payload(user)

    def login(self, username: str, password: str) -> dict:
        user = self.credentials.get_by_username(username)
        if not user:
            # burn the same bcrypt time as a real check
            pwd_context.dummy_verify()
        if not user or not verify_password(password, user.hashed_password):
            logger.info("Failed login for %r", username)
            raise AuthenticationError(INVALID_CREDENTIALS)
        return _session_payload(user)

    def update_profile(self, user_id: int, new_username: str) -> dict:
        user = self.credentials.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if new_username != user.username:
            if self.credentials.get_by_username(new_username):
                raise ConflictError("Username already exists")
            old = user.username
            self.credentials.rename(user, new_username)
            logger.info("User %s renamed %r -> %r", user.id, old, new_username)

        return {"user": user.public()}
