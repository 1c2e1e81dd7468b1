# server/core/config.py

import os
from pathlib import Path
from dotenv import load_dotenv


load_dotenv()


# -------------------------------
# Authentication
# -------------------------------

SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-me")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))


# -------------------------------
# Storage
# -------------------------------

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/feed.db")
MEDIA_DIR = Path(os.getenv("MEDIA_DIR", "data/uploads"))
MEDIA_URL_PREFIX = "/uploads"


# -------------------------------
# Upload limits
# -------------------------------

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
# accepted type -> file extensions it may be stored under, preferred first
IMAGE_EXTENSIONS = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
    "image/gif": (".gif",),
    "image/webp": (".webp",),
}
ALLOWED_MIME_TYPES = frozenset(IMAGE_EXTENSIONS)


# -------------------------------
# Feed paging
# -------------------------------

MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000
# largest id SQLite (and most SQL integers) can bind
MAX_DB_INTEGER = 2**63 - 1


# -------------------------------
# Server
# -------------------------------

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
