# tests/conftest.py

import os
import shutil
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="image-feed-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'feed.db')}"
os.environ["MEDIA_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from api.deps import media_store  # noqa: E402
from core.feed import FeedService  # noqa: E402
from core.session import SessionIssuer  # noqa: E402
from database import SessionLocal, engine  # noqa: E402
from models import Base  # noqa: E402
from main import app  # noqa: E402


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(_TMP_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    for entry in media_store.root.iterdir():
        if entry.is_file():
            entry.unlink()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def media():
    return media_store


@pytest.fixture
def feed(db, media):
    return FeedService(db, media)


@pytest.fixture
def issuer(db):
    return SessionIssuer(db)


@pytest.fixture
def alice(issuer):
    return issuer.register("alice", "pw1")["user"]


@pytest.fixture
def upload(feed, alice):
    def _upload(description=None, name="photo.png", uploader_id=None):
        return feed.upload(
            data=PNG_BYTES,
            mime_type="image/png",
            size_bytes=len(PNG_BYTES),
            original_name=name,
            description=description,
            uploader_id=uploader_id or alice["id"],
        )
    return _upload


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_client(client):
    res = client.post("/auth/register", json={"username": "bob", "password": "secret"})
    assert res.status_code == 200
    client.headers["Authorization"] = f"Bearer {res.json()['access_token']}"
    client.user = res.json()["user"]
    return client
