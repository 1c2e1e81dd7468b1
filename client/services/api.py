# client/services/api.py

import os
import logging
import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Base URL of the FastAPI backend
FASTAPI_URL = os.getenv("FEED_API_URL", "http://localhost:8000")
TIMEOUT = 10


class ApiError(Exception):
    def __init__(self, status_code, detail):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class SessionExpired(ApiError):
    """
    Raised after an authenticated call came back 401.
    The session has already been cleared when this propagates.
    """


def _detail(res):
    try:
        body = res.json()
    except ValueError:
        return res.text
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        return "; ".join(str(d.get("msg", d)) for d in detail)
    return detail or res.text


def _request(session, method, path, public=False, **kwargs):
    """
    Sends a request with the session's bearer token attached.

    A 401 on an authenticated endpoint tears the session down. Public
    reads (the feed listing) never do, so an anonymous visitor is not
    "logged out" by them.
    """
    headers = kwargs.pop("headers", {})
    if session is not None:
        headers.update(session.auth_headers())
    res = requests.request(method, f"{FASTAPI_URL}{path}", headers=headers, timeout=TIMEOUT, **kwargs)

    if res.status_code == 401 and not public:
        if session is not None:
            session.logout()
        raise SessionExpired(res.status_code, _detail(res))
    if not res.ok:
        raise ApiError(res.status_code, _detail(res))
    return res


# -------------------------------
# Authentication
# -------------------------------

def register_user(username, password):
    """
    Creates an account and returns {access_token, token_type, user}.
    """
    return _request(None, "POST", "/auth/register", public=True,
                    json={"username": username, "password": password}).json()


def login_user(username, password):
    """
    Logs in a user and returns {access_token, token_type, user}.
    """
    return _request(None, "POST", "/auth/login", public=True,
                    json={"username": username, "password": password}).json()


def update_profile(session, username):
    data = _request(session, "PATCH", "/auth/me", json={"username": username}).json()
    session.update_user(data["user"])
    return data["user"]


# -------------------------
# Feed
# -------------------------

def list_images(session, page=1, limit=10, search=None, uploader=None):
    params = {"page": page, "limit": limit}
    if search:
        params["search"] = search
    if uploader is not None:
        params["uploader"] = uploader
    return _request(session, "GET", "/images", public=True, params=params).json()


def upload_image(session, filename, content, content_type, description=None):
    files = {"file": (filename, content, content_type)}
    data = {"description": description} if description else {}
    return _request(session, "POST", "/images/upload", files=files, data=data).json()


def like_image(session, image_id):
    return _request(session, "POST", f"/images/{image_id}/like").json()


def unlike_image(session, image_id):
    return _request(session, "DELETE", f"/images/{image_id}/like").json()


def comment_image(session, image_id, text):
    return _request(session, "POST", f"/images/{image_id}/comment", json={"text": text}).json()


def delete_image(session, image_id):
    _request(session, "DELETE", f"/images/{image_id}")


def media_url(path):
    """
    Turns the server-relative `url` of an image into an absolute one.
    """
    return f"{FASTAPI_URL}{path}"
