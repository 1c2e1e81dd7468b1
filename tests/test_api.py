# tests/test_api.py

from conftest import PNG_BYTES
from core.config import MAX_PAGE, MAX_PAGE_SIZE


def _upload(client, content=PNG_BYTES, name="cat.png", content_type="image/png", description=None):
    data = {"description": description} if description is not None else {}
    return client.post("/images/upload", files={"file": (name, content, content_type)}, data=data)


# -------------------------------
# Auth
# -------------------------------

def test_register_and_login(client):
    res = client.post("/auth/register", json={"username": "alice", "password": "pw1"})
    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "alice"

    res = client.post("/auth/login", json={"username": "alice", "password": "pw1"})
    assert res.status_code == 200
    assert res.json()["user"] == body["user"]


def test_register_duplicate_is_409(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw1"})
    res = client.post("/auth/register", json={"username": "alice", "password": "pw2"})
    assert res.status_code == 409
    assert res.json()["detail"] == "Username already exists"


def test_register_trims_username(client):
    res = client.post("/auth/register", json={"username": "  carol ", "password": "pw"})
    assert res.json()["user"]["username"] == "carol"


def test_register_rejects_malformed_body(client):
    assert client.post("/auth/register", json={"username": "", "password": "pw"}).status_code == 422
    assert client.post("/auth/register", json={"username": "dave"}).status_code == 422
    assert client.post("/auth/register", json={"username": "x" * 51, "password": "pw"}).status_code == 422


def test_login_failures_are_identical(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw1"})
    wrong = client.post("/auth/login", json={"username": "alice", "password": "bad"})
    unknown = client.post("/auth/login", json={"username": "nobody", "password": "pw1"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"detail": "Invalid credentials"}
    assert "access_token" not in wrong.json()


def test_login_with_overlong_username_is_invalid_credentials(client):
    res = client.post("/auth/login", json={"username": "a" * 60, "password": "pw1"})
    assert res.status_code == 401
    assert res.json() == {"detail": "Invalid credentials"}


def test_auth_responses_carry_token(client):
    registered = client.post("/auth/register", json={"username": "alice", "password": "pw1"}).json()
    logged_in = client.post("/auth/login", json={"username": "alice", "password": "pw1"}).json()

    for body in (registered, logged_in):
        assert body["token"]
        assert body["token"] == body["access_token"]


def test_form_login(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw1"})
    res = client.post("/auth/token", data={"username": "alice", "password": "pw1"})
    assert res.status_code == 200
    assert res.json()["access_token"]


def test_me(auth_client):
    res = auth_client.get("/auth/me")
    assert res.json() == auth_client.user


def test_update_me(auth_client):
    res = auth_client.patch("/auth/me", json={"username": "robert"})
    assert res.status_code == 200
    assert res.json() == {"user": {"id": auth_client.user["id"], "username": "robert"}}


def test_update_me_conflict(auth_client):
    auth_client.post("/auth/register", json={"username": "alice", "password": "pw1"})
    res = auth_client.patch("/auth/me", json={"username": "alice"})
    assert res.status_code == 409


def test_protected_routes_require_token(client):
    assert client.post("/images/1/like").status_code == 401
    assert client.delete("/images/1").status_code == 401
    assert client.patch("/auth/me", json={"username": "x"}).status_code == 401

    res = client.post("/images/1/comment", json={"text": "hi"}, headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


def test_feed_listing_is_public(client):
    res = client.get("/images", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 200


# -------------------------------
# Images
# -------------------------------

def test_upload_then_list_and_fetch(auth_client):
    res = _upload(auth_client, name="Cat.PNG", description="my cat")
    assert res.status_code == 200
    image = res.json()
    assert image["originalName"] == "Cat.PNG"
    assert image["uploaderId"] == auth_client.user["id"]
    assert image["uploader"]["username"] == "bob"
    assert image["comments"] == []

    listing = auth_client.get("/images").json()
    assert listing["data"][0]["originalName"] == "Cat.PNG"
    assert listing["pagination"] == {
        "page": 1, "limit": 10, "total": 1, "totalPages": 1, "hasNext": False, "hasPrev": False,
    }

    fetched = auth_client.get(listing["data"][0]["url"])
    assert fetched.status_code == 200
    assert fetched.content == PNG_BYTES


def test_upload_requires_auth(client):
    assert _upload(client).status_code == 401


def test_upload_rejects_type_and_size(auth_client, media):
    assert _upload(auth_client, name="doc.pdf", content_type="application/pdf").status_code == 400

    big = b"\xff" * (6 * 1024 * 1024)
    res = _upload(auth_client, content=big, name="big.jpg", content_type="image/jpeg")
    assert res.status_code == 400
    assert list(media.root.iterdir()) == []


def test_upload_extension_follows_content_type(auth_client):
    res = _upload(auth_client, name="page.html", content_type="image/png")
    assert res.status_code == 200
    url = res.json()["url"]
    assert url.endswith(".png")

    fetched = auth_client.get(url)
    assert fetched.headers["content-type"] == "image/png"


def test_list_query_params(auth_client):
    for i in range(3):
        _upload(auth_client, description=f"tree {i}")
    _upload(auth_client, description="lake")

    res = auth_client.get("/images", params={"search": "tree", "page": 2, "limit": 2}).json()
    assert len(res["data"]) == 1
    assert res["pagination"]["total"] == 3
    assert res["pagination"]["hasPrev"] is True

    mine = auth_client.get("/images", params={"uploader": auth_client.user["id"]}).json()
    assert mine["pagination"]["total"] == 4

    assert auth_client.get("/images", params={"page": 0}).status_code == 422
    assert auth_client.get("/images", params={"limit": 0}).status_code == 422


def test_list_rejects_oversized_paging(auth_client):
    _upload(auth_client)

    huge = 10**19
    assert auth_client.get("/images", params={"page": huge}).status_code == 422
    assert auth_client.get("/images", params={"limit": huge}).status_code == 422
    assert auth_client.get("/images", params={"limit": MAX_PAGE_SIZE + 1}).status_code == 422
    assert auth_client.get("/images", params={"uploader": huge}).status_code == 400

    last = auth_client.get("/images", params={"page": MAX_PAGE, "limit": MAX_PAGE_SIZE})
    assert last.status_code == 200
    assert last.json()["data"] == []


def test_like_unlike_comment_delete(auth_client, media):
    image = _upload(auth_client).json()
    image_id = image["id"]

    assert auth_client.post(f"/images/{image_id}/like").json()["likes"] == 1
    assert auth_client.delete(f"/images/{image_id}/like").json()["likes"] == 0
    assert auth_client.delete(f"/images/{image_id}/like").json()["likes"] == 0

    res = auth_client.post(f"/images/{image_id}/comment", json={"text": " nice "})
    assert res.status_code == 200
    comment = res.json()
    assert comment["text"] == "nice"
    assert comment["authorId"] == auth_client.user["id"]
    assert comment["author"]["username"] == "bob"
    assert comment["imageId"] == image_id

    assert auth_client.post(f"/images/{image_id}/comment", json={"text": "  "}).status_code == 400

    listed = auth_client.get("/images", params={"search": "NICE"}).json()
    assert listed["data"][0]["comments"][0]["author"]["username"] == "bob"

    res = auth_client.delete(f"/images/{image_id}")
    assert res.status_code == 204
    assert not media.exists(image["filename"])
    assert auth_client.get("/images").json()["data"] == []
    assert auth_client.get(image["url"]).status_code == 404


def test_unknown_image_is_404(auth_client):
    assert auth_client.post("/images/999/like").status_code == 404
    assert auth_client.delete("/images/999/like").status_code == 404
    assert auth_client.post("/images/999/comment", json={"text": "hi"}).status_code == 404
    assert auth_client.delete("/images/999").status_code == 404


def test_out_of_range_image_id_is_404(auth_client):
    huge = 10**19
    assert auth_client.post(f"/images/{huge}/like").status_code == 404
    assert auth_client.delete(f"/images/{huge}/like").status_code == 404
    assert auth_client.post(f"/images/{huge}/comment", json={"text": "hi"}).status_code == 404
    assert auth_client.delete(f"/images/{huge}").status_code == 404
