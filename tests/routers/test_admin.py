import uuid

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from gamenews.db.base import get_db
from gamenews.models.post import Post
from gamenews.routers import admin
from gamenews.security import API_KEY_NAME, get_api_key, get_settings
from gamenews.settings import Settings

KEY = {API_KEY_NAME: "secret"}


@pytest.fixture
def client(session_factory):
    app = FastAPI()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: Settings(GAMENEWS_API_KEY="secret")
    app.include_router(admin.router, dependencies=[Depends(get_api_key)])
    return TestClient(app)


def post_body(**overrides):
    body = {"title": "Review", "content": "Solid *game*", "category": "Reviews"}
    body.update(overrides)
    return body


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/admin/posts"),
        ("post", "/admin/posts"),
        ("put", f"/admin/posts/{uuid.uuid4()}"),
        ("delete", f"/admin/posts/{uuid.uuid4()}"),
        ("get", "/admin/featured"),
        ("put", "/admin/featured"),
    ],
)
def test_admin_routes_require_api_key(client, method, path):
    assert client.request(method, path).status_code == 403
    assert client.request(method, path, headers={API_KEY_NAME: "nope"}).status_code == 403


def test_admin_list_searches_bodies(client, make_post):
    make_post(title="Elden Ring", content="boss fights")
    make_post(title="Patch", content="Fixes ring bugs")
    make_post(title="Other", content="nothing")

    res = client.get("/admin/posts", params={"search": "RING"}, headers=KEY)

    assert res.status_code == 200
    assert [p["title"] for p in res.json()] == ["Elden Ring", "Patch"]


def test_create_then_update_then_delete(client, db_session):
    created = client.post("/admin/posts", json=post_body(), headers=KEY)
    assert created.status_code == 201
    post_id = created.json()["id"]

    updated = client.put(
        f"/admin/posts/{post_id}",
        json=post_body(title="Review (updated)", imageUrl="http://cdn/cover.jpg"),
        headers=KEY,
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Review (updated)"
    assert updated.json()["image"] == "http://cdn/cover.jpg"
    assert updated.json()["contentHtml"] == "<p>Solid <em>game</em></p>"

    res = client.delete(f"/admin/posts/{post_id}", headers=KEY)
    assert res.status_code == 204
    assert db_session.query(Post).count() == 0


def test_update_and_delete_unknown_post_are_404(client):
    missing = uuid.uuid4()

    assert client.put(f"/admin/posts/{missing}", json=post_body(), headers=KEY).status_code == 404
    assert client.delete(f"/admin/posts/{missing}", headers=KEY).status_code == 404


def test_update_rejects_invalid_fields(client, make_post):
    post = make_post(title="Keep me")

    res = client.put(f"/admin/posts/{post.id}", json=post_body(title=""), headers=KEY)

    assert res.status_code == 422
    assert client.get("/admin/posts", headers=KEY).json()[0]["title"] == "Keep me"


def test_featured_roster_replacement(client, make_post):
    a = make_post(title="a", featured=True)
    b = make_post(title="b")
    make_post(title="c", semi_featured=True)

    res = client.put(
        "/admin/featured",
        json={"featured": [str(b.id)], "semiFeatured": [str(b.id), str(a.id)]},
        headers=KEY,
    )
    assert res.status_code == 200
    assert res.json() == {"featured": 1, "semiFeatured": 2}

    dashboard = client.get("/admin/featured", headers=KEY).json()
    flags = {row["title"]: (row["featured"], row["semiFeatured"]) for row in dashboard}
    assert flags == {"a": (False, True), "b": (True, True), "c": (False, False)}
    assert [row["title"] for row in dashboard] == ["b", "a", "c"]


def test_featured_roster_empty_clears_everything(client, make_post):
    make_post(featured=True, semi_featured=True)

    res = client.put("/admin/featured", json={}, headers=KEY)

    assert res.json() == {"featured": 0, "semiFeatured": 0}
