import datetime
import uuid

from fastapi.testclient import TestClient

import gamenews.main as main_module
from gamenews import dependencies as deps
from gamenews.main import app
from gamenews.schemas.post import PostSummary
from gamenews.security import API_KEY_NAME, get_settings
from gamenews.settings import Settings
from tests.conftest import FakePostsService


def test_root_endpoint_runs_lifespan(monkeypatch):
    created = []
    monkeypatch.setattr(main_module, "init_db", lambda: created.append(True))

    with TestClient(app) as client:
        res = client.get("/")
        assert res.status_code == 200
        assert res.json() == {"message": "GameNews API is running"}

    assert created == [True]


def test_public_and_admin_routes_are_split(monkeypatch):
    monkeypatch.setattr(main_module, "init_db", lambda: None)

    fake_post = PostSummary(
        id=uuid.uuid4(),
        title="Hello World",
        category="News",
        author="Editor",
        excerpt="Hello",
        readingTime="1 min",
        createdAt=datetime.datetime(2024, 1, 1),
    )

    original_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[deps.get_posts_service] = lambda: FakePostsService(
        list_posts_return=[fake_post]
    )
    app.dependency_overrides[get_settings] = lambda: Settings(GAMENEWS_API_KEY="secret")
    try:
        with TestClient(app) as client:
            res = client.get("/posts")
            assert res.status_code == 200
            assert res.json() == [fake_post.model_dump(mode="json")]

            res = client.get("/admin/posts")
            assert res.status_code == 403

            res = client.get("/admin/posts", headers={API_KEY_NAME: "secret"})
            assert res.status_code == 200
    finally:
        app.dependency_overrides = original_overrides
