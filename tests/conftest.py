import datetime
import os

# Must be set before gamenews.settings is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from gamenews.db.base import Base, init_db  # noqa: E402
from gamenews.models.post import Post  # noqa: E402
from gamenews.services.markdown_converter import convert  # noqa: E402

BASE_TIME = datetime.datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs sync routes in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_post(db_session):
    """Insert a post directly; ``age`` in minutes orders posts newest first."""
    counter = {"n": 0}

    def _make_post(**overrides) -> Post:
        counter["n"] += 1
        age = overrides.pop("age", counter["n"])
        content = overrides.pop("content", f"Body of post {counter['n']}")
        fields = {
            "title": f"Post {counter['n']}",
            "content": content,
            "content_html": convert(content),
            "category": "News",
            "author": "Editor",
            "created_at": BASE_TIME - datetime.timedelta(minutes=age),
        }
        fields.update(overrides)
        post = Post(**fields)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


class FakeCounterService:
    """
    Minimal counter service stand-in for posts service tests.
    """

    def __init__(self):
        self.calls = []

    def increment_views(self, post_id):
        self.calls.append(("views", post_id))
        return 1

    def increment_likes(self, post_id):
        self.calls.append(("likes", post_id))
        return 1


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(
        self,
        list_posts_return=None,
        get_post_return=None,
        image_return=None,
        error=None,
    ):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._image_return = image_return
        self._error = error
        self.calls = []

    def _maybe_raise(self):
        if self._error:
            raise self._error

    def list_posts(self, **kwargs):
        self.calls.append(("list_posts", kwargs))
        self._maybe_raise()
        return self._list_posts_return

    def get_post(self, post_id, count_view=True):
        self.calls.append(("get_post", post_id))
        self._maybe_raise()
        return self._get_post_return

    def like_post(self, post_id):
        self.calls.append(("like_post", post_id))
        self._maybe_raise()
        return 1

    def get_image(self, post_id):
        self.calls.append(("get_image", post_id))
        return self._image_return
