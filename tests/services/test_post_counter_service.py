import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gamenews.db.base import init_db
from gamenews.exceptions import PostNotFoundError
from gamenews.models.post import Post
from gamenews.services.post_counter_service import PostCounterService


def test_increment_likes_returns_new_value(db_session, make_post):
    post = make_post(likes=4)
    service = PostCounterService(db_session)

    assert service.increment_likes(post.id) == 5


def test_sequential_likes_accumulate(db_session, make_post):
    post = make_post()
    service = PostCounterService(db_session)

    service.increment_likes(post.id)
    service.increment_likes(post.id)

    db_session.expire_all()
    assert db_session.get(Post, post.id).likes == 2


def test_views_and_likes_are_independent(db_session, make_post):
    post = make_post()
    service = PostCounterService(db_session)

    service.increment_views(post.id)
    service.increment_views(post.id)
    service.increment_views(post.id)

    db_session.expire_all()
    stored = db_session.get(Post, post.id)
    assert stored.views == 3
    assert stored.likes == 0


def test_increment_unknown_post_raises_not_found(db_session):
    service = PostCounterService(db_session)

    with pytest.raises(PostNotFoundError):
        service.increment_likes(uuid.uuid4())
    with pytest.raises(PostNotFoundError):
        service.increment_views(uuid.uuid4())


def test_concurrent_increments_are_not_lost(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'counters.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    with Session() as session:
        post = Post(title="Hot take", content="body", category="Opinion", author="Editor")
        session.add(post)
        session.commit()
        post_id = post.id

    def like_and_view(_):
        with Session() as session:
            service = PostCounterService(session)
            service.increment_likes(post_id)
            service.increment_views(post_id)

    total = 40
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(like_and_view, range(total)))

    with Session() as session:
        stored = session.get(Post, post_id)
        assert stored.likes == total
        assert stored.views == total

    engine.dispose()
