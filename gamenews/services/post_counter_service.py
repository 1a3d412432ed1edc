import logging
import uuid

from sqlalchemy import update
from sqlalchemy.orm import Session

from gamenews.exceptions import PostNotFoundError
from gamenews.models.post import Post

logger = logging.getLogger(__name__)


class PostCounterService:
    """Likes and views counters.

    Each increment is a single ``UPDATE ... SET n = n + 1 RETURNING n`` so
    concurrent callers never lose an update. There is no deduplication: every
    call adds exactly one. Increments are not retried on failure.
    """

    def __init__(self, db: Session):
        self.db = db

    def increment_likes(self, post_id: uuid.UUID) -> int:
        return self._increment(post_id, Post.likes)

    def increment_views(self, post_id: uuid.UUID) -> int:
        return self._increment(post_id, Post.views)

    def _increment(self, post_id: uuid.UUID, column) -> int:
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values({column: column + 1})
            .returning(column)
            .execution_options(synchronize_session=False)
        )
        try:
            value = self.db.execute(stmt).scalar_one_or_none()
            if value is None:
                self.db.rollback()
                raise PostNotFoundError(post_id)
            self.db.commit()
        except PostNotFoundError:
            raise
        except Exception:
            self.db.rollback()
            raise

        logger.debug(f"{column.key} for post {post_id} is now {value}")
        return value
