import enum
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gamenews.models.post import Post


class PostSort(str, enum.Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_LIKED = "most-liked"
    MOST_VIEWED = "most-viewed"


_ORDERINGS = {
    PostSort.NEWEST: (Post.created_at.desc(),),
    PostSort.OLDEST: (Post.created_at.asc(),),
    PostSort.MOST_LIKED: (Post.likes.desc(), Post.created_at.desc()),
    PostSort.MOST_VIEWED: (Post.views.desc(), Post.created_at.desc()),
}

ALL_CATEGORIES = "all"


class PostsRepo:
    """Persistence helper for the ``posts`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, post_id: uuid.UUID) -> Optional[Post]:
        return self.db.get(Post, post_id)

    def add(self, post: Post) -> Post:
        self.db.add(post)
        return self.save(post)

    def save(self, post: Post) -> Post:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(post)
        return post

    def delete(self, post: Post) -> None:
        self.db.delete(post)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list_posts(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        sort: PostSort = PostSort.NEWEST,
        limit: Optional[int] = None,
        search_body: bool = False,
    ) -> List[Post]:
        stmt = select(Post)
        if search:
            match = Post.title.icontains(search, autoescape=True)
            if search_body:
                match = match | Post.content.icontains(search, autoescape=True)
            stmt = stmt.where(match)
        if category and category != ALL_CATEGORIES:
            stmt = stmt.where(Post.category == category)
        stmt = stmt.order_by(*_ORDERINGS[PostSort(sort)])
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt))

    def list_featured(self, limit: Optional[int] = None) -> List[Post]:
        return self._newest(Post.featured.is_(True), limit)

    def list_semi_featured(self, limit: Optional[int] = None) -> List[Post]:
        return self._newest(Post.semi_featured.is_(True), limit)

    def list_by_category(self, category: str, limit: Optional[int] = None) -> List[Post]:
        return self._newest(Post.category == category, limit)

    def list_for_dashboard(self) -> List[Post]:
        stmt = select(Post).order_by(
            Post.featured.desc(), Post.semi_featured.desc(), Post.created_at.desc()
        )
        return list(self.db.scalars(stmt))

    def all_posts(self) -> List[Post]:
        return list(self.db.scalars(select(Post)))

    def _newest(self, criterion, limit: Optional[int]) -> List[Post]:
        stmt = select(Post).where(criterion).order_by(Post.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt))
