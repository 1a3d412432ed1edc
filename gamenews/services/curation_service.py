import logging
import uuid
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from gamenews.models.post import Post

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterResult:
    featured: int
    semi_featured: int


class CurationService:
    def __init__(self, db: Session):
        self.db = db

    def set_featured_roster(
        self,
        featured_ids: Iterable[uuid.UUID],
        semi_featured_ids: Iterable[uuid.UUID],
    ) -> RosterResult:
        """
        Replace the featured and semi-featured rosters in one transaction.

        Every post ends up ``featured`` iff its id is in ``featured_ids`` and,
        independently, ``semi_featured`` iff its id is in ``semi_featured_ids``.
        Empty inputs clear the roster; ids with no matching post are ignored.
        """
        featured = set(featured_ids)
        semi_featured = set(semi_featured_ids)

        try:
            self.db.execute(
                update(Post)
                .values(featured=_membership(featured))
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                update(Post)
                .values(semi_featured=_membership(semi_featured))
                .execution_options(synchronize_session=False)
            )
            # Counted in the same transaction so the result is this roster
            result = RosterResult(
                featured=self._count(Post.featured),
                semi_featured=self._count(Post.semi_featured),
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Featured roster updated: {result.featured} featured, "
            f"{result.semi_featured} semi-featured"
        )
        return result

    def _count(self, flag) -> int:
        stmt = select(func.count()).select_from(Post).where(flag.is_(True))
        return self.db.execute(stmt).scalar_one()


def _membership(ids: set):
    if not ids:
        return False
    return case((Post.id.in_(ids), True), else_=False)
