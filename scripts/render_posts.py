import logging

from gamenews.db.base import SessionLocal, init_db
from gamenews.repos.posts_repo import PostsRepo
from gamenews.services.post_counter_service import PostCounterService
from gamenews.services.posts_service import PostsService

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        service = PostsService(PostsRepo(session), PostCounterService(session))
        changed = service.rebuild_content_html()
        logger.info(f"Content cache rebuilt, {changed} posts re-rendered.")
    except Exception as e:
        logger.error(f"Rendering failed: {e}", exc_info=True)
    finally:
        session.close()
