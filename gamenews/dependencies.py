from fastapi import Depends

from gamenews.db.base import get_db
from gamenews.repos.posts_repo import PostsRepo
from gamenews.services.curation_service import CurationService
from gamenews.services.post_counter_service import PostCounterService
from gamenews.services.posts_service import PostsService


def get_counter_service(db=Depends(get_db)):
    return PostCounterService(db)


def get_curation_service(db=Depends(get_db)):
    return CurationService(db)


def get_posts_repo(db=Depends(get_db)):
    return PostsRepo(db)


def get_posts_service(
    repo=Depends(get_posts_repo),
    counter_service=Depends(get_counter_service),
):
    return PostsService(repo=repo, counter_service=counter_service)
