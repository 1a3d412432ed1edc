import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.status import HTTP_201_CREATED, HTTP_422_UNPROCESSABLE_ENTITY

from gamenews import dependencies as deps
from gamenews.exceptions import PostNotFoundError, PostValidationError
from gamenews.models.post import CATEGORY_VALUES
from gamenews.repos.posts_repo import ALL_CATEGORIES, PostSort
from gamenews.routers.errors import invalid_post, post_not_found
from gamenews.schemas.post import (
    CategoryPage,
    HomePage,
    LikesResponse,
    PostDetail,
    PostInput,
    PostSummary,
    PreviewRequest,
    PreviewResponse,
)
from gamenews.services.markdown_converter import convert
from gamenews.services.posts_service import PostsService
from gamenews.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


def check_category(category: Optional[str] = None) -> Optional[str]:
    if category and category != ALL_CATEGORIES and category not in CATEGORY_VALUES:
        raise HTTPException(
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown category: {category}",
        )
    return category


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    search: Optional[str] = None,
    category: Optional[str] = Depends(check_category),
    sort: PostSort = PostSort.NEWEST,
    limit: int = Query(default=settings.RECENT_LIMIT, ge=1, le=100),
    service: PostsService = Depends(deps.get_posts_service),
):
    """List posts, searching titles only."""
    try:
        return service.list_posts(search=search, category=category, sort=sort, limit=limit)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.post("/posts", response_model=PostDetail, status_code=HTTP_201_CREATED)
def create_post(
    payload: PostInput,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Public post submission; same rules as the admin form."""
    try:
        return service.create_post(payload)
    except PostValidationError as e:
        raise invalid_post(e)
    except Exception as e:
        logger.error(f"Unexpected error creating post: {e}")
        raise HTTPException(status_code=500, detail="Failed to create post")


@router.get("/posts/{post_id}", response_model=PostDetail)
def get_post(
    post_id: uuid.UUID,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post for display. Every call counts as a view."""
    try:
        return service.get_post(post_id)
    except PostNotFoundError:
        raise post_not_found()
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.post("/posts/{post_id}/like", response_model=LikesResponse)
def like_post(
    post_id: uuid.UUID,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        return {"likes": service.like_post(post_id)}
    except PostNotFoundError:
        raise post_not_found()
    except Exception as e:
        logger.error(f"Failed to record like for {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to like post")


@router.get("/home", response_model=HomePage)
def home(
    search: Optional[str] = None,
    category: Optional[str] = Depends(check_category),
    sort: PostSort = PostSort.NEWEST,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Featured carousel, semi-featured grid and the filtered recent posts."""
    try:
        return service.get_home(search=search, category=category, sort=sort)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error loading home page: {e}")
        raise HTTPException(status_code=500, detail="Failed to load posts")


@router.get("/categories/{category}", response_model=CategoryPage)
def category_page(
    category: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        page = service.get_category_page(category)
        if not page:
            raise HTTPException(status_code=404, detail="Category not found")
        return page
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error loading {category} posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to load articles")


@router.post("/preview", response_model=PreviewResponse)
def preview(payload: PreviewRequest):
    """Render editor markdown with the same converter used for stored posts."""
    return {"html": convert(payload.markdown)}
