import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from gamenews import dependencies as deps
from gamenews.exceptions import PostNotFoundError, PostValidationError
from gamenews.repos.posts_repo import PostSort
from gamenews.routers.errors import invalid_post, post_not_found
from gamenews.routers.posts import check_category
from gamenews.schemas.post import (
    DashboardEntry,
    FeaturedRosterRequest,
    FeaturedRosterResponse,
    PostDetail,
    PostInput,
    PostSummary,
)
from gamenews.services.curation_service import CurationService
from gamenews.services.posts_service import PostsService
from gamenews.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    search: Optional[str] = None,
    category: Optional[str] = Depends(check_category),
    sort: PostSort = PostSort.NEWEST,
    limit: int = Query(default=settings.ADMIN_LIST_LIMIT, ge=1, le=200),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Manage-posts listing; search covers titles and bodies."""
    try:
        return service.list_posts(
            search=search, category=category, sort=sort, limit=limit, search_body=True
        )
    except Exception as e:
        logger.error(f"Posts management error: {e}")
        raise HTTPException(status_code=500, detail="Failed to load posts")


@router.post("/posts", response_model=PostDetail, status_code=HTTP_201_CREATED)
def create_post(
    payload: PostInput,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        return service.create_post(payload)
    except PostValidationError as e:
        raise invalid_post(e)
    except Exception as e:
        logger.error(f"Create post error: {e}")
        raise HTTPException(status_code=500, detail="Failed to create post")


@router.put("/posts/{post_id}", response_model=PostDetail)
def update_post(
    post_id: uuid.UUID,
    payload: PostInput,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Full edit: every editable field is resupplied."""
    try:
        return service.update_post(post_id, payload)
    except PostNotFoundError:
        raise post_not_found()
    except PostValidationError as e:
        raise invalid_post(e)
    except Exception as e:
        logger.error(f"Update post error for {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update post")


@router.delete("/posts/{post_id}", status_code=HTTP_204_NO_CONTENT)
def delete_post(
    post_id: uuid.UUID,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        service.delete_post(post_id)
    except PostNotFoundError:
        raise post_not_found()
    except Exception as e:
        logger.error(f"Delete post error for {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete post")


@router.get("/featured", response_model=List[DashboardEntry])
def featured_manager(service: PostsService = Depends(deps.get_posts_service)):
    """Every post, featured first, then semi-featured, then newest."""
    try:
        return service.list_dashboard()
    except Exception as e:
        logger.error(f"Dashboard error: {e}")
        raise HTTPException(status_code=500, detail="Failed to load dashboard")


@router.put("/featured", response_model=FeaturedRosterResponse)
def update_featured(
    payload: FeaturedRosterRequest,
    curation: CurationService = Depends(deps.get_curation_service),
):
    """Replace the whole featured and semi-featured roster."""
    try:
        result = curation.set_featured_roster(payload.featured, payload.semiFeatured)
    except Exception as e:
        logger.error(f"Update featured error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update featured posts")
    return {"featured": result.featured, "semiFeatured": result.semi_featured}
