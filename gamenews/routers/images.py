import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from gamenews import dependencies as deps
from gamenews.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/images/{post_id}")
def get_image(
    post_id: uuid.UUID,
    service: PostsService = Depends(deps.get_posts_service),
):
    """
    Serve an image stored on a post
    """
    image = service.get_image(post_id)
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")

    image_data, content_type = image

    # Set proper content length header
    headers = {
        "Content-Length": str(len(image_data)),
        "Accept-Ranges": "bytes",
    }

    return Response(content=image_data, media_type=content_type, headers=headers)
