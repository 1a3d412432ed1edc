import base64
import binascii
import logging
from typing import Optional, Tuple

from gamenews.exceptions import PostValidationError
from gamenews.models.post import Post

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


def get_content_type_from_filename(filename: str) -> str:
    """
    Determine content type from file extension
    """
    filename = filename.lower()
    if filename.endswith((".jpg", ".jpeg")):
        return "image/jpeg"
    elif filename.endswith(".png"):
        return "image/png"
    elif filename.endswith(".gif"):
        return "image/gif"
    elif filename.endswith(".svg"):
        return "image/svg+xml"
    elif filename.endswith(".webp"):
        return "image/webp"
    else:
        return "application/octet-stream"


def decode_image_payload(
    data: str,
    content_type: Optional[str],
    filename: Optional[str],
    max_bytes: int,
) -> Tuple[bytes, str]:
    """
    Decode a base64 image submitted with a post and check it may be stored inline.
    Raises PostValidationError naming the offending field.
    """
    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise PostValidationError.single("imageData", "Image data must be valid base64")

    if not image_bytes:
        raise PostValidationError.single("imageData", "Image data is empty")

    if len(image_bytes) > max_bytes:
        raise PostValidationError.single(
            "imageData", f"Image exceeds the {max_bytes} byte limit"
        )

    resolved_type = (content_type or "").strip().lower()
    if not resolved_type and filename:
        resolved_type = get_content_type_from_filename(filename)

    if resolved_type not in ALLOWED_CONTENT_TYPES:
        raise PostValidationError.single(
            "imageContentType", "Only jpeg, png, gif and webp images are allowed"
        )

    logger.debug(f"Decoded {len(image_bytes)} byte {resolved_type} image")
    return image_bytes, resolved_type


def image_src(post: Post, base_url: str) -> Optional[str]:
    """
    Displayable source for a post image: inline bytes are served by the images
    endpoint, referenced images keep their URL.
    """
    if post.has_inline_image:
        return f"{base_url}/images/{post.id}"
    return post.image_url or None
