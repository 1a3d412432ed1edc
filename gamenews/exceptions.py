"""
Exceptions raised by the GameNews services.

Routers translate these into HTTP responses; anything else is treated as a
storage failure and reported as a generic error.
"""

from typing import Dict, List


class GameNewsError(Exception):
    """Base exception for all GameNews errors."""
    pass


class PostNotFoundError(GameNewsError):
    """Raised when an operation targets a post id that does not exist."""

    def __init__(self, post_id):
        self.post_id = post_id
        super().__init__(f"Post not found: {post_id}")


class PostValidationError(GameNewsError):
    """Raised before any mutation when submitted post fields are invalid.

    ``errors`` holds one ``{"field": ..., "message": ...}`` entry per violation
    so callers can re-render the submitted form with field errors preserved.
    """

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(f"Invalid post fields: {fields}")

    @classmethod
    def single(cls, field: str, message: str) -> "PostValidationError":
        return cls([{"field": field, "message": message}])
