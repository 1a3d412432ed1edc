from fastapi import HTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_422_UNPROCESSABLE_ENTITY

from gamenews.exceptions import PostValidationError


def post_not_found() -> HTTPException:
    return HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")


def invalid_post(exc: PostValidationError) -> HTTPException:
    """Same shape FastAPI uses for request validation, one entry per field."""
    return HTTPException(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        detail=[
            {"loc": ["body", error["field"]], "msg": error["message"], "type": "value_error"}
            for error in exc.errors
        ],
    )
