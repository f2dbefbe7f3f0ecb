"""Shared API dependencies."""
from zoneinfo import ZoneInfo
from fastapi import HTTPException, Request
from openai import OpenAI

from classvote.db import get_db, get_db_context
from classvote.core.config import settings
from classvote.core.errors import FieldValidationError, NotFoundError
from classvote.core.security import verify_vote_admin_token

# Display timezone for timestamps and the date master key
TIMEZONE = ZoneInfo(settings.TIMEZONE)


def http_error(e: ValueError) -> HTTPException:
    """
    Map a service-layer ValueError to an HTTP error.

    NotFoundError -> 404, FieldValidationError -> 422 in FastAPI's own
    validation error shape (so forms can show it under the field), anything
    else -> 400.
    """
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, FieldValidationError):
        return HTTPException(
            status_code=422,
            detail=[{"loc": ["body", e.field], "msg": str(e), "type": "value_error"}],
        )
    return HTTPException(status_code=400, detail=str(e))


def get_openai_client(request: Request) -> OpenAI:
    """The OpenAI client built at startup and kept on ``app.state``."""
    return request.app.state.openai_client


__all__ = [
    "get_db",
    "get_db_context",
    "get_openai_client",
    "verify_vote_admin_token",
    "TIMEZONE",
    "http_error",
]
