"""Request logging middleware."""
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from classvote.core.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# SSE responses stay open; only their start is logged
STREAM_PATH_PREFIX = "/api/v1/sse/"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id to every log line of a request and log its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse the id set by a proxy so logs can be joined across hops
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        is_stream = request.url.path.startswith(STREAM_PATH_PREFIX)
        start = time.perf_counter()

        if is_stream:
            logger.info("stream_opened")

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exception=str(exc),
                exception_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id

        if not is_stream:
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )

        return response
