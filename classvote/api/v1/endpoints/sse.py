"""Server-Sent Events endpoints."""
import asyncio
import json
import logging
from fastapi import APIRouter, Request, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError, DatabaseError

from classvote.api.deps import get_db_context, TIMEZONE, verify_vote_admin_token
from classvote.core.errors import NotFoundError
from classvote.services.state import get_vote_state_cached, list_vote_states_cached
from classvote.core.config import settings
from classvote.core.cache import global_cache

logger = logging.getLogger(__name__)
router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable buffering in nginx
}


async def event_generator(request: Request, data_func, interval: float = 5, max_consecutive_errors: int = 3):
    """
    Generic SSE event generator.

    Every event carries a full snapshot; clients replace their state with it.

    Args:
        request: FastAPI request object to check for client disconnect
        data_func: Function that returns the data to send
        interval: Seconds between updates
        max_consecutive_errors: Database failures in a row before giving up
    """
    consecutive_errors = 0

    try:
        while True:
            if await request.is_disconnected():
                break

            try:
                data = data_func()
                yield f"data: {json.dumps(data, ensure_ascii=False)}\n\n"
                consecutive_errors = 0
            except NotFoundError:
                # Vote deleted while the panel was open
                yield f"event: deleted\ndata: {json.dumps({'error': 'Vote not found'})}\n\n"
                break
            except (SQLAlchemyError, DatabaseError) as e:
                # Transient database errors are retried after the interval
                consecutive_errors += 1
                logger.warning(f"SSE database error (attempt {consecutive_errors}/{max_consecutive_errors}): {e}")

                if consecutive_errors >= max_consecutive_errors:
                    yield f"event: error\ndata: {json.dumps({'error': 'Service temporarily unavailable'})}\n\n"
                    break
            except Exception as e:
                logger.exception(f"SSE unexpected error: {e}")
                yield f"event: error\ndata: {json.dumps({'error': 'Internal error'})}\n\n"
                break

            await asyncio.sleep(interval)

    except asyncio.CancelledError:
        # Client disconnected
        pass


@router.get("/sse/votes")
async def sse_votes(request: Request):
    """
    SSE endpoint for the vote dashboard.

    Sends the full vote list with participation counts. Cached for 2 seconds
    and invalidated on every write, so all dashboards share one query.

    The client should reconnect automatically if disconnected.
    """
    def get_data():
        with get_db_context() as db:
            return list_vote_states_cached(db, TIMEZONE, cache=global_cache)

    return StreamingResponse(
        event_generator(request, get_data, interval=settings.SSE_USER_INTERVAL),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/sse/votes/{vote_id}/admin")
async def sse_vote_admin(request: Request, vote_id: str, admin: dict = Depends(verify_vote_admin_token)):
    """
    SSE endpoint for one vote's admin panel.

    Requires an admin cookie for this vote. Sends the full admin state
    (participation, reset requests, results, stored summary). The stream
    ends with a ``deleted`` event if the vote is deleted.
    """
    def get_data():
        with get_db_context() as db:
            return get_vote_state_cached(db, vote_id, TIMEZONE, cache=global_cache)

    return StreamingResponse(
        event_generator(request, get_data, interval=settings.SSE_ADMIN_INTERVAL),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
