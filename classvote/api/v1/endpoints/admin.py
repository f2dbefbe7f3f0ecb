"""Vote admin endpoints.

Every route requires an admin cookie scoped to the vote in the path.
"""
import logging
from fastapi import APIRouter, Depends, Request
from openai import OpenAI
from sqlalchemy.orm import Session

from classvote.api.deps import get_db, get_openai_client, http_error, verify_vote_admin_token, TIMEZONE
from classvote.schemas import (
    AdminVoteState,
    SuccessResponse,
    SummaryResponse,
    VoteDetail,
    VoteStatusUpdate,
)
from classvote.services.vote import delete_vote, update_vote_status
from classvote.services.reset_request import approve_vote_reset
from classvote.services.summary import summarize_vote
from classvote.services.state import get_public_vote, get_vote_state_cached
from classvote.core.cache import global_cache, invalidate_vote
from classvote.core.rate_limit import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_vote_admin_token)])


@router.get("", response_model=AdminVoteState)
async def get_admin_state_endpoint(vote_id: str, db: Session = Depends(get_db)):
    """
    Full admin panel state of a vote.

    Includes unvoted attendance numbers, pending reset requests, results
    (with individual answers unless the vote is anonymous) and the stored
    AI summary. Shares the 2-second cache with the admin SSE stream.
    """
    try:
        return get_vote_state_cached(db, vote_id, TIMEZONE, cache=global_cache)
    except ValueError as e:
        raise http_error(e)


@router.patch("/status", response_model=VoteDetail)
async def update_status_endpoint(
    vote_id: str,
    update: VoteStatusUpdate,
    db: Session = Depends(get_db)
):
    """
    Open or close a vote.

    Closing records the closing time; reopening clears it.

    Example:
        Request:
            PATCH /api/v1/votes/Xk2.../admin/status
            Cookie: admin_token=eyJhbGc...
            {"status": "closed"}

        Response (200):
            {"id": "Xk2...", "status": "closed", "status_label": "終了", ...}
    """
    try:
        update_vote_status(db, vote_id, update.status)
    except ValueError as e:
        raise http_error(e)

    logger.info(f"Cache invalidated: vote_list, vote_state (reason: status {update.status}, vote_id={vote_id})")
    invalidate_vote(global_cache, vote_id)

    return get_public_vote(db, vote_id, TIMEZONE)


@router.post("/reset-requests/{request_id}/approve", response_model=SuccessResponse)
async def approve_reset_endpoint(
    vote_id: str,
    request_id: str,
    db: Session = Depends(get_db)
):
    """
    Approve a student's reset request.

    The student's submission is deleted so they can vote again.
    """
    try:
        deleted = approve_vote_reset(db, request_id, vote_id=vote_id)
    except ValueError as e:
        raise http_error(e)

    logger.info(f"Cache invalidated: vote_list, vote_state (reason: reset approved, vote_id={vote_id})")
    invalidate_vote(global_cache, vote_id)

    return SuccessResponse(success=True, message=f"Reset approved ({deleted} submission(s) removed)")


@router.post("/summary", response_model=SummaryResponse)
@limiter.limit(RATE_LIMITS["summarize"])
def summarize_endpoint(
    request: Request,
    vote_id: str,
    force: bool = False,
    db: Session = Depends(get_db),
    openai_client: OpenAI = Depends(get_openai_client),
):
    """
    AI summary of a free-text vote.

    The summary is stored on the vote and returned as is on later calls;
    pass ``force=true`` to summarize the current answers again. Runs in the
    threadpool since the model call blocks for up to OPENAI_TIMEOUT seconds.

    Raises:
        HTTPException: 400 if the vote is not a free-text vote
        HTTPException: 404 if the vote does not exist
        HTTPException: 502 if the summarization service fails
    """
    try:
        summary = summarize_vote(db, vote_id, TIMEZONE, client=openai_client, force=force)
    except ValueError as e:
        raise http_error(e)

    if not summary["cached"]:
        invalidate_vote(global_cache, vote_id)

    return summary


@router.delete("", response_model=SuccessResponse)
async def delete_vote_endpoint(vote_id: str, db: Session = Depends(get_db)):
    """
    Delete a vote with all its submissions and reset requests.

    Cache invalidation:
        - Invalidates the vote list and this vote's admin state
        - Ensures SSE clients see deletion instantly
    """
    try:
        delete_vote(db, vote_id)
    except ValueError as e:
        raise http_error(e)

    logger.info(f"Cache invalidated: vote_list, vote_state (reason: vote deleted, vote_id={vote_id})")
    invalidate_vote(global_cache, vote_id)

    return SuccessResponse(success=True, message="Vote deleted")
