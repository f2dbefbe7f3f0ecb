"""Vote endpoints (public)."""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from classvote.api.deps import get_db, http_error, TIMEZONE
from classvote.schemas import VoteCreate, VoteCreateResponse, VoteDetail, PublicVoteResults
from classvote.services.vote import add_vote, serialize_vote
from classvote.services.state import get_public_results, get_public_vote, list_vote_states_cached
from classvote.core.rate_limit import limiter, RATE_LIMITS
from classvote.core.cache import global_cache, invalidate_vote

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[VoteDetail])
async def list_votes_endpoint(db: Session = Depends(get_db)):
    """
    List all votes for the dashboard, newest first.

    Each card carries the vote settings and how many students have voted.
    Shares the 2-second cache with the dashboard SSE stream.
    """
    return list_vote_states_cached(db, TIMEZONE, cache=global_cache)


@router.post("", response_model=VoteCreateResponse)
@limiter.limit(RATE_LIMITS["create_vote"])
async def create_vote_endpoint(
    request: Request,
    vote: VoteCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new vote.

    Anyone can create a vote. The 4-digit admin code chosen here is the
    only credential for the vote's admin panel; it is stored hashed.
    Options only apply to multiple-choice votes and blank ones are dropped.

    Args:
        vote: VoteCreate schema
        db: Database session (injected)

    Returns:
        VoteCreateResponse with the new vote id and its public view

    Raises:
        HTTPException: 422 if the title, code or options are invalid
        HTTPException: 429 if rate limit exceeded

    Example:
        Request:
            POST /api/v1/votes
            {
                "title": "文化祭の出し物",
                "admin_password": "1234",
                "total_expected_voters": 38,
                "vote_type": "multiple_choice",
                "visibility_setting": "admin_only",
                "options": ["劇", "屋台", ""]
            }

        Response (200):
            {
                "vote_id": "Xk2bP0qLr7...",
                "vote": {"id": "Xk2bP0qLr7...", "title": "文化祭の出し物", ...}
            }
    """
    created = add_vote(db, vote)

    logger.info(f"Cache invalidated: vote_list (reason: vote created, vote_id={created.id})")
    invalidate_vote(global_cache, created.id)

    return {"vote_id": created.id, "vote": serialize_vote(created, TIMEZONE)}


@router.get("/{vote_id}", response_model=VoteDetail)
async def get_vote_endpoint(vote_id: str, db: Session = Depends(get_db)):
    """Public view of one vote, used by the submission form."""
    try:
        return get_public_vote(db, vote_id, TIMEZONE)
    except ValueError as e:
        raise http_error(e)


@router.get("/{vote_id}/results", response_model=PublicVoteResults)
async def get_vote_results_endpoint(vote_id: str, db: Session = Depends(get_db)):
    """
    Public results of a vote.

    Individual answers are included only for votes whose visibility is
    "everyone". Free-text answers are otherwise hidden entirely, counts
    included.
    """
    try:
        return get_public_results(db, vote_id, TIMEZONE)
    except ValueError as e:
        raise http_error(e)
