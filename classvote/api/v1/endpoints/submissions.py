"""Submission endpoints (students)."""
import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from classvote.api.deps import get_db, http_error, TIMEZONE
from classvote.schemas import (
    SubmissionCreate,
    SubmissionResponse,
    VoterStatus,
    ResetRequestCreate,
    ResetRequestResponse,
)
from classvote.services.vote import get_vote_or_404
from classvote.services.submission import add_submission, has_voted
from classvote.services.reset_request import has_pending_reset_request, request_vote_reset
from classvote.services.state import serialize_reset_request
from classvote.core.rate_limit import limiter, RATE_LIMITS
from classvote.core.cache import global_cache, invalidate_vote
from classvote.core.utils import isoformat

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{vote_id}/submissions", response_model=SubmissionResponse)
@limiter.limit(RATE_LIMITS["submit"])
async def submit_endpoint(
    request: Request,
    vote_id: str,
    submission: SubmissionCreate,
    db: Session = Depends(get_db)
):
    """
    Submit an answer to a vote.

    Students identify themselves by attendance number only. Each number can
    answer once; a second submission is rejected until the admin approves a
    reset request.

    Args:
        vote_id: Vote to answer
        submission: SubmissionCreate schema
        db: Database session (injected)

    Returns:
        SubmissionResponse for the stored row. For anonymous free-text votes
        this is the voted marker, not the answer.

    Raises:
        HTTPException: 400 if the vote is closed or the number already voted
        HTTPException: 404 if the vote does not exist
        HTTPException: 422 if the answer does not fit the vote
        HTTPException: 429 if rate limit exceeded

    Example:
        Request:
            POST /api/v1/votes/Xk2.../submissions
            {"attendance_number": 12, "value": "yes"}

        Response (200):
            {
                "id": "b7Qm...",
                "vote_id": "Xk2...",
                "voter_attendance_number": "12",
                "submitted_at": "2026-10-19T09:15:02+09:00"
            }

        Response (400):
            {"detail": "You have already voted in this vote"}
    """
    try:
        created = add_submission(
            db,
            vote_id,
            submission.attendance_number,
            submission.value,
            custom_option=submission.custom_option,
        )
    except ValueError as e:
        raise http_error(e)

    logger.info(f"Cache invalidated: vote_list, vote_state (reason: submission, vote_id={vote_id})")
    invalidate_vote(global_cache, vote_id)

    return {
        "id": created.id,
        "vote_id": created.vote_id,
        "voter_attendance_number": created.voter_attendance_number,
        "submitted_at": isoformat(created.submitted_at, TIMEZONE),
    }


@router.get("/{vote_id}/voters/{attendance_number}", response_model=VoterStatus)
async def voter_status_endpoint(
    vote_id: str,
    attendance_number: int,
    db: Session = Depends(get_db)
):
    """Whether a student has already voted and is waiting for a reset."""
    try:
        get_vote_or_404(db, vote_id)
    except ValueError as e:
        raise http_error(e)

    voter = str(attendance_number)
    return {
        "attendance_number": voter,
        "has_voted": has_voted(db, vote_id, voter),
        "reset_requested": has_pending_reset_request(db, vote_id, voter),
    }


@router.post("/{vote_id}/reset-requests", response_model=ResetRequestResponse)
@limiter.limit(RATE_LIMITS["reset_request"])
async def reset_request_endpoint(
    request: Request,
    vote_id: str,
    reset: ResetRequestCreate,
    db: Session = Depends(get_db)
):
    """
    Ask the vote admin to clear a submission so the student can vote again.

    Asking twice returns the pending request instead of creating another.

    Raises:
        HTTPException: 400 if the student has not voted
        HTTPException: 404 if the vote does not exist
    """
    try:
        created = request_vote_reset(db, vote_id, reset.attendance_number)
    except ValueError as e:
        raise http_error(e)

    invalidate_vote(global_cache, vote_id)
    return serialize_reset_request(created, TIMEZONE)
