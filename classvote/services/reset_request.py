"""Reset request business logic."""
from typing import List, Optional
from sqlalchemy.orm import Session

from classvote.core.constants import ANONYMOUS_VOTED_STUB
from classvote.core.errors import NotFoundError
from classvote.core.logging_config import get_logger
from classvote.core.utils import utcnow
from classvote.db.models import ResetRequest, Submission
from classvote.services.submission import has_voted
from classvote.services.utils import write_transaction
from classvote.services.vote import get_vote, get_vote_or_404

logger = get_logger(__name__)


def get_pending_reset_request(db: Session, vote_id: str, attendance_number: str) -> Optional[ResetRequest]:
    return db.query(ResetRequest).filter(
        ResetRequest.vote_id == vote_id,
        ResetRequest.voter_attendance_number == attendance_number,
    ).first()


def has_pending_reset_request(db: Session, vote_id: str, attendance_number: str) -> bool:
    return get_pending_reset_request(db, vote_id, attendance_number) is not None


def get_reset_requests(db: Session, vote_id: str) -> List[ResetRequest]:
    """Pending reset requests for a vote, newest first."""
    return db.query(ResetRequest).filter(
        ResetRequest.vote_id == vote_id
    ).order_by(ResetRequest.requested_at.desc()).all()


def request_vote_reset(db: Session, vote_id: str, attendance_number: int) -> ResetRequest:
    """
    Ask the vote admin to clear a voter's submission.

    Only voters who have voted can ask. A second request from the same voter
    is not an error; the pending request is returned unchanged.
    """
    get_vote_or_404(db, vote_id)
    voter = str(attendance_number)

    existing = get_pending_reset_request(db, vote_id, voter)
    if existing:
        return existing

    if not has_voted(db, vote_id, voter):
        raise ValueError("There is no submission to reset")

    request = ResetRequest(
        vote_id=vote_id,
        voter_attendance_number=voter,
        requested_at=utcnow(),
    )
    with write_transaction(db, "request_vote_reset"):
        db.add(request)
    db.refresh(request)

    logger.info("reset_requested", vote_id=vote_id, attendance_number=voter)
    return request


def approve_vote_reset(db: Session, request_id: str, vote_id: Optional[str] = None) -> int:
    """
    Approve a reset request.

    Deletes the request together with every submission the voter has on the
    vote, in one transaction. For anonymous free-text votes only the voted
    stubs are deleted: the answer rows carry no attendance number, so they
    stay and keep counting. If the
    voter has no submission left the request alone is removed.

    Args:
        request_id: Reset request to approve
        vote_id: When given, the request must belong to this vote

    Returns:
        Number of submission rows deleted
    """
    request = db.query(ResetRequest).filter(ResetRequest.id == request_id).first()
    if not request or (vote_id is not None and request.vote_id != vote_id):
        raise NotFoundError("Reset request not found")

    request_vote_id = request.vote_id
    voter = request.voter_attendance_number
    vote = get_vote(db, request_vote_id)

    query = db.query(Submission).filter(
        Submission.vote_id == request_vote_id,
        Submission.voter_attendance_number == voter,
    )
    if vote is not None and vote.is_anonymous_free_text:
        query = query.filter(Submission.submission_value == ANONYMOUS_VOTED_STUB)

    with write_transaction(db, "approve_vote_reset"):
        deleted = query.delete(synchronize_session=False)
        db.delete(request)

    logger.info(
        "reset_approved",
        vote_id=request_vote_id,
        attendance_number=voter,
        deleted_submissions=deleted,
    )
    return deleted
