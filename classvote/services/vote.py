"""Vote business logic."""
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo
from sqlalchemy import func
from sqlalchemy.orm import Session

from classvote.core import messages
from classvote.core.constants import ANONYMOUS_CONTENT
from classvote.core.errors import NotFoundError
from classvote.core.logging_config import get_logger
from classvote.core.security import get_password_hash
from classvote.core.utils import generate_id, isoformat, utcnow
from classvote.db.models import ResetRequest, Submission, Vote
from classvote.schemas.vote import VoteCreate
from classvote.services.utils import write_transaction

logger = get_logger(__name__)


def serialize_vote(vote: Vote, tz: ZoneInfo, voted_count: int = 0) -> Dict:
    """Public representation of a vote. Never includes the admin code hash."""
    return {
        "id": vote.id,
        "title": vote.title,
        "vote_type": vote.vote_type,
        "vote_type_label": messages.vote_type_label(vote.vote_type),
        "visibility_setting": vote.visibility_setting,
        "visibility_label": messages.visibility_label(vote.visibility_setting),
        "status": vote.status,
        "status_label": messages.status_label(vote.status),
        "total_expected_voters": vote.total_expected_voters,
        "voted_count": voted_count,
        "options": [{"id": opt["id"], "text": opt["text"]} for opt in (vote.options or [])],
        "allow_empty_votes": bool(vote.allow_empty_votes),
        "allow_multiple_selections": bool(vote.allow_multiple_selections),
        "allow_adding_options": bool(vote.allow_adding_options),
        "min_characters": vote.min_characters or 0,
        "created_at": isoformat(vote.created_at, tz),
        "closed_at": isoformat(vote.closed_at, tz),
    }


def add_vote(db: Session, data: VoteCreate) -> Vote:
    """Create a new open vote. Input has already been validated by VoteCreate."""
    vote = Vote(
        id=generate_id(),
        title=data.title,
        admin_password_hash=get_password_hash(data.admin_password),
        total_expected_voters=data.total_expected_voters,
        vote_type=data.vote_type,
        options=[{"id": generate_id(), "text": text} for text in data.options],
        visibility_setting=data.visibility_setting,
        status="open",
        created_at=utcnow(),
        allow_empty_votes=data.allow_empty_votes,
        allow_multiple_selections=data.allow_multiple_selections,
        allow_adding_options=data.allow_adding_options,
        min_characters=data.min_characters,
    )

    with write_transaction(db, "add_vote"):
        db.add(vote)

    db.refresh(vote)
    logger.info("vote_created", vote_id=vote.id, vote_type=vote.vote_type)
    return vote


def get_vote(db: Session, vote_id: str) -> Optional[Vote]:
    return db.query(Vote).filter(Vote.id == vote_id).first()


def get_vote_or_404(db: Session, vote_id: str) -> Vote:
    vote = get_vote(db, vote_id)
    if not vote:
        raise NotFoundError("Vote not found")
    return vote


def list_votes(db: Session) -> List[Vote]:
    """All votes, newest first."""
    return db.query(Vote).order_by(Vote.created_at.desc()).all()


def get_voted_counts(db: Session) -> Dict[str, int]:
    """Distinct voters per vote (anonymous content rows excluded)."""
    rows = db.query(
        Submission.vote_id,
        func.count(func.distinct(Submission.voter_attendance_number))
    ).filter(
        Submission.voter_attendance_number != ANONYMOUS_CONTENT
    ).group_by(Submission.vote_id).all()
    return {vote_id: count for vote_id, count in rows}


def update_vote_status(db: Session, vote_id: str, status: str) -> Vote:
    """Open or close a vote. Closing stamps closed_at; reopening clears it."""
    vote = get_vote_or_404(db, vote_id)

    with write_transaction(db, "update_vote_status"):
        vote.status = status
        vote.closed_at = utcnow() if status == "closed" else None

    logger.info("vote_status_updated", vote_id=vote_id, status=status)
    return vote


def delete_vote(db: Session, vote_id: str) -> None:
    """Delete a vote with all of its submissions and reset requests in one transaction."""
    vote = get_vote_or_404(db, vote_id)

    with write_transaction(db, "delete_vote"):
        deleted_submissions = db.query(Submission).filter(
            Submission.vote_id == vote_id
        ).delete(synchronize_session=False)
        deleted_requests = db.query(ResetRequest).filter(
            ResetRequest.vote_id == vote_id
        ).delete(synchronize_session=False)
        db.delete(vote)

    logger.info(
        "vote_deleted",
        vote_id=vote_id,
        submissions=deleted_submissions,
        reset_requests=deleted_requests,
    )
