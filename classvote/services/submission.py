"""Submission business logic."""
from typing import Iterable, List, Optional, Union
from sqlalchemy.orm import Session

from classvote.core import submission_value as sv
from classvote.core.constants import ANONYMOUS_CONTENT, RESERVED_ANSWERS, YES_NO_CHOICES
from classvote.core.errors import FieldValidationError
from classvote.core.logging_config import get_logger
from classvote.core.sanitization import sanitize_free_text, sanitize_option_text
from classvote.core.utils import utcnow
from classvote.db.models import Submission, Vote
from classvote.services.utils import write_transaction
from classvote.services.vote import get_vote, get_vote_or_404

logger = get_logger(__name__)

RawValue = Optional[Union[str, List[str]]]


def _build_free_text(vote: Vote, value: RawValue) -> sv.SubmissionValue:
    if isinstance(value, list):
        raise FieldValidationError("value", "Answer must be text")

    try:
        text = sanitize_free_text(value or "")
    except ValueError as e:
        raise FieldValidationError("value", str(e))

    if not text:
        if vote.allow_empty_votes:
            return sv.EMPTY
        raise FieldValidationError("value", "Please enter an answer")

    if vote.min_characters and len(text) < vote.min_characters:
        raise FieldValidationError(
            "value", f"Answer must be at least {vote.min_characters} characters"
        )
    if text in RESERVED_ANSWERS:
        raise FieldValidationError("value", "This answer cannot be used")
    return sv.FreeText(text)


def _build_yes_no(vote: Vote, value: RawValue) -> sv.SubmissionValue:
    if value in (None, ""):
        if vote.allow_empty_votes:
            return sv.EMPTY
        raise FieldValidationError("value", "Please choose yes or no")

    if value not in YES_NO_CHOICES:
        raise FieldValidationError("value", "Answer must be 'yes' or 'no'")
    return sv.SingleChoice(value)


def _build_multiple_choice(
    vote: Vote, value: RawValue, custom_option: Optional[str]
) -> sv.SubmissionValue:
    if value is None or value == "":
        selected: List[str] = []
    elif isinstance(value, str):
        selected = [value]
    else:
        selected = list(value)

    option_ids = {opt["id"] for opt in (vote.options or [])}
    unknown = [option_id for option_id in selected if option_id not in option_ids]
    if unknown:
        raise FieldValidationError("value", "Unknown option selected")

    choices: List[sv.Choice] = list(dict.fromkeys(selected))

    if custom_option is not None and custom_option.strip():
        if not vote.allow_adding_options:
            raise FieldValidationError("custom_option", "This vote does not accept new options")
        try:
            text = sanitize_option_text(custom_option)
        except ValueError as e:
            raise FieldValidationError("custom_option", str(e))
        if text:
            choices.append(sv.CustomOption(text))

    if not choices:
        if vote.allow_empty_votes:
            return sv.EMPTY
        raise FieldValidationError("value", "Please choose an option")

    if len(choices) > 1:
        if not vote.allow_multiple_selections:
            raise FieldValidationError("value", "Only one option may be selected")
        return sv.MultiChoice(tuple(choices))
    return sv.SingleChoice(choices[0])


def build_submission_value(
    vote: Vote, value: RawValue, custom_option: Optional[str] = None
) -> sv.SubmissionValue:
    """
    Turn a submission form payload into a submission value for ``vote``.

    Applies the vote's own rules (empty votes, minimum length, single vs.
    multiple selection, voter-added options).

    Raises:
        FieldValidationError: naming the offending field
    """
    if vote.vote_type == "free_text":
        return _build_free_text(vote, value)
    if vote.vote_type == "yes_no":
        return _build_yes_no(vote, value)
    return _build_multiple_choice(vote, value, custom_option)


def get_submissions(db: Session, vote_id: str) -> List[Submission]:
    """All submission rows of a vote, oldest first (stubs and anonymous content included)."""
    return db.query(Submission).filter(
        Submission.vote_id == vote_id
    ).order_by(Submission.submitted_at.asc(), Submission.id.asc()).all()


def get_voter_submission(db: Session, vote_id: str, attendance_number: str) -> Optional[Submission]:
    """The voter's submission; if several raced in, the latest one."""
    return db.query(Submission).filter(
        Submission.vote_id == vote_id,
        Submission.voter_attendance_number == attendance_number,
    ).order_by(Submission.submitted_at.desc(), Submission.id.desc()).first()


def has_voted(db: Session, vote_id: str, attendance_number: str) -> bool:
    return get_voter_submission(db, vote_id, attendance_number) is not None


def voted_attendance_numbers(submissions: Iterable[Submission]) -> set:
    return {
        s.voter_attendance_number for s in submissions
        if s.voter_attendance_number != ANONYMOUS_CONTENT
    }


def unvoted_attendance_numbers(total_expected_voters: int, submissions: Iterable[Submission]) -> List[str]:
    """Attendance numbers in 1..N with no submission, ascending."""
    voted = voted_attendance_numbers(submissions)
    return [
        str(number) for number in range(1, total_expected_voters + 1)
        if str(number) not in voted
    ]


def get_unvoted_attendance_numbers(db: Session, vote_id: str) -> List[str]:
    """Unvoted attendance numbers for a vote; empty if the vote does not exist."""
    vote = get_vote(db, vote_id)
    if not vote:
        return []
    return unvoted_attendance_numbers(vote.total_expected_voters, get_submissions(db, vote_id))


def add_submission(
    db: Session,
    vote_id: str,
    attendance_number: int,
    value: RawValue,
    custom_option: Optional[str] = None,
) -> Submission:
    """
    Record a student's answer.

    Anonymous free-text votes are written as two rows in one transaction: a
    stub keyed by the attendance number (blocks re-submission) and the answer
    keyed by the anonymous sentinel. Nothing but the shared timestamp ties
    the two together. Every other vote gets a single row.

    The one-submission-per-voter rule is a read before the write, not a
    database constraint; two simultaneous requests for the same voter can
    both succeed.

    Returns:
        The created submission (the stub for anonymous free-text votes)

    Raises:
        NotFoundError: vote does not exist
        ValueError: vote closed, attendance number out of range, or already voted
        FieldValidationError: answer does not fit the vote
    """
    vote = get_vote_or_404(db, vote_id)

    if vote.status != "open":
        raise ValueError("This vote is closed")

    if not 1 <= attendance_number <= vote.total_expected_voters:
        raise FieldValidationError(
            "attendance_number",
            f"Attendance number must be between 1 and {vote.total_expected_voters}",
        )

    voter = str(attendance_number)
    if has_voted(db, vote_id, voter):
        raise ValueError("You have already voted in this vote")

    value_obj = build_submission_value(vote, value, custom_option)
    submitted_at = utcnow()

    if vote.is_anonymous_free_text:
        stub = Submission(
            vote_id=vote_id,
            voter_attendance_number=voter,
            submission_value=sv.encode(sv.VOTED_STUB, vote.vote_type),
            submitted_at=submitted_at,
        )
        content = Submission(
            vote_id=vote_id,
            voter_attendance_number=ANONYMOUS_CONTENT,
            submission_value=sv.encode(value_obj, vote.vote_type),
            submitted_at=submitted_at,
        )
        with write_transaction(db, "add_anonymous_submission"):
            db.add_all([stub, content])
        db.refresh(stub)
        logger.info("anonymous_submission_added", vote_id=vote_id)
        return stub

    submission = Submission(
        vote_id=vote_id,
        voter_attendance_number=voter,
        submission_value=sv.encode(value_obj, vote.vote_type),
        submitted_at=submitted_at,
    )
    with write_transaction(db, "add_submission"):
        db.add(submission)
    db.refresh(submission)
    logger.info("submission_added", vote_id=vote_id, attendance_number=voter)
    return submission
