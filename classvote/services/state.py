"""Vote snapshots for the dashboard, admin panel and SSE streams.

A snapshot is the complete current state; subscribers replace what they had
with each new one instead of merging changes.
"""
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo
from sqlalchemy.orm import Session

from classvote.core.cache import (
    TTLCache,
    VOTE_LIST_KEY,
    get_or_fetch,
    global_cache,
    vote_state_key,
)
from classvote.core.utils import isoformat
from classvote.services.reset_request import get_reset_requests
from classvote.services.results import VIEWER_ADMIN, VIEWER_PUBLIC, aggregate_results
from classvote.services.submission import (
    get_submissions,
    unvoted_attendance_numbers,
    voted_attendance_numbers,
)
from classvote.services.summary import cached_summary
from classvote.services.vote import get_vote_or_404, get_voted_counts, list_votes, serialize_vote


def serialize_reset_request(request, tz: ZoneInfo) -> Dict:
    return {
        "id": request.id,
        "vote_id": request.vote_id,
        "voter_attendance_number": request.voter_attendance_number,
        "requested_at": isoformat(request.requested_at, tz),
    }


def list_vote_states(db: Session, tz: ZoneInfo) -> List[Dict]:
    """Dashboard vote cards, newest first, with participation counts."""
    voted_counts = get_voted_counts(db)
    return [
        serialize_vote(vote, tz, voted_count=voted_counts.get(vote.id, 0))
        for vote in list_votes(db)
    ]


def get_public_vote(db: Session, vote_id: str, tz: ZoneInfo) -> Dict:
    """Vote card shown above the submission form."""
    vote = get_vote_or_404(db, vote_id)
    voted_count = len(voted_attendance_numbers(get_submissions(db, vote_id)))
    return serialize_vote(vote, tz, voted_count=voted_count)


def get_public_results(db: Session, vote_id: str, tz: ZoneInfo) -> Dict:
    """Read-only results page."""
    vote = get_vote_or_404(db, vote_id)
    submissions = get_submissions(db, vote_id)
    voted_count = len(voted_attendance_numbers(submissions))
    return {
        "vote": serialize_vote(vote, tz, voted_count=voted_count),
        "results": aggregate_results(vote, submissions, viewer=VIEWER_PUBLIC),
    }


def get_vote_state(db: Session, vote_id: str, tz: ZoneInfo) -> Dict:
    """
    Full admin panel state of one vote.

    Participation, pending reset requests, results with individual rows
    (when visibility allows) and the stored AI summary, all computed from a
    single read of the vote's submissions.
    """
    vote = get_vote_or_404(db, vote_id)
    submissions = get_submissions(db, vote_id)
    voted_count = len(voted_attendance_numbers(submissions))

    return {
        "vote": serialize_vote(vote, tz, voted_count=voted_count),
        "unvoted_attendance_numbers": unvoted_attendance_numbers(vote.total_expected_voters, submissions),
        "reset_requests": [serialize_reset_request(r, tz) for r in get_reset_requests(db, vote_id)],
        "results": aggregate_results(vote, submissions, viewer=VIEWER_ADMIN),
        "summary": cached_summary(vote, tz),
    }


def list_vote_states_cached(
    db: Session, tz: ZoneInfo, cache: Optional[TTLCache] = None, ttl_seconds: float = 2.0
) -> List[Dict]:
    cache = cache if cache is not None else global_cache
    return get_or_fetch(cache, VOTE_LIST_KEY, lambda: list_vote_states(db, tz), ttl_seconds=ttl_seconds)


def get_vote_state_cached(
    db: Session, vote_id: str, tz: ZoneInfo, cache: Optional[TTLCache] = None, ttl_seconds: float = 2.0
) -> Dict:
    cache = cache if cache is not None else global_cache
    return get_or_fetch(
        cache, vote_state_key(vote_id), lambda: get_vote_state(db, vote_id, tz), ttl_seconds=ttl_seconds
    )
