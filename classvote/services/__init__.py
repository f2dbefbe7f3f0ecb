from .vote import (
    add_vote,
    delete_vote,
    get_vote,
    list_votes,
    serialize_vote,
    update_vote_status,
)
from .submission import (
    add_submission,
    build_submission_value,
    get_submissions,
    get_unvoted_attendance_numbers,
    get_voter_submission,
    has_voted,
)
from .reset_request import (
    approve_vote_reset,
    get_reset_requests,
    has_pending_reset_request,
    request_vote_reset,
)
from .results import aggregate_results, count_results
from .summary import summarize_results, summarize_vote
from .state import get_public_results, get_public_vote, get_vote_state, list_vote_states

__all__ = [
    # votes
    "add_vote",
    "delete_vote",
    "get_vote",
    "list_votes",
    "serialize_vote",
    "update_vote_status",
    # submissions
    "add_submission",
    "build_submission_value",
    "get_submissions",
    "get_unvoted_attendance_numbers",
    "get_voter_submission",
    "has_voted",
    # reset requests
    "approve_vote_reset",
    "get_reset_requests",
    "has_pending_reset_request",
    "request_vote_reset",
    # results
    "aggregate_results",
    "count_results",
    "summarize_results",
    "summarize_vote",
    # snapshots
    "get_public_results",
    "get_public_vote",
    "get_vote_state",
    "list_vote_states",
]
