"""Pydantic schemas for request/response validation."""
from classvote.schemas.auth import AdminLoginRequest
from classvote.schemas.vote import (
    VoteCreate,
    VoteCreateResponse,
    VoteDetail,
    VoteOption,
    VoteStatusUpdate,
)
from classvote.schemas.submission import (
    SubmissionCreate,
    SubmissionResponse,
    VoterStatus,
    ResetRequestCreate,
    ResetRequestResponse,
)
from classvote.schemas.results import (
    AdminVoteState,
    IndividualSubmission,
    PublicVoteResults,
    ResultEntry,
    SummaryResponse,
    SummaryResult,
    VoteResults,
)
from classvote.schemas.common import SuccessResponse, ErrorResponse, ErrorDetail

__all__ = [
    "AdminLoginRequest",
    "VoteCreate",
    "VoteCreateResponse",
    "VoteDetail",
    "VoteOption",
    "VoteStatusUpdate",
    "SubmissionCreate",
    "SubmissionResponse",
    "VoterStatus",
    "ResetRequestCreate",
    "ResetRequestResponse",
    "AdminVoteState",
    "IndividualSubmission",
    "PublicVoteResults",
    "ResultEntry",
    "SummaryResponse",
    "SummaryResult",
    "VoteResults",
    "SuccessResponse",
    "ErrorResponse",
    "ErrorDetail",
]
