"""Results, summary and admin panel schemas."""
from typing import List, Optional
from pydantic import BaseModel, Field

from classvote.core.constants import MAX_SUMMARY_THEMES
from classvote.schemas.submission import ResetRequestResponse
from classvote.schemas.vote import VoteDetail


class ResultEntry(BaseModel):
    name: str
    count: int


class IndividualSubmission(BaseModel):
    attendance_number: str
    display_value: str


class VoteResults(BaseModel):
    vote_type: str
    total_submissions: int
    series: List[ResultEntry]
    individual_visible: bool
    individual: List[IndividualSubmission] = []


class SummaryResult(BaseModel):
    """Structured output requested from the generative model."""
    summary: str = Field(..., description="All opinions summarized neutrally")
    themes: List[str] = Field(
        default_factory=list,
        description=f"Main themes found in the opinions (at most {MAX_SUMMARY_THEMES})",
    )


class SummaryResponse(BaseModel):
    summary: str
    themes: List[str]
    summarized_at: Optional[str] = None
    cached: bool = False


class AdminVoteState(BaseModel):
    """Everything the admin panel renders for one vote."""
    vote: VoteDetail
    unvoted_attendance_numbers: List[str]
    reset_requests: List[ResetRequestResponse]
    results: VoteResults
    summary: Optional[SummaryResponse] = None


class PublicVoteResults(BaseModel):
    vote: VoteDetail
    results: VoteResults
