"""Submission and reset-request schemas."""
from typing import List, Optional, Union
from pydantic import BaseModel, Field, field_validator

from classvote.core.constants import MAX_FREE_TEXT_LENGTH, MAX_OPTION_LENGTH, MAX_OPTIONS


class SubmissionCreate(BaseModel):
    """
    A student's answer.

    ``value`` is "yes"/"no" for yes/no votes, the answer text for free-text
    votes, and one option id or a list of option ids for multiple choice.
    ``custom_option`` carries an option typed by the voter.
    """
    attendance_number: int = Field(..., ge=1)
    value: Optional[Union[str, List[str]]] = None
    custom_option: Optional[str] = Field(None, max_length=MAX_OPTION_LENGTH)

    @field_validator('value')
    @classmethod
    def check_value_size(cls, v):
        if isinstance(v, str) and len(v) > MAX_FREE_TEXT_LENGTH * 2:
            raise ValueError("Answer is too long")
        if isinstance(v, list) and len(v) > MAX_OPTIONS:
            raise ValueError("Too many selections")
        return v


class SubmissionResponse(BaseModel):
    id: str
    vote_id: str
    voter_attendance_number: str
    submitted_at: str


class VoterStatus(BaseModel):
    attendance_number: str
    has_voted: bool
    reset_requested: bool


class ResetRequestCreate(BaseModel):
    attendance_number: int = Field(..., ge=1)


class ResetRequestResponse(BaseModel):
    id: str
    vote_id: str
    voter_attendance_number: str
    requested_at: str
