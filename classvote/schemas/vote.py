"""Vote schemas."""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from classvote.core.constants import (
    DEFAULT_EXPECTED_VOTERS,
    MAX_EXPECTED_VOTERS,
    MAX_FREE_TEXT_LENGTH,
    MAX_OPTIONS,
)
from classvote.core.sanitization import (
    sanitize_option_text,
    sanitize_vote_title,
    validate_admin_code,
)

VoteType = Literal["free_text", "multiple_choice", "yes_no"]
VisibilitySetting = Literal["everyone", "admin_only", "anonymous"]
VoteStatus = Literal["open", "closed"]


class VoteCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    admin_password: str = Field(..., min_length=4, max_length=4)
    total_expected_voters: int = Field(DEFAULT_EXPECTED_VOTERS, ge=1, le=MAX_EXPECTED_VOTERS)
    vote_type: VoteType = "yes_no"
    visibility_setting: VisibilitySetting = "admin_only"
    allow_empty_votes: bool = False
    options: List[str] = Field(default_factory=list, max_length=MAX_OPTIONS)
    allow_multiple_selections: bool = False
    allow_adding_options: bool = False
    min_characters: int = Field(0, ge=0, le=MAX_FREE_TEXT_LENGTH)

    @field_validator('title')
    @classmethod
    def sanitize_title_field(cls, v: str) -> str:
        return sanitize_vote_title(v)

    @field_validator('admin_password')
    @classmethod
    def validate_admin_password_field(cls, v: str) -> str:
        return validate_admin_code(v)

    @field_validator('options')
    @classmethod
    def sanitize_options_field(cls, v: List[str]) -> List[str]:
        """Drop blank options; the form always sends two empty rows."""
        cleaned = [sanitize_option_text(text) for text in v]
        return [text for text in cleaned if text]

    @model_validator(mode='after')
    def check_type_specific_fields(self) -> 'VoteCreate':
        """
        Multiple-choice votes need at least one option, or two when voters
        cannot add their own. Settings that do not apply to the vote type are
        reset so they are never stored.
        """
        if self.vote_type == "multiple_choice":
            if not self.options:
                raise ValueError("A multiple-choice vote needs at least one option")
            if not self.allow_adding_options and len(self.options) < 2:
                raise ValueError(
                    "A multiple-choice vote needs at least two options "
                    "unless voters may add their own"
                )
        else:
            self.options = []
            self.allow_multiple_selections = False
            self.allow_adding_options = False

        if self.vote_type != "free_text":
            self.min_characters = 0

        return self


class VoteStatusUpdate(BaseModel):
    status: VoteStatus


class VoteOption(BaseModel):
    id: str
    text: str


class VoteDetail(BaseModel):
    """Public view of a vote (vote card, submission form, results header)."""
    id: str
    title: str
    vote_type: VoteType
    vote_type_label: str
    visibility_setting: VisibilitySetting
    visibility_label: str
    status: VoteStatus
    status_label: str
    total_expected_voters: int
    voted_count: int
    options: List[VoteOption]
    allow_empty_votes: bool
    allow_multiple_selections: bool
    allow_adding_options: bool
    min_characters: int
    created_at: str
    closed_at: Optional[str] = None


class VoteCreateResponse(BaseModel):
    vote_id: str
    vote: VoteDetail
