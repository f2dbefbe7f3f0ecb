"""Database models."""
from classvote.db.models.vote import Vote
from classvote.db.models.submission import Submission
from classvote.db.models.reset_request import ResetRequest

__all__ = ["Vote", "Submission", "ResetRequest"]
