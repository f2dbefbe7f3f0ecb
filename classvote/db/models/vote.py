"""Vote model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text

from classvote.db.base import Base
from classvote.core.utils import generate_id


class Vote(Base):
    __tablename__ = "votes"

    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String(100), nullable=False)
    admin_password_hash = Column(String(255), nullable=False)
    total_expected_voters = Column(Integer, nullable=False)
    vote_type = Column(String(20), nullable=False)
    # [{"id": "...", "text": "..."}], fixed at creation
    options = Column(JSON, nullable=False, default=list)
    visibility_setting = Column(String(20), nullable=False)
    status = Column(String(10), nullable=False, default="open")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    closed_at = Column(DateTime(timezone=True), nullable=True)

    allow_empty_votes = Column(Boolean, nullable=False, default=False)
    allow_multiple_selections = Column(Boolean, nullable=False, default=False)
    allow_adding_options = Column(Boolean, nullable=False, default=False)
    min_characters = Column(Integer, nullable=False, default=0)

    # Cached AI summary of free-text answers
    ai_summary = Column(Text, nullable=True)
    ai_themes = Column(JSON, nullable=True)
    ai_summarized_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_anonymous_free_text(self) -> bool:
        return self.vote_type == "free_text" and self.visibility_setting == "anonymous"
