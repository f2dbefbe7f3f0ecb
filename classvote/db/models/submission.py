"""Submission model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text

from classvote.db.base import Base
from classvote.core.utils import generate_id


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(32), primary_key=True, default=generate_id)
    vote_id = Column(String(32), ForeignKey("votes.id"), nullable=False)
    # Attendance number as text, or the anonymous-content sentinel
    voter_attendance_number = Column(String(32), nullable=False)
    # Encoded by classvote.core.submission_value; NULL is an empty vote
    submission_value = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # No unique constraint on (vote_id, voter_attendance_number): one live
    # submission per voter is checked by the service layer only.
    __table_args__ = (
        Index("idx_submissions_vote", "vote_id"),
        Index("idx_submissions_vote_voter", "vote_id", "voter_attendance_number"),
    )
