"""ResetRequest model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, DateTime, ForeignKey, Index, String

from classvote.db.base import Base
from classvote.core.utils import generate_id


class ResetRequest(Base):
    __tablename__ = "reset_requests"

    id = Column(String(32), primary_key=True, default=generate_id)
    vote_id = Column(String(32), ForeignKey("votes.id"), nullable=False)
    voter_attendance_number = Column(String(32), nullable=False)
    requested_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    __table_args__ = (Index("idx_reset_requests_vote", "vote_id"),)
