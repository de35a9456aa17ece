"""MeetingCode model."""
from datetime import datetime, timezone as tz

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from attendance.db.base import Base


class MeetingCode(Base):
    __tablename__ = "meeting_codes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    meeting_id = Column(String(36), ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False)
    code = Column(String(16), nullable=False)
    qr_url = Column(String(1024), nullable=False)
    valid_start = Column(DateTime(timezone=True), nullable=False)
    valid_end = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    meeting = relationship("Meeting", back_populates="codes")

    __table_args__ = (
        Index("idx_meeting_codes_meeting_code", "meeting_id", "code"),
    )
