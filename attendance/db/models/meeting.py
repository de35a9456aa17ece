"""Meeting model."""
import uuid
from datetime import datetime, timezone as tz

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from attendance.core.constants import MAX_LOCATION_LENGTH, MAX_TITLE_LENGTH
from attendance.db.base import Base


class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    creator_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    meeting_date = Column(Date, nullable=False)
    title = Column(String(MAX_TITLE_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(MAX_LOCATION_LENGTH), nullable=True)
    meeting_type = Column(Integer, nullable=False, default=0)
    is_recurring = Column(Boolean, nullable=False, default=False)
    # Series root; the earliest surviving instance takes over when the root is deleted
    parent_meeting_id = Column(String(36), ForeignKey("meetings.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    # Relationships
    participants = relationship("Participant", back_populates="meeting", cascade="all, delete-orphan")
    codes = relationship("MeetingCode", back_populates="meeting", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_meetings_course", "course_id"),
        Index("idx_meetings_parent_date", "parent_meeting_id", "meeting_date"),
    )
