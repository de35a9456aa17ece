"""Meeting persistence."""
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from attendance.db.models import Meeting, Participant


class MeetingRepository:
    """Meeting queries and writes. Writes are flushed, never committed."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, meeting_id: str) -> Optional[Meeting]:
        return self.db.query(Meeting).filter(Meeting.id == meeting_id).first()

    def get_many(self, meeting_ids: List[str]) -> Dict[str, Meeting]:
        if not meeting_ids:
            return {}
        meetings = self.db.query(Meeting).filter(Meeting.id.in_(set(meeting_ids))).all()
        return {meeting.id: meeting for meeting in meetings}

    def add(self, meeting: Meeting) -> Meeting:
        self.db.add(meeting)
        self.db.flush()
        return meeting

    def apply_changes(self, meeting: Meeting, changes: Dict[str, Any]) -> Meeting:
        for name, value in changes.items():
            setattr(meeting, name, value)
        self.db.flush()
        return meeting

    def delete(self, meetings: List[Meeting]) -> None:
        # Session.delete cascades to participants and codes through the ORM
        for meeting in meetings:
            self.db.delete(meeting)
        self.db.flush()

    def list_for_course(self, course_id: str) -> List[Meeting]:
        return (
            self.db.query(Meeting)
            .filter(Meeting.course_id == course_id)
            .order_by(Meeting.start_time)
            .all()
        )

    def list_for_member(self, course_id: str, user_id: str) -> List[Meeting]:
        """Meetings of a course the user created or is listed in."""
        participates = (
            self.db.query(Participant.meeting_id)
            .filter(Participant.user_id == user_id)
        )
        return (
            self.db.query(Meeting)
            .filter(
                Meeting.course_id == course_id,
                or_(Meeting.creator_id == user_id, Meeting.id.in_(participates)),
            )
            .order_by(Meeting.start_time)
            .all()
        )

    def series_members_from(self, root_id: str, cutoff_date: date) -> List[Meeting]:
        """Root and instances of a series dated on or after ``cutoff_date``."""
        return (
            self.db.query(Meeting)
            .filter(
                or_(Meeting.id == root_id, Meeting.parent_meeting_id == root_id),
                Meeting.meeting_date >= cutoff_date,
            )
            .order_by(Meeting.meeting_date)
            .all()
        )

    def children_of(self, root_id: str) -> List[Meeting]:
        return (
            self.db.query(Meeting)
            .filter(Meeting.parent_meeting_id == root_id)
            .order_by(Meeting.meeting_date, Meeting.start_time)
            .all()
        )

    def relink_series(self, new_root: Meeting, members: List[Meeting]) -> None:
        """Make ``new_root`` the root of ``members``."""
        new_root.parent_meeting_id = None
        for member in members:
            member.parent_meeting_id = new_root.id
        self.db.flush()
