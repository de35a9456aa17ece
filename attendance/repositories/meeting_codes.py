"""Meeting code persistence."""
from typing import Optional

from sqlalchemy.orm import Session

from attendance.db.models import MeetingCode


class MeetingCodeRepository:
    """Codes are append-only: issuing a new one supersedes the previous."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, meeting_code: MeetingCode) -> MeetingCode:
        self.db.add(meeting_code)
        self.db.flush()
        return meeting_code

    def latest(self, meeting_id: str) -> Optional[MeetingCode]:
        return (
            self.db.query(MeetingCode)
            .filter(MeetingCode.meeting_id == meeting_id)
            .order_by(MeetingCode.id.desc())
            .first()
        )

    def find(self, meeting_id: str, code: str) -> Optional[MeetingCode]:
        """Most recent code row of the meeting matching ``code``."""
        return (
            self.db.query(MeetingCode)
            .filter(MeetingCode.meeting_id == meeting_id, MeetingCode.code == code)
            .order_by(MeetingCode.id.desc())
            .first()
        )
