"""Participant persistence."""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from attendance.core.utils import utcnow
from attendance.db.models import Meeting, Participant

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ParticipantRepository:
    """Participant queries and writes. Writes are flushed, never committed."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, meeting_id: str, user_id: str) -> Optional[Participant]:
        return (
            self.db.query(Participant)
            .filter(Participant.meeting_id == meeting_id, Participant.user_id == user_id)
            .first()
        )

    def exists(self, meeting_id: str, user_id: str) -> bool:
        return self.get(meeting_id, user_id) is not None

    def insert_ignoring_duplicates(self, rows: List[Dict]) -> None:
        """
        Insert participant rows in one statement, skipping existing pairs.

        Relies on the (meeting_id, user_id) unique constraint, so concurrent
        requests adding the same participant cannot produce duplicate rows.

        Args:
            rows: dicts with meeting_id, user_id, present and attendance_time
        """
        if not rows:
            return

        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Bulk participant insert is not supported on {dialect}")

        now = utcnow()
        values = [{**row, "created_at": now, "updated_at": now} for row in rows]
        stmt = insert(Participant.__table__).on_conflict_do_nothing(
            index_elements=["meeting_id", "user_id"]
        )
        self.db.execute(stmt, values)
        self.db.flush()

    def get_pairs(self, pairs: Iterable[Tuple[str, str]]) -> List[Participant]:
        wanted: Set[Tuple[str, str]] = set(pairs)
        if not wanted:
            return []
        rows = (
            self.db.query(Participant)
            .filter(
                Participant.meeting_id.in_({meeting_id for meeting_id, _ in wanted}),
                Participant.user_id.in_({user_id for _, user_id in wanted}),
            )
            .order_by(Participant.meeting_id, Participant.id)
            .all()
        )
        return [row for row in rows if (row.meeting_id, row.user_id) in wanted]

    def set_attendance(
        self,
        meeting_id: str,
        user_id: str,
        present: bool,
        attendance_time: Optional[datetime],
    ) -> int:
        """Single-statement attendance write (last write wins). Returns rows matched."""
        result = self.db.execute(
            update(Participant)
            .where(Participant.meeting_id == meeting_id, Participant.user_id == user_id)
            .values(present=present, attendance_time=attendance_time, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        self.db.flush()
        return result.rowcount

    def delete(self, participant: Participant) -> None:
        self.db.delete(participant)
        self.db.flush()

    def list(
        self,
        meeting_id: Optional[str] = None,
        course_id: Optional[str] = None,
        user_id: Optional[str] = None,
        present: Optional[bool] = None,
    ) -> List[Participant]:
        query = self.db.query(Participant)
        if course_id is not None:
            query = query.join(Meeting, Meeting.id == Participant.meeting_id).filter(
                Meeting.course_id == course_id
            )
        if meeting_id is not None:
            query = query.filter(Participant.meeting_id == meeting_id)
        if user_id is not None:
            query = query.filter(Participant.user_id == user_id)
        if present is not None:
            query = query.filter(Participant.present == present)
        return query.order_by(Participant.meeting_id, Participant.id).all()
