"""Participant roster business logic."""
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from attendance.core.logging_config import get_logger
from attendance.core.roles import CAN_VIEW_ALL_PARTICIPANTS
from attendance.core.utils import to_utc, utcnow
from attendance.db.models import Meeting, Participant
from attendance.repositories import (
    CourseDirectory,
    MeetingRepository,
    ParticipantRepository,
    UserContext,
    UserDirectory,
)
from attendance.schemas.participant import ParticipantListFilters, ParticipantRecord
from attendance.services.authorization import AuthorizationGuard

logger = get_logger(__name__)


class ParticipantRoster:
    """Creates, updates, removes and lists participation records."""

    def __init__(
        self,
        guard: AuthorizationGuard,
        meetings: MeetingRepository,
        participants: ParticipantRepository,
        users: UserDirectory,
        courses: CourseDirectory,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.guard = guard
        self.meetings = meetings
        self.participants = participants
        self.users = users
        self.courses = courses
        self.clock = clock

    def is_participant(self, meeting_id: str, user_id: str) -> bool:
        return self.participants.exists(meeting_id, user_id)

    def seed_participants(self, meeting_ids: Iterable[str], user_ids: Iterable[str]) -> List[Participant]:
        """
        Add every user to every meeting as not yet present.

        Used while creating meetings, after the caller has been authorized and
        the users validated.
        """
        pairs = _unique_pairs((meeting_id, user_id) for meeting_id in meeting_ids for user_id in user_ids)
        self.participants.insert_ignoring_duplicates([
            {"meeting_id": meeting_id, "user_id": user_id, "present": False, "attendance_time": None}
            for meeting_id, user_id in pairs
        ])
        return self.participants.get_pairs(pairs)

    def add_participants(self, ctx: UserContext, records: List[ParticipantRecord]) -> List[Participant]:
        """
        Add participants to one or more meetings in a single batch.

        Every check runs before anything is written, so a single bad record
        rejects the whole batch. Pairs that already exist are skipped.

        Raises:
            ValidationError: empty batch
            NotFoundError: unknown meeting or user
            AuthorizationError: caller is not an active member and creator of every meeting
        """
        if not records:
            raise ValidationError("Participants data is required")

        meeting_ids = [record.meeting_id for record in records]
        meetings = self.meetings.get_many(meeting_ids)
        missing_meetings = sorted(set(meeting_ids) - set(meetings))
        if missing_meetings:
            raise NotFoundError(f"Meeting not found: {', '.join(missing_meetings)}")

        for meeting in meetings.values():
            self.guard.require_active_course_member(ctx, meeting.course_id, "add participants")
            self.guard.require_creator(meeting, ctx.user_id, "add participants")

        user_ids = {record.participant_id for record in records}
        missing_users = sorted(user_ids - self.users.existing_user_ids(user_ids))
        if missing_users:
            raise NotFoundError(f"User not found: {', '.join(missing_users)}")

        now = self.clock()
        rows: Dict[Tuple[str, str], dict] = {}
        for record in records:
            pair = (record.meeting_id, record.participant_id)
            if pair in rows:
                continue
            rows[pair] = {
                "meeting_id": record.meeting_id,
                "user_id": record.participant_id,
                "present": record.present,
                "attendance_time": now if record.present else None,
            }

        self.participants.insert_ignoring_duplicates(list(rows.values()))
        logger.info(
            "participants_added",
            requested=len(records),
            unique_pairs=len(rows),
            meeting_ids=sorted(meetings),
        )
        return self.participants.get_pairs(rows.keys())

    def _load_for_creator(self, ctx: UserContext, meeting_id: str, participant_id: str, action: str) -> Participant:
        meeting = self.meetings.get(meeting_id)
        if not meeting:
            raise NotFoundError("Meeting not found")

        participant = self.participants.get(meeting_id, participant_id)
        if not participant:
            raise NotFoundError("Participant not found")

        self.guard.require_active_course_member(ctx, meeting.course_id, f"{action} participants")
        self.guard.require_creator(meeting, ctx.user_id, f"{action} participants")
        return participant

    def update_participant(
        self,
        ctx: UserContext,
        meeting_id: str,
        participant_id: str,
        present: bool,
        attendance_time: Optional[datetime] = None,
    ) -> Participant:
        """Creator marks a participant present (stamping the time) or not present."""
        self._load_for_creator(ctx, meeting_id, participant_id, "update")

        if present:
            stamped = to_utc(attendance_time) if attendance_time else self.clock()
        else:
            stamped = None

        self.participants.set_attendance(meeting_id, participant_id, present, stamped)
        logger.info(
            "participant_attendance_updated",
            meeting_id=meeting_id,
            participant_id=participant_id,
            present=present,
        )
        return self.participants.get(meeting_id, participant_id)

    def record_attendance(self, meeting_id: str, user_id: str, at: datetime) -> Participant:
        """Mark an existing participant present at ``at``. Never un-marks."""
        matched = self.participants.set_attendance(meeting_id, user_id, True, at)
        if not matched:
            raise NotFoundError("Participant not found")
        return self.participants.get(meeting_id, user_id)

    def delete_participant(self, ctx: UserContext, meeting_id: str, participant_id: str) -> None:
        participant = self._load_for_creator(ctx, meeting_id, participant_id, "remove")
        self.participants.delete(participant)
        logger.info("participant_removed", meeting_id=meeting_id, participant_id=participant_id)

    def get_participant(self, ctx: UserContext, meeting_id: str, participant_id: str) -> Participant:
        meeting = self.meetings.get(meeting_id)
        if not meeting:
            raise NotFoundError("Meeting not found")

        participant = self.participants.get(meeting_id, participant_id)
        if not participant:
            raise NotFoundError("Participant not found")

        if ctx.user_id != participant_id and not self.guard.is_creator(meeting, ctx.user_id):
            raise AuthorizationError("Not authorized to view this participant")
        return participant

    def list_participants(self, ctx: UserContext, filters: ParticipantListFilters) -> List[Participant]:
        """
        List participation rows matching ``filters``.

        Callers who are course staff, the meeting's creator, or a participant of
        the referenced meeting see the whole requested set. Anyone else gets
        only their own rows; this narrowing is silent, not an error.
        """
        if not filters.meeting_id and not filters.course_id:
            raise ValidationError("Either meeting_id or course_id is required")

        meeting: Optional[Meeting] = None
        if filters.meeting_id:
            meeting = self.meetings.get(filters.meeting_id)
            if not meeting:
                raise NotFoundError("Meeting not found")
            if filters.course_id and filters.course_id != meeting.course_id:
                return []
            course_id = meeting.course_id
        else:
            course_id = filters.course_id
            if not self.courses.course_exists(course_id):
                raise NotFoundError("Course not found")

        sees_all = self.guard.has_capability(ctx, course_id, CAN_VIEW_ALL_PARTICIPANTS)
        if not sees_all and meeting is not None:
            sees_all = (
                self.guard.is_creator(meeting, ctx.user_id)
                or self.is_participant(meeting.id, ctx.user_id)
            )

        user_filter = filters.participant_id
        if not sees_all:
            if user_filter and user_filter != ctx.user_id:
                return []
            user_filter = ctx.user_id

        return self.participants.list(
            meeting_id=filters.meeting_id,
            course_id=filters.course_id,
            user_id=user_filter,
            present=filters.present,
        )


def _unique_pairs(pairs: Iterable[Tuple[str, str]]) -> List[Tuple[str, str]]:
    seen = {}
    for pair in pairs:
        seen.setdefault(pair, None)
    return list(seen)
