"""Meeting lifecycle business logic."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from attendance.core.constants import RECURRENCE_INTERVAL_DAYS
from attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from attendance.core.logging_config import get_logger
from attendance.core.roles import CAN_DELETE_ANY_MEETING, CAN_VIEW_ALL_MEETINGS, CAN_VIEW_ANY_MEETING
from attendance.core.utils import series_cutoff, to_utc, utcnow
from attendance.db.models import Meeting, Participant
from attendance.repositories import CourseDirectory, MeetingRepository, UserContext, UserDirectory
from attendance.schemas.meeting import MeetingCreate, MeetingUpdate
from attendance.services.authorization import AuthorizationGuard
from attendance.services.roster import ParticipantRoster

logger = get_logger(__name__)


@dataclass
class CreatedMeeting:
    meeting: Meeting
    participants: List[Participant]
    recurrences: List[Meeting] = field(default_factory=list)


class MeetingLifecycleManager:
    """Creates, reads, updates, deletes and lists meetings."""

    def __init__(
        self,
        guard: AuthorizationGuard,
        meetings: MeetingRepository,
        roster: ParticipantRoster,
        users: UserDirectory,
        courses: CourseDirectory,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.guard = guard
        self.meetings = meetings
        self.roster = roster
        self.users = users
        self.courses = courses
        self.clock = clock

    def _get_meeting(self, meeting_id: str) -> Meeting:
        meeting = self.meetings.get(meeting_id)
        if not meeting:
            raise NotFoundError("Meeting not found")
        return meeting

    def require_can_create(self, ctx: UserContext, course_id: Optional[str]) -> None:
        """Only members of a course whose term is running may schedule meetings."""
        if (
            not course_id
            or not self.guard.is_course_member(ctx, course_id)
            or not self.courses.is_course_term_active(course_id)
        ):
            raise AuthorizationError("Not authorized to create meetings for this course")

    def _resolve_series_root(self, ctx: UserContext, data: MeetingCreate) -> Optional[str]:
        if not data.parent_meeting_id:
            return None

        parent = self.meetings.get(data.parent_meeting_id)
        if not parent:
            raise NotFoundError("Parent meeting not found")
        if parent.course_id != data.course_id:
            raise ValidationError("Parent meeting belongs to a different course")
        if not self.guard.is_creator(parent, ctx.user_id):
            raise AuthorizationError("Only the series creator can add meetings to it")

        # Series are one level deep
        return parent.parent_meeting_id or parent.id

    def _validate_participants(self, course_id: str, participant_ids: List[str]) -> List[str]:
        unique_ids = list(dict.fromkeys(participant_ids))
        if not unique_ids:
            return []

        existing = self.users.existing_user_ids(unique_ids)
        unknown = [uid for uid in unique_ids if uid not in existing]
        if unknown:
            raise ValidationError(f"Unknown participant ids: {', '.join(unknown)}")

        enrolled = self.users.enrolled_user_ids(course_id, unique_ids)
        not_enrolled = [uid for uid in unique_ids if uid not in enrolled]
        if not_enrolled:
            raise ValidationError(
                f"Participants must be enrolled in the course: {', '.join(not_enrolled)}"
            )
        return unique_ids

    def create_meeting(self, ctx: UserContext, data: MeetingCreate) -> CreatedMeeting:
        """
        Create a meeting, its participants and any weekly recurrences.

        The creator is always added as a participant. Validation of the
        participant list happens before anything is written.

        Raises:
            AuthorizationError: caller is not actively enrolled in the course, or
                does not own the parent series
            ValidationError: inconsistent times, recurrence options or participants
            NotFoundError: parent meeting does not exist
        """
        self.require_can_create(ctx, data.course_id)

        start_time = to_utc(data.start_time)
        end_time = to_utc(data.end_time)
        if end_time <= start_time:
            raise ValidationError("End time must be after start time")
        if data.recurrence_weeks and not data.is_recurring:
            raise ValidationError("recurrence_weeks requires is_recurring")

        root_id = self._resolve_series_root(ctx, data)
        participant_ids = self._validate_participants(data.course_id, data.participant_ids)

        fields = dict(
            creator_id=ctx.user_id,
            course_id=data.course_id,
            title=data.title,
            description=data.description,
            location=data.location,
            meeting_type=data.meeting_type,
            is_recurring=data.is_recurring,
        )
        meeting = self.meetings.add(Meeting(
            start_time=start_time,
            end_time=end_time,
            meeting_date=data.meeting_date,
            parent_meeting_id=root_id,
            **fields,
        ))

        series_root = root_id or meeting.id
        recurrences = []
        for week in range(1, (data.recurrence_weeks or 0) + 1):
            shift = timedelta(days=RECURRENCE_INTERVAL_DAYS * week)
            recurrences.append(self.meetings.add(Meeting(
                start_time=start_time + shift,
                end_time=end_time + shift,
                meeting_date=data.meeting_date + shift,
                parent_meeting_id=series_root,
                **fields,
            )))

        attendees = [ctx.user_id] + [uid for uid in participant_ids if uid != ctx.user_id]
        seeded = self.roster.seed_participants(
            [meeting.id] + [instance.id for instance in recurrences],
            attendees,
        )

        logger.info(
            "meeting_created",
            meeting_id=meeting.id,
            course_id=meeting.course_id,
            participant_count=len(attendees),
            recurrence_count=len(recurrences),
        )
        return CreatedMeeting(
            meeting=meeting,
            participants=[p for p in seeded if p.meeting_id == meeting.id],
            recurrences=recurrences,
        )

    def get_meeting(self, ctx: UserContext, meeting_id: str) -> Meeting:
        meeting = self._get_meeting(meeting_id)
        self.guard.require_course_member(ctx, meeting.course_id, "view meetings")

        if not (
            self.guard.is_creator(meeting, ctx.user_id)
            or self.guard.has_capability(ctx, meeting.course_id, CAN_VIEW_ANY_MEETING)
            or self.roster.is_participant(meeting.id, ctx.user_id)
        ):
            raise AuthorizationError("Not authorized to view this meeting")
        return meeting

    def update_meeting(self, ctx: UserContext, meeting_id: str, patch: MeetingUpdate) -> Meeting:
        """Apply only the fields present in ``patch``. Creator only."""
        meeting = self._get_meeting(meeting_id)
        self.guard.require_active_course_member(ctx, meeting.course_id, "update meetings")
        self.guard.require_creator(meeting, ctx.user_id, "update this meeting")

        changes = patch.changes()
        for name in ("start_time", "end_time"):
            if name in changes:
                changes[name] = to_utc(changes[name])

        start_time = changes.get("start_time", to_utc(meeting.start_time))
        end_time = changes.get("end_time", to_utc(meeting.end_time))
        if end_time <= start_time:
            raise ValidationError("End time must be after start time")

        self.meetings.apply_changes(meeting, changes)
        logger.info("meeting_updated", meeting_id=meeting.id, fields=sorted(changes))
        return meeting

    def delete_meeting(self, ctx: UserContext, meeting_id: str, delete_future: bool = False) -> List[str]:
        """
        Delete a meeting, or the meeting and its later series instances.

        Past meetings are only removed as part of a series deletion. Returns
        the ids of every deleted meeting.
        """
        meeting = self._get_meeting(meeting_id)
        self.guard.require_active_course_member(ctx, meeting.course_id, "delete meetings")
        if not (
            self.guard.is_creator(meeting, ctx.user_id)
            or self.guard.has_capability(ctx, meeting.course_id, CAN_DELETE_ANY_MEETING)
        ):
            raise AuthorizationError("Not authorized to delete this meeting")

        if to_utc(meeting.end_time) < self.clock() and not delete_future:
            raise AuthorizationError("Past meetings can only be deleted together with future recurrences")

        root_id = meeting.parent_meeting_id or meeting.id
        if delete_future:
            cutoff = series_cutoff(meeting.meeting_date)
            targets = self.meetings.series_members_from(root_id, cutoff.date())
            if meeting not in targets:
                targets.append(meeting)
        else:
            targets = [meeting]

        deleted_ids = [target.id for target in targets]
        new_root_id = self._promote_successor(root_id, deleted_ids)
        self.meetings.delete(targets)

        logger.info(
            "meeting_deleted",
            meeting_id=meeting_id,
            delete_future=delete_future,
            deleted_meeting_ids=deleted_ids,
            new_series_root_id=new_root_id,
        )
        return deleted_ids

    def _promote_successor(self, root_id: str, deleted_ids: List[str]) -> Optional[str]:
        """Hand the series over to its earliest surviving instance when the root goes."""
        if root_id not in deleted_ids:
            return None
        survivors = [child for child in self.meetings.children_of(root_id) if child.id not in deleted_ids]
        if not survivors:
            return None
        self.meetings.relink_series(survivors[0], survivors[1:])
        return survivors[0].id

    def get_meeting_list(self, ctx: UserContext, course_id: str) -> List[Meeting]:
        if not self.courses.course_exists(course_id):
            raise NotFoundError("Course not found")
        self.guard.require_course_member(ctx, course_id, "list meetings")

        if self.guard.has_capability(ctx, course_id, CAN_VIEW_ALL_MEETINGS):
            return self.meetings.list_for_course(course_id)
        return self.meetings.list_for_member(course_id, ctx.user_id)
