"""Request-level orchestration of the attendance components.

The coordinator resolves the caller's user context, wires the components to
repositories sharing one session, and owns the transaction: components only
flush, the coordinator commits on success and rolls back on any failure.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Iterator, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from attendance.core.config import settings
from attendance.core.exceptions import (
    AttendanceError,
    ConflictError,
    UnexpectedError,
    ValidationError,
)
from attendance.core.logging_config import get_logger
from attendance.core.utils import utcnow
from attendance.repositories import (
    MeetingCodeRepository,
    MeetingRepository,
    ParticipantRepository,
    SqlCourseDirectory,
    SqlUserContextProvider,
    SqlUserDirectory,
    UserContext,
    UserContextProvider,
)
from attendance.schemas import (
    MeetingCodeResponse,
    MeetingCreate,
    MeetingCreateResponse,
    MeetingDeleteResponse,
    MeetingResponse,
    MeetingUpdate,
    ParticipantListFilters,
    ParticipantRecord,
    ParticipantResponse,
    SuccessResponse,
)
from attendance.services.authorization import AuthorizationGuard
from attendance.services.codes import MeetingCodeIssuer
from attendance.services.lifecycle import MeetingLifecycleManager
from attendance.services.roster import ParticipantRoster

logger = get_logger(__name__)


def format_validation_errors(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into one readable message."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


class AttendanceCoordinator:
    """Entry point used by the HTTP layer for every attendance operation."""

    def __init__(
        self,
        db: Session,
        context_provider: UserContextProvider,
        lifecycle: MeetingLifecycleManager,
        roster: ParticipantRoster,
        codes: MeetingCodeIssuer,
    ):
        self.db = db
        self.context_provider = context_provider
        self.lifecycle = lifecycle
        self.roster = roster
        self.codes = codes

    @classmethod
    def from_session(
        cls,
        db: Session,
        clock: Callable[[], datetime] = utcnow,
        public_base_url: Optional[str] = None,
        qr_render_url: Optional[str] = None,
    ) -> "AttendanceCoordinator":
        guard = AuthorizationGuard()
        meetings = MeetingRepository(db)
        participants = ParticipantRepository(db)
        users = SqlUserDirectory(db)
        courses = SqlCourseDirectory(db)

        roster = ParticipantRoster(guard, meetings, participants, users, courses, clock=clock)
        lifecycle = MeetingLifecycleManager(guard, meetings, roster, users, courses, clock=clock)
        codes = MeetingCodeIssuer(
            guard,
            meetings,
            MeetingCodeRepository(db),
            roster,
            public_base_url=public_base_url or settings.PUBLIC_BASE_URL,
            qr_render_url=qr_render_url or settings.QR_RENDER_URL,
            clock=clock,
        )
        return cls(db, SqlUserContextProvider(db), lifecycle, roster, codes)

    @contextmanager
    def _unit_of_work(self, operation: str, user_id: str) -> Iterator[UserContext]:
        """Resolve the caller, then commit or roll back around the block."""
        try:
            ctx = self.context_provider.get_user_context(user_id)
            yield ctx
            self.db.commit()
        except AttendanceError as e:
            self.db.rollback()
            logger.info(
                "attendance_request_rejected",
                operation=operation,
                user_id=user_id,
                error_code=e.code,
                reason=e.message,
            )
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("attendance_write_conflict", operation=operation, user_id=user_id, error=str(e.orig))
            raise ConflictError("Request conflicts with existing data") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("attendance_persistence_failed", operation=operation, user_id=user_id)
            raise UnexpectedError() from e

    # Meetings

    def get_meeting(self, user_id: str, meeting_id: str) -> MeetingResponse:
        with self._unit_of_work("get_meeting", user_id) as ctx:
            meeting = self.lifecycle.get_meeting(ctx, meeting_id)
            response = MeetingResponse.model_validate(meeting)
        return response

    def create_meeting(self, user_id: str, payload: Any) -> MeetingCreateResponse:
        """
        Create a meeting from a raw request body.

        Membership is checked before the body is validated, so callers outside
        the course are refused the same way whatever they send.
        """
        with self._unit_of_work("create_meeting", user_id) as ctx:
            course_id = payload.get("course_id") if isinstance(payload, dict) else None
            self.lifecycle.require_can_create(ctx, course_id if isinstance(course_id, str) else None)

            try:
                data = MeetingCreate.model_validate(payload)
            except PydanticValidationError as e:
                raise ValidationError(format_validation_errors(e)) from e

            created = self.lifecycle.create_meeting(ctx, data)
            meeting_code = self.codes.issue_code(ctx, created.meeting.id)
            response = MeetingCreateResponse(
                meeting=MeetingResponse.model_validate(created.meeting),
                participants=[ParticipantResponse.model_validate(p) for p in created.participants],
                meeting_code=MeetingCodeResponse.model_validate(meeting_code),
                recurrences=[MeetingResponse.model_validate(m) for m in created.recurrences],
            )
        return response

    def update_meeting(self, user_id: str, meeting_id: str, patch: MeetingUpdate) -> MeetingResponse:
        with self._unit_of_work("update_meeting", user_id) as ctx:
            meeting = self.lifecycle.update_meeting(ctx, meeting_id, patch)
            response = MeetingResponse.model_validate(meeting)
        return response

    def delete_meeting(self, user_id: str, meeting_id: str, delete_future: bool = False) -> MeetingDeleteResponse:
        with self._unit_of_work("delete_meeting", user_id) as ctx:
            deleted_ids = self.lifecycle.delete_meeting(ctx, meeting_id, delete_future)
        return MeetingDeleteResponse(
            message=f"Deleted {len(deleted_ids)} meeting(s)",
            deleted_meeting_ids=deleted_ids,
        )

    def get_meeting_list(self, user_id: str, course_id: str) -> List[MeetingResponse]:
        with self._unit_of_work("get_meeting_list", user_id) as ctx:
            meetings = self.lifecycle.get_meeting_list(ctx, course_id)
            response = [MeetingResponse.model_validate(m) for m in meetings]
        return response

    # Participants

    def get_participant(self, user_id: str, meeting_id: str, participant_id: str) -> ParticipantResponse:
        with self._unit_of_work("get_participant", user_id) as ctx:
            participant = self.roster.get_participant(ctx, meeting_id, participant_id)
            response = ParticipantResponse.model_validate(participant)
        return response

    def add_participants(self, user_id: str, records: List[ParticipantRecord]) -> List[ParticipantResponse]:
        with self._unit_of_work("add_participants", user_id) as ctx:
            participants = self.roster.add_participants(ctx, records)
            response = [ParticipantResponse.model_validate(p) for p in participants]
        return response

    def update_participant(
        self,
        user_id: str,
        meeting_id: str,
        participant_id: str,
        present: bool,
        attendance_time: Optional[datetime] = None,
    ) -> ParticipantResponse:
        with self._unit_of_work("update_participant", user_id) as ctx:
            participant = self.roster.update_participant(ctx, meeting_id, participant_id, present, attendance_time)
            response = ParticipantResponse.model_validate(participant)
        return response

    def delete_participant(self, user_id: str, meeting_id: str, participant_id: str) -> SuccessResponse:
        with self._unit_of_work("delete_participant", user_id) as ctx:
            self.roster.delete_participant(ctx, meeting_id, participant_id)
        return SuccessResponse(message="Participant removed")

    def list_participants(self, user_id: str, filters: ParticipantListFilters) -> List[ParticipantResponse]:
        with self._unit_of_work("list_participants", user_id) as ctx:
            participants = self.roster.list_participants(ctx, filters)
            response = [ParticipantResponse.model_validate(p) for p in participants]
        return response

    # Meeting codes

    def issue_code(self, user_id: str, meeting_id: str) -> MeetingCodeResponse:
        with self._unit_of_work("issue_code", user_id) as ctx:
            meeting_code = self.codes.issue_code(ctx, meeting_id)
            response = MeetingCodeResponse.model_validate(meeting_code)
        return response

    def get_current_code(self, user_id: str, meeting_id: str) -> MeetingCodeResponse:
        with self._unit_of_work("get_current_code", user_id) as ctx:
            meeting_code = self.codes.get_current_code(ctx, meeting_id)
            response = MeetingCodeResponse.model_validate(meeting_code)
        return response

    def render_qr(self, user_id: str, meeting_id: str) -> bytes:
        with self._unit_of_work("render_qr", user_id) as ctx:
            image = self.codes.render_qr(ctx, meeting_id)
        return image

    def redeem_code(self, user_id: str, meeting_id: str, code: str) -> ParticipantResponse:
        with self._unit_of_work("redeem_code", user_id) as ctx:
            participant = self.codes.redeem_code(ctx, meeting_id, code)
            response = ParticipantResponse.model_validate(participant)
        return response
