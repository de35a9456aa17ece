"""Meeting code issuance and self check-in."""
from datetime import datetime
from typing import Callable

from attendance.core.exceptions import AuthorizationError, NotFoundError
from attendance.core.logging_config import get_logger
from attendance.core.sanitization import sanitize_meeting_code
from attendance.core.utils import (
    build_checkin_url,
    build_qr_url,
    generate_meeting_code,
    generate_qr_code,
    is_within_window,
    to_utc,
    utcnow,
)
from attendance.db.models import Meeting, MeetingCode, Participant
from attendance.repositories import MeetingCodeRepository, MeetingRepository, UserContext
from attendance.services.authorization import AuthorizationGuard
from attendance.services.roster import ParticipantRoster

logger = get_logger(__name__)


class MeetingCodeIssuer:
    """
    Issues time-boxed check-in codes and redeems them for participants.

    A code is valid between the meeting's scheduled start and end. Issuing a
    new code does not invalidate older ones; the latest is the one shown to
    the creator.
    """

    def __init__(
        self,
        guard: AuthorizationGuard,
        meetings: MeetingRepository,
        codes: MeetingCodeRepository,
        roster: ParticipantRoster,
        public_base_url: str,
        qr_render_url: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.guard = guard
        self.meetings = meetings
        self.codes = codes
        self.roster = roster
        self.public_base_url = public_base_url
        self.qr_render_url = qr_render_url
        self.clock = clock

    def _get_meeting(self, meeting_id: str) -> Meeting:
        meeting = self.meetings.get(meeting_id)
        if not meeting:
            raise NotFoundError("Meeting not found")
        return meeting

    def checkin_url(self, meeting_code: MeetingCode) -> str:
        return build_checkin_url(self.public_base_url, meeting_code.meeting_id, meeting_code.code)

    def issue_code(self, ctx: UserContext, meeting_id: str) -> MeetingCode:
        meeting = self._get_meeting(meeting_id)
        self.guard.require_creator(meeting, ctx.user_id, "issue meeting codes")

        code = generate_meeting_code()
        checkin_url = build_checkin_url(self.public_base_url, meeting.id, code)
        meeting_code = self.codes.add(MeetingCode(
            meeting_id=meeting.id,
            code=code,
            qr_url=build_qr_url(self.qr_render_url, checkin_url),
            valid_start=to_utc(meeting.start_time),
            valid_end=to_utc(meeting.end_time),
        ))

        logger.info("meeting_code_issued", meeting_id=meeting.id, code_id=meeting_code.id)
        return meeting_code

    def get_current_code(self, ctx: UserContext, meeting_id: str) -> MeetingCode:
        meeting = self._get_meeting(meeting_id)
        self.guard.require_creator(meeting, ctx.user_id, "view meeting codes")

        meeting_code = self.codes.latest(meeting.id)
        if not meeting_code:
            raise NotFoundError("No meeting code has been issued for this meeting")
        return meeting_code

    def render_qr(self, ctx: UserContext, meeting_id: str) -> bytes:
        """SVG QR image of the current code's check-in link."""
        meeting_code = self.get_current_code(ctx, meeting_id)
        return generate_qr_code(self.checkin_url(meeting_code)).getvalue()

    def redeem_code(self, ctx: UserContext, meeting_id: str, code: str) -> Participant:
        """
        Mark the caller present using a meeting code.

        Args:
            ctx: the redeeming participant
            meeting_id: meeting the code belongs to
            code: code as typed or scanned, compared case-insensitively

        Returns:
            Participant: the updated participation row

        Raises:
            NotFoundError: unknown meeting or code
            AuthorizationError: caller is not a participant, or the code is
                used outside its validity window
        """
        meeting = self._get_meeting(meeting_id)

        if not self.roster.is_participant(meeting.id, ctx.user_id):
            logger.info("meeting_code_rejected", meeting_id=meeting.id, reason="not_participant")
            raise AuthorizationError("Only participants of this meeting can record attendance")

        try:
            normalized = sanitize_meeting_code(code)
        except ValueError:
            normalized = None

        meeting_code = self.codes.find(meeting.id, normalized) if normalized else None
        if not meeting_code:
            logger.info("meeting_code_rejected", meeting_id=meeting.id, reason="unknown_code")
            raise NotFoundError("Meeting code not found")

        now = self.clock()
        if not is_within_window(now, meeting_code.valid_start, meeting_code.valid_end):
            logger.info(
                "meeting_code_rejected",
                meeting_id=meeting.id,
                reason="outside_window",
                code_id=meeting_code.id,
            )
            raise AuthorizationError("Meeting code is not valid at this time")

        participant = self.roster.record_attendance(meeting.id, ctx.user_id, now)
        logger.info("meeting_code_redeemed", meeting_id=meeting.id, code_id=meeting_code.id)
        return participant
