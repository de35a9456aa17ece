"""Unit tests for the attendance coordinator."""
import pytest
from datetime import timedelta
from unittest.mock import Mock

from sqlalchemy.exc import IntegrityError, OperationalError

from attendance.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from attendance.db.models import Meeting, MeetingCode
from attendance.repositories import UserContext
from attendance.services import AttendanceCoordinator
from tests.utils import add_meeting, in_future, meeting_payload


@pytest.fixture
def mocked():
    """Coordinator over mocked session and components."""
    db = Mock()
    provider = Mock()
    provider.get_user_context.return_value = UserContext(user_id="u-1")
    lifecycle = Mock()
    coordinator = AttendanceCoordinator(db, provider, lifecycle, Mock(), Mock())
    return coordinator, db, lifecycle


@pytest.mark.unit
class TestUnitOfWork:

    def test_commits_on_success(self, mocked):
        coordinator, db, lifecycle = mocked
        lifecycle.delete_meeting.return_value = ["m-1"]

        response = coordinator.delete_meeting("u-1", "m-1")

        assert response.success is True
        assert response.deleted_meeting_ids == ["m-1"]
        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_domain_errors_roll_back_and_propagate(self, mocked):
        coordinator, db, lifecycle = mocked
        lifecycle.delete_meeting.side_effect = NotFoundError("Meeting not found")

        with pytest.raises(NotFoundError):
            coordinator.delete_meeting("u-1", "m-1")

        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_persistence_errors_become_unexpected(self, mocked):
        coordinator, db, lifecycle = mocked
        lifecycle.delete_meeting.side_effect = OperationalError("DELETE", {}, Exception("database is locked"))

        with pytest.raises(UnexpectedError) as exc_info:
            coordinator.delete_meeting("u-1", "m-1")

        assert exc_info.value.message == "Internal server error"
        assert "locked" not in exc_info.value.message
        db.rollback.assert_called_once()

    def test_integrity_errors_become_conflicts(self, mocked):
        coordinator, db, lifecycle = mocked
        lifecycle.delete_meeting.side_effect = IntegrityError("DELETE", {}, Exception("FOREIGN KEY constraint failed"))

        with pytest.raises(ConflictError):
            coordinator.delete_meeting("u-1", "m-1")
        db.rollback.assert_called_once()

    def test_context_is_resolved_for_caller(self, mocked):
        coordinator, _, lifecycle = mocked
        lifecycle.delete_meeting.return_value = []

        coordinator.delete_meeting("u-1", "m-1", delete_future=True)

        coordinator.context_provider.get_user_context.assert_called_once_with("u-1")
        ctx = lifecycle.delete_meeting.call_args.args[0]
        assert ctx.user_id == "u-1"
        assert lifecycle.delete_meeting.call_args.args[1:] == ("m-1", True)


@pytest.mark.unit
class TestCreateMeeting:

    def test_membership_checked_before_payload(self, make_coordinator, directory):
        coordinator = make_coordinator()
        with pytest.raises(AuthorizationError):
            coordinator.create_meeting(directory.outsider, {"course_id": directory.course_id, "title": ""})

    @pytest.mark.parametrize("payload", [None, "x", [{"course_id": "c"}]])
    def test_non_object_payload_is_not_authorized(self, make_coordinator, directory, payload):
        with pytest.raises(AuthorizationError):
            make_coordinator().create_meeting(directory.outsider, payload)

    def test_missing_course_is_not_authorized(self, make_coordinator, directory):
        with pytest.raises(AuthorizationError):
            make_coordinator().create_meeting(directory.alice, {"title": "No course"})

    def test_invalid_payload_for_member(self, make_coordinator, directory, db_session):
        with pytest.raises(ValidationError) as exc_info:
            make_coordinator().create_meeting(directory.alice, {"course_id": directory.course_id, "title": "x"})

        assert "start_time" in exc_info.value.message
        assert db_session.query(Meeting).count() == 0

    def test_create_issues_initial_code(self, make_coordinator, directory, db_session):
        payload = meeting_payload(directory.course_id, in_future(), participant_ids=[directory.bob])

        response = make_coordinator().create_meeting(directory.alice, payload)

        assert response.meeting.creator_id == directory.alice
        assert {p.participant_id for p in response.participants} == {directory.alice, directory.bob}
        assert len(response.meeting_code.code) == 6
        assert response.meeting_code.meeting_id == response.meeting.id
        assert db_session.query(MeetingCode).count() == 1

    def test_failed_create_writes_nothing(self, make_coordinator, directory, db_session):
        payload = meeting_payload(directory.course_id, in_future(), participant_ids=[directory.outsider])

        with pytest.raises(ValidationError):
            make_coordinator().create_meeting(directory.alice, payload)

        assert db_session.query(Meeting).count() == 0
        assert db_session.query(MeetingCode).count() == 0


@pytest.mark.unit
class TestResponses:

    def test_instants_are_utc(self, make_coordinator, directory, db_session):
        start = in_future(days=2)
        meeting = add_meeting(db_session, directory.alice, directory.course_id, start, duration=timedelta(minutes=50))

        response = make_coordinator().get_meeting(directory.alice, meeting.id)

        assert response.start_time == start
        assert response.start_time.utcoffset() == timedelta(0)
        assert response.end_time == start + timedelta(minutes=50)
