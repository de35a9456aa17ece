"""Repositories wrapping a request-scoped SQLAlchemy session."""
from attendance.repositories.directory import (
    CourseDirectory,
    EnrollmentContext,
    SqlCourseDirectory,
    SqlUserContextProvider,
    SqlUserDirectory,
    UserContext,
    UserContextProvider,
    UserDirectory,
)
from attendance.repositories.meeting_codes import MeetingCodeRepository
from attendance.repositories.meetings import MeetingRepository
from attendance.repositories.participants import ParticipantRepository

__all__ = [
    "CourseDirectory",
    "EnrollmentContext",
    "MeetingCodeRepository",
    "MeetingRepository",
    "ParticipantRepository",
    "SqlCourseDirectory",
    "SqlUserContextProvider",
    "SqlUserDirectory",
    "UserContext",
    "UserContextProvider",
    "UserDirectory",
]
