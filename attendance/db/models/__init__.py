"""Database models."""
from attendance.db.models.directory import User, Term, Course, Enrollment, Team, TeamMembership
from attendance.db.models.meeting import Meeting
from attendance.db.models.participant import Participant
from attendance.db.models.meeting_code import MeetingCode

__all__ = [
    "User",
    "Term",
    "Course",
    "Enrollment",
    "Team",
    "TeamMembership",
    "Meeting",
    "Participant",
    "MeetingCode",
]
