"""Attendance business logic."""
from attendance.services.authorization import AuthorizationGuard
from attendance.services.codes import MeetingCodeIssuer
from attendance.services.coordinator import AttendanceCoordinator
from attendance.services.lifecycle import CreatedMeeting, MeetingLifecycleManager
from attendance.services.roster import ParticipantRoster

__all__ = [
    "AttendanceCoordinator",
    "AuthorizationGuard",
    "CreatedMeeting",
    "MeetingCodeIssuer",
    "MeetingLifecycleManager",
    "ParticipantRoster",
]
