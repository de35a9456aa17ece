from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from attendance.core.roles import CourseRole
from attendance.db.models import Course, Enrollment, Meeting, Participant, Team, TeamMembership, Term, User


class FixedClock:
    """Callable clock for components, moved explicitly by the test."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


def seed_directory(session: Session) -> SimpleNamespace:
    """Set up users, terms, courses and enrollments.

    ``course`` runs in the active term and has one user per role plus three
    students. ``other_course`` is another active course, ``archived_course``
    belongs to a finished term.
    """
    active_term = Term(name="Winter 2026", is_active=True)
    past_term = Term(name="Fall 2025", is_active=False)
    session.add_all([active_term, past_term])
    session.flush()

    course = Course(term_id=active_term.id, code="CSE110", name="Software Engineering")
    other_course = Course(term_id=active_term.id, code="CSE120", name="Operating Systems")
    archived_course = Course(term_id=past_term.id, code="CSE100", name="Data Structures")
    session.add_all([course, other_course, archived_course])
    session.flush()

    data = SimpleNamespace(
        course_id=course.id,
        other_course_id=other_course.id,
        archived_course_id=archived_course.id,
    )

    people = {
        "professor": [(course, CourseRole.PROFESSOR), (archived_course, CourseRole.PROFESSOR)],
        "ta": [(course, CourseRole.TA)],
        "tutor": [(course, CourseRole.TUTOR)],
        "leader": [(course, CourseRole.TEAM_LEADER)],
        "alice": [(course, CourseRole.STUDENT)],
        "bob": [(course, CourseRole.STUDENT)],
        "carol": [(course, CourseRole.STUDENT)],
        "outsider": [(other_course, CourseRole.STUDENT)],
        "alumnus": [(archived_course, CourseRole.STUDENT)],
    }
    for name, enrollments in people.items():
        user = User(email=f"{name}@ucsd.edu", first_name=name.title(), last_name="Tester")
        session.add(user)
        session.flush()
        for enrolled_course, role in enrollments:
            session.add(Enrollment(user_id=user.id, course_id=enrolled_course.id, role=role))
        setattr(data, name, user.id)

    team = Team(course_id=course.id, name="Team 7")
    session.add(team)
    session.flush()
    session.add(TeamMembership(team_id=team.id, user_id=data.leader))
    session.add(TeamMembership(team_id=team.id, user_id=data.alice))
    data.team_id = team.id

    session.commit()
    return data


def add_meeting(
    session: Session,
    creator_id: str,
    course_id: str,
    start_time: datetime,
    duration: timedelta = timedelta(hours=1),
    participant_ids: Iterable[str] = (),
    parent_meeting_id: Optional[str] = None,
    meeting_date: Optional[date] = None,
    title: str = "Standup",
) -> Meeting:
    """Insert a meeting directly, bypassing authorization."""
    meeting = Meeting(
        creator_id=creator_id,
        course_id=course_id,
        start_time=start_time,
        end_time=start_time + duration,
        meeting_date=meeting_date or start_time.date(),
        title=title,
        is_recurring=parent_meeting_id is not None,
        parent_meeting_id=parent_meeting_id,
    )
    session.add(meeting)
    session.flush()
    for user_id in dict.fromkeys([creator_id, *participant_ids]):
        session.add(Participant(meeting_id=meeting.id, user_id=user_id))
    session.commit()
    return meeting


def meeting_payload(course_id: str, start_time: datetime, **overrides) -> dict:
    """JSON body for creating a one-hour meeting."""
    payload = {
        "course_id": course_id,
        "title": "Sprint review",
        "description": "Demo the sprint to the TA",
        "location": "CSE 1202",
        "start_time": start_time.isoformat(),
        "end_time": (start_time + timedelta(hours=1)).isoformat(),
        "meeting_date": start_time.date().isoformat(),
    }
    payload.update(overrides)
    return payload


def in_future(days: int = 1, hour: int = 15) -> datetime:
    """A whole-hour UTC instant some days ahead."""
    day = datetime.now(timezone.utc) + timedelta(days=days)
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)
