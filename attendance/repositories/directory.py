"""Read-only collaborators backed by the course directory tables.

User identity, enrollments and courses are managed elsewhere in the
application. The attendance services only depend on the three narrow
protocols below; the SQLAlchemy implementations are what the API wires in.
"""
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Set, Tuple

from sqlalchemy.orm import Session

from attendance.core.roles import CourseRole
from attendance.db.models import Course, Enrollment, TeamMembership, Term, User


@dataclass(frozen=True)
class EnrollmentContext:
    course_id: str
    role: CourseRole
    term_active: bool


@dataclass(frozen=True)
class UserContext:
    """A caller's resolved enrollments and team memberships."""

    user_id: str
    enrollments: Tuple[EnrollmentContext, ...] = field(default_factory=tuple)
    team_ids: Tuple[str, ...] = field(default_factory=tuple)

    def enrollment_for(self, course_id: str) -> Optional[EnrollmentContext]:
        for enrollment in self.enrollments:
            if enrollment.course_id == course_id:
                return enrollment
        return None


class UserContextProvider(Protocol):
    def get_user_context(self, user_id: str) -> UserContext: ...


class UserDirectory(Protocol):
    def existing_user_ids(self, user_ids: Iterable[str]) -> Set[str]: ...

    def enrolled_user_ids(self, course_id: str, user_ids: Iterable[str]) -> Set[str]: ...


class CourseDirectory(Protocol):
    def course_exists(self, course_id: str) -> bool: ...

    def is_course_term_active(self, course_id: str) -> bool: ...


class SqlUserContextProvider:
    def __init__(self, db: Session):
        self.db = db

    def get_user_context(self, user_id: str) -> UserContext:
        rows = (
            self.db.query(Enrollment.course_id, Enrollment.role, Term.is_active)
            .join(Course, Course.id == Enrollment.course_id)
            .join(Term, Term.id == Course.term_id)
            .filter(Enrollment.user_id == user_id)
            .all()
        )
        team_ids = [
            team_id for (team_id,) in
            self.db.query(TeamMembership.team_id).filter(TeamMembership.user_id == user_id).all()
        ]
        return UserContext(
            user_id=user_id,
            enrollments=tuple(
                EnrollmentContext(course_id=course_id, role=CourseRole(role), term_active=bool(active))
                for course_id, role, active in rows
            ),
            team_ids=tuple(team_ids),
        )


class SqlUserDirectory:
    def __init__(self, db: Session):
        self.db = db

    def existing_user_ids(self, user_ids: Iterable[str]) -> Set[str]:
        ids = set(user_ids)
        if not ids:
            return set()
        return {uid for (uid,) in self.db.query(User.id).filter(User.id.in_(ids)).all()}

    def enrolled_user_ids(self, course_id: str, user_ids: Iterable[str]) -> Set[str]:
        ids = set(user_ids)
        if not ids:
            return set()
        rows = (
            self.db.query(Enrollment.user_id)
            .filter(Enrollment.course_id == course_id, Enrollment.user_id.in_(ids))
            .all()
        )
        return {uid for (uid,) in rows}


class SqlCourseDirectory:
    def __init__(self, db: Session):
        self.db = db

    def course_exists(self, course_id: str) -> bool:
        return self.db.query(Course.id).filter(Course.id == course_id).first() is not None


    def is_course_term_active(self, course_id: str) -> bool:
        row = (
            self.db.query(Term.is_active)
            .join(Course, Course.term_id == Term.id)
            .filter(Course.id == course_id)
            .first()
        )
        return bool(row and row[0])
