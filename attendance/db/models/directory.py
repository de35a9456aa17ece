"""Directory models: users, terms, courses, enrollments and teams.

These tables are owned by the course-management side of the application. The
attendance service only reads them through the collaborators in
``attendance.repositories.directory``.
"""
import uuid

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship

from attendance.core.roles import CourseRole
from attendance.db.base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(320), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")

    enrollments = relationship("Enrollment", back_populates="user", cascade="all, delete-orphan")


class Term(Base):
    __tablename__ = "terms"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(50), nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)

    courses = relationship("Course", back_populates="term")


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=_uuid)
    term_id = Column(String(36), ForeignKey("terms.id"), nullable=False)
    code = Column(String(20), nullable=False)
    name = Column(String(200), nullable=False)

    term = relationship("Term", back_populates="courses")
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    role = Column(
        Enum(CourseRole, name="course_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=CourseRole.STUDENT,
    )

    user = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")

    __table_args__ = (
        Index("idx_enrollments_course", "course_id"),
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
    )


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=_uuid)
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)

    memberships = relationship("TeamMembership", back_populates="team", cascade="all, delete-orphan")


class TeamMembership(Base):
    __tablename__ = "team_memberships"

    id = Column(String(36), primary_key=True, default=_uuid)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    team = relationship("Team", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_membership"),
    )
