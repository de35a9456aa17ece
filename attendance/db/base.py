"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from attendance.db.models.directory import User, Term, Course, Enrollment, Team, TeamMembership  # noqa: F401, E402
from attendance.db.models.meeting import Meeting  # noqa: F401, E402
from attendance.db.models.participant import Participant  # noqa: F401, E402
from attendance.db.models.meeting_code import MeetingCode  # noqa: F401, E402
