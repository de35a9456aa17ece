"""Course roles and the capability sets derived from them.

Each operation that grants elevated access names its own set instead of sharing
one "is staff" predicate. Today they are all the staff-equivalent set.
Team Leader is included here although other course operations (roster
management, staff dashboards) only treat Professor and TA as staff.
"""
import enum


class CourseRole(str, enum.Enum):
    PROFESSOR = "Professor"
    TA = "TA"
    TUTOR = "Tutor"
    TEAM_LEADER = "Team Leader"
    STUDENT = "Student"


STAFF_EQUIVALENT_ROLES = frozenset({
    CourseRole.PROFESSOR,
    CourseRole.TA,
    CourseRole.TUTOR,
    CourseRole.TEAM_LEADER,
})

# Fetch a single meeting without being its creator or a participant
CAN_VIEW_ANY_MEETING = STAFF_EQUIVALENT_ROLES

# List every meeting of a course instead of only one's own
CAN_VIEW_ALL_MEETINGS = STAFF_EQUIVALENT_ROLES

# Delete meetings created by someone else
CAN_DELETE_ANY_MEETING = STAFF_EQUIVALENT_ROLES

# See other users' participation rows
CAN_VIEW_ALL_PARTICIPANTS = STAFF_EQUIVALENT_ROLES
