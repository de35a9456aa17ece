"""Authorization predicates over a caller's resolved user context."""
from typing import AbstractSet, Optional

from attendance.core.exceptions import AuthorizationError
from attendance.core.roles import STAFF_EQUIVALENT_ROLES, CourseRole
from attendance.db.models import Meeting
from attendance.repositories.directory import UserContext


class AuthorizationGuard:
    """
    Stateless decision logic shared by the attendance services.

    The predicates answer questions; the ``require_*`` variants raise
    AuthorizationError with the message shown to the caller.
    """

    @staticmethod
    def is_course_member(ctx: UserContext, course_id: str) -> bool:
        return ctx.enrollment_for(course_id) is not None

    @staticmethod
    def is_active_course_member(ctx: UserContext, course_id: str) -> bool:
        enrollment = ctx.enrollment_for(course_id)
        return enrollment is not None and enrollment.term_active

    @staticmethod
    def is_staff_equivalent(role: Optional[CourseRole]) -> bool:
        return role in STAFF_EQUIVALENT_ROLES

    @staticmethod
    def has_capability(ctx: UserContext, course_id: str, capability: AbstractSet[CourseRole]) -> bool:
        enrollment = ctx.enrollment_for(course_id)
        return enrollment is not None and enrollment.role in capability

    @staticmethod
    def is_creator(meeting: Meeting, user_id: str) -> bool:
        return meeting.creator_id == user_id

    def require_course_member(self, ctx: UserContext, course_id: str, action: str) -> None:
        if not self.is_course_member(ctx, course_id):
            raise AuthorizationError(f"Not authorized to {action} for this course")

    def require_active_course_member(self, ctx: UserContext, course_id: str, action: str) -> None:
        if not self.is_active_course_member(ctx, course_id):
            raise AuthorizationError(f"Not authorized to {action} for this course")

    def require_creator(self, meeting: Meeting, user_id: str, action: str) -> None:
        if not self.is_creator(meeting, user_id):
            raise AuthorizationError(f"Only the meeting creator can {action}")
