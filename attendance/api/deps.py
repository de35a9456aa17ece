"""Shared API dependencies."""
from fastapi import Depends
from sqlalchemy.orm import Session

from attendance.core.security import get_current_user_id
from attendance.db import get_db
from attendance.services import AttendanceCoordinator


def get_coordinator(db: Session = Depends(get_db)) -> AttendanceCoordinator:
    """Attendance coordinator bound to the request's database session."""
    return AttendanceCoordinator.from_session(db)


__all__ = ["get_db", "get_current_user_id", "get_coordinator"]
