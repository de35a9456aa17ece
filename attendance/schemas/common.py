"""Common response schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from attendance.core.utils import to_utc


class SuccessResponse(BaseModel):
    """Standard success response."""
    success: bool = True
    message: Optional[str] = None


class ErrorDetail(BaseModel):
    """Error detail structure."""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response for documentation."""
    success: bool = False
    error: ErrorDetail


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Field validator helper: stored instants come back naive from SQLite."""
    if value is None:
        return None
    return to_utc(value)
