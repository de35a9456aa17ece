"""Pydantic schemas for request/response validation."""
from attendance.schemas.meeting import (
    MeetingCreate,
    MeetingUpdate,
    MeetingResponse,
    MeetingCreateResponse,
    MeetingDeleteResponse,
)
from attendance.schemas.participant import (
    ParticipantRecord,
    ParticipantBatchCreate,
    ParticipantUpdate,
    ParticipantListFilters,
    ParticipantResponse,
)
from attendance.schemas.meeting_code import MeetingCodeResponse
from attendance.schemas.common import SuccessResponse, ErrorResponse, ErrorDetail

__all__ = [
    "MeetingCreate",
    "MeetingUpdate",
    "MeetingResponse",
    "MeetingCreateResponse",
    "MeetingDeleteResponse",
    "ParticipantRecord",
    "ParticipantBatchCreate",
    "ParticipantUpdate",
    "ParticipantListFilters",
    "ParticipantResponse",
    "MeetingCodeResponse",
    "SuccessResponse",
    "ErrorResponse",
    "ErrorDetail",
]
