"""Meeting schemas."""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from attendance.core.constants import MAX_RECURRENCE_WEEKS
from attendance.core.sanitization import (
    sanitize_description,
    sanitize_location,
    sanitize_title,
    validate_identifier,
)
from attendance.schemas.common import SuccessResponse, as_utc
from attendance.schemas.meeting_code import MeetingCodeResponse
from attendance.schemas.participant import ParticipantResponse


class MeetingCreate(BaseModel):
    course_id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: datetime
    meeting_date: date
    meeting_type: int = Field(0, ge=0)
    is_recurring: StrictBool = False
    participant_ids: List[str] = Field(default_factory=list)
    parent_meeting_id: Optional[str] = None
    recurrence_weeks: Optional[int] = Field(None, ge=1, le=MAX_RECURRENCE_WEEKS)

    @field_validator('course_id', 'parent_meeting_id')
    @classmethod
    def validate_identifier_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_identifier(v)

    @field_validator('participant_ids')
    @classmethod
    def validate_participant_ids(cls, v: List[str]) -> List[str]:
        return [validate_identifier(participant_id) for participant_id in v]

    @field_validator('title')
    @classmethod
    def sanitize_title_field(cls, v: str) -> str:
        return sanitize_title(v)

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_description(v)

    @field_validator('location')
    @classmethod
    def sanitize_location_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_location(v)


class MeetingUpdate(BaseModel):
    """
    Partial meeting update.

    Only fields present in the request body are applied; ``model_fields_set``
    tells an omitted field apart from one explicitly set to an empty string.
    Description and location may be cleared with null, the other fields may not.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    meeting_date: Optional[date] = None
    meeting_type: Optional[int] = Field(None, ge=0)
    is_recurring: Optional[StrictBool] = None

    @field_validator('start_time', 'end_time', 'meeting_date', 'meeting_type', 'is_recurring')
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator('title')
    @classmethod
    def sanitize_title_field(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return sanitize_title(v)

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_description(v)

    @field_validator('location')
    @classmethod
    def sanitize_location_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_location(v)

    def changes(self) -> dict:
        """Fields the caller actually sent, with their new values."""
        return self.model_dump(include=self.model_fields_set)


class MeetingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    creator_id: str
    course_id: str
    start_time: datetime
    end_time: datetime
    meeting_date: date
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    meeting_type: int
    is_recurring: bool
    parent_meeting_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('start_time', 'end_time', 'created_at', 'updated_at')
    @classmethod
    def normalize_instants(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class MeetingCreateResponse(BaseModel):
    meeting: MeetingResponse
    participants: List[ParticipantResponse]
    meeting_code: MeetingCodeResponse
    recurrences: List[MeetingResponse] = Field(default_factory=list)


class MeetingDeleteResponse(SuccessResponse):
    deleted_meeting_ids: List[str]
