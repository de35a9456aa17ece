"""Participant schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool, field_validator

from attendance.core.sanitization import validate_identifier
from attendance.schemas.common import as_utc


class ParticipantRecord(BaseModel):
    meeting_id: str
    participant_id: str
    present: StrictBool = False

    @field_validator('meeting_id', 'participant_id')
    @classmethod
    def validate_identifier_field(cls, v: str) -> str:
        return validate_identifier(v)


class ParticipantBatchCreate(BaseModel):
    participants: List[ParticipantRecord] = Field(..., min_length=1)


class ParticipantUpdate(BaseModel):
    meeting_id: str
    participant_id: str
    present: StrictBool
    attendance_time: Optional[datetime] = None

    @field_validator('meeting_id', 'participant_id')
    @classmethod
    def validate_identifier_field(cls, v: str) -> str:
        return validate_identifier(v)


class ParticipantListFilters(BaseModel):
    meeting_id: Optional[str] = None
    course_id: Optional[str] = None
    participant_id: Optional[str] = None
    present: Optional[StrictBool] = None

    @field_validator('meeting_id', 'course_id', 'participant_id')
    @classmethod
    def validate_identifier_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_identifier(v)


class ParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    meeting_id: str
    participant_id: str = Field(validation_alias=AliasChoices("participant_id", "user_id"))
    present: bool
    attendance_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('attendance_time', 'created_at', 'updated_at')
    @classmethod
    def normalize_instants(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)
