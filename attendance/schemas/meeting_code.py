"""Meeting code schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from attendance.schemas.common import as_utc


class MeetingCodeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    meeting_id: str
    code: str
    qr_url: str
    valid_start: datetime
    valid_end: datetime
    created_at: Optional[datetime] = None

    @field_validator('valid_start', 'valid_end', 'created_at')
    @classmethod
    def normalize_instants(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)
