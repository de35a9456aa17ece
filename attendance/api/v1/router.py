"""Main API router for v1."""
from fastapi import APIRouter

from attendance.api.v1.endpoints import meeting_codes, meetings, participants
from attendance.schemas import ErrorResponse

# Error envelope shared by every attendance route, for the OpenAPI schema
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse, "description": description}
    for status_code, description in (
        (400, "Validation error"),
        (403, "Not authorized"),
        (404, "Not found"),
        (409, "Conflicting write"),
    )
}

api_router = APIRouter(prefix="/api/v1")

attendance_router = APIRouter(prefix="/attendance", responses=ERROR_RESPONSES)
attendance_router.include_router(meetings.router, prefix="/meeting", tags=["Meetings"])
attendance_router.include_router(participants.router, prefix="/participant", tags=["Participants"])
attendance_router.include_router(meeting_codes.router, prefix="/meeting_code", tags=["Meeting Codes"])

api_router.include_router(attendance_router)
