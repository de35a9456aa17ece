"""Meeting endpoints."""
from typing import Any, List

from fastapi import APIRouter, Body, Depends, Query

from attendance.api.deps import get_coordinator, get_current_user_id
from attendance.schemas import (
    MeetingCreateResponse,
    MeetingDeleteResponse,
    MeetingResponse,
    MeetingUpdate,
)
from attendance.services import AttendanceCoordinator

router = APIRouter()


@router.get("/list/{course_id}", response_model=List[MeetingResponse])
async def list_meetings_endpoint(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """
    List meetings of a course, ordered by start time.

    Course staff see every meeting; other members only see meetings they
    created or are a participant of.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 403 if the caller is not enrolled in the course
        HTTPException: 404 if the course does not exist
    """
    return coordinator.get_meeting_list(user_id, course_id)


@router.get("/{meeting_id}", response_model=MeetingResponse)
async def get_meeting_endpoint(
    meeting_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """Fetch a single meeting visible to the caller."""
    return coordinator.get_meeting(user_id, meeting_id)


@router.post("/", response_model=MeetingCreateResponse, status_code=201)
async def create_meeting_endpoint(
    payload: Any = Body(None),
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """
    Create a meeting in a course the caller is actively enrolled in.

    The caller becomes the creator and is added as a participant together with
    every id in ``participant_ids``. A first meeting code is issued right away.
    With ``is_recurring`` and ``recurrence_weeks`` the meeting is repeated
    weekly; ``parent_meeting_id`` attaches it to an existing series instead.

    The body is validated after the course membership check, so callers
    outside the course get 403 whatever they send.

    Returns:
        MeetingCreateResponse with the meeting, its participants, the initial
        meeting code and any weekly recurrences

    Raises:
        HTTPException: 400 if validation fails (missing fields, end before start,
            participants not enrolled in the course)
        HTTPException: 401 if not authenticated
        HTTPException: 403 if the caller is not actively enrolled in the course
        HTTPException: 404 if ``parent_meeting_id`` does not exist

    Example:
        Request:
            POST /api/v1/attendance/meeting/
            Authorization: Bearer eyJhbGc...
            {
                "course_id": "c0ffee00-0000-4000-8000-000000000001",
                "title": "Lab section 3",
                "start_time": "2026-01-12T15:00:00Z",
                "end_time": "2026-01-12T16:00:00Z",
                "meeting_date": "2026-01-12",
                "participant_ids": ["5b1d..."],
                "is_recurring": true,
                "recurrence_weeks": 9
            }
    """
    return coordinator.create_meeting(user_id, payload)


@router.patch("/{meeting_id}", response_model=MeetingResponse, status_code=201)
async def update_meeting_endpoint(
    meeting_id: str,
    patch: MeetingUpdate,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """
    Update a meeting (creator only).

    Only fields present in the body change. ``description`` and ``location``
    may be cleared with null.
    """
    return coordinator.update_meeting(user_id, meeting_id, patch)


@router.delete("/{meeting_id}", response_model=MeetingDeleteResponse)
async def delete_meeting_endpoint(
    meeting_id: str,
    delete_future: bool = Query(False, alias="deleteFuture"),
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """
    Delete a meeting, or with ``deleteFuture=true`` the meeting and every
    instance of its series on or after the meeting's date.

    Meetings that already ended can only be removed with ``deleteFuture``.
    """
    return coordinator.delete_meeting(user_id, meeting_id, delete_future)
