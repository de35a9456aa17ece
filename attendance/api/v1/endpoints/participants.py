"""Participant endpoints."""
from typing import List

from fastapi import APIRouter, Depends

from attendance.api.deps import get_coordinator, get_current_user_id
from attendance.schemas import (
    ParticipantBatchCreate,
    ParticipantListFilters,
    ParticipantResponse,
    ParticipantUpdate,
    SuccessResponse,
)
from attendance.services import AttendanceCoordinator

router = APIRouter()


@router.post("/list/", response_model=List[ParticipantResponse])
async def list_participants_endpoint(
    filters: ParticipantListFilters,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """
    Filter participation records by meeting, course, participant and presence.

    One of ``meeting_id`` or ``course_id`` is required. Callers without
    visibility of the whole meeting or course only get their own records.

    Example:
        Request:
            POST /api/v1/attendance/participant/list/
            {"course_id": "c0ffee00-...", "present": true}

        Response (200):
            [
                {
                    "meeting_id": "9f2c...",
                    "participant_id": "5b1d...",
                    "present": true,
                    "attendance_time": "2026-01-12T15:04:31Z",
                    ...
                }
            ]
    """
    return coordinator.list_participants(user_id, filters)


@router.get("/{meeting_id}/{participant_id}", response_model=ParticipantResponse)
async def get_participant_endpoint(
    meeting_id: str,
    participant_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """Fetch one participation record (the participant or the meeting creator)."""
    return coordinator.get_participant(user_id, meeting_id, participant_id)


@router.post("/", response_model=List[ParticipantResponse], status_code=201)
async def add_participants_endpoint(
    batch: ParticipantBatchCreate,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """
    Add participants to one or more meetings the caller created.

    The batch is all-or-nothing: an unknown meeting or user rejects every
    record. Pairs that already exist are skipped.
    """
    return coordinator.add_participants(user_id, batch.participants)


@router.patch("/", response_model=ParticipantResponse)
async def update_participant_endpoint(
    update: ParticipantUpdate,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """Mark a participant present or not present (meeting creator only)."""
    return coordinator.update_participant(
        user_id,
        update.meeting_id,
        update.participant_id,
        update.present,
        update.attendance_time,
    )


@router.delete("/{meeting_id}/{participant_id}", response_model=SuccessResponse)
async def delete_participant_endpoint(
    meeting_id: str,
    participant_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    return coordinator.delete_participant(user_id, meeting_id, participant_id)
