"""Meeting code endpoints."""
from fastapi import APIRouter, Depends, Request, Response

from attendance.api.deps import get_coordinator, get_current_user_id
from attendance.core.rate_limit import RATE_LIMITS, limiter
from attendance.schemas import MeetingCodeResponse, ParticipantResponse
from attendance.services import AttendanceCoordinator

router = APIRouter()


@router.get("/record/{meeting_id}/{code}", response_model=ParticipantResponse)
@limiter.limit(RATE_LIMITS["redeem_code"])
async def redeem_code_endpoint(
    request: Request,
    meeting_id: str,
    code: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """
    Record the caller's attendance with a meeting code.

    This is the target of the check-in link encoded in the QR code. The caller
    must already be a participant; the code is only accepted between the
    meeting's scheduled start and end.

    Args:
        request: FastAPI Request (for rate limiting)
        meeting_id: meeting the code was issued for
        code: the code, case-insensitive

    Returns:
        ParticipantResponse with ``present`` set and the redemption time

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 403 if the caller is not a participant or the code is
            used outside its validity window
        HTTPException: 404 if the meeting or code does not exist
        HTTPException: 429 if the rate limit is exceeded

    Rate Limit:
        200 requests per minute per IP
    """
    return coordinator.redeem_code(user_id, meeting_id, code)


@router.post("/{meeting_id}", response_model=MeetingCodeResponse, status_code=201)
@limiter.limit(RATE_LIMITS["issue_code"])
async def issue_code_endpoint(
    request: Request,
    meeting_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """Issue a new meeting code (creator only). Older codes stay redeemable."""
    return coordinator.issue_code(user_id, meeting_id)


@router.get("/{meeting_id}", response_model=MeetingCodeResponse)
async def get_current_code_endpoint(
    meeting_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """Most recently issued code of a meeting (creator only)."""
    return coordinator.get_current_code(user_id, meeting_id)


@router.get("/{meeting_id}/qr")
async def get_qr_code_endpoint(
    meeting_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: AttendanceCoordinator = Depends(get_coordinator),
):
    """SVG QR image of the current code's check-in link, for projecting in class."""
    svg = coordinator.render_qr(user_id, meeting_id)
    return Response(
        content=svg,
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-store"},
    )
