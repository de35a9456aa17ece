"""General utility functions."""
import io
import secrets
from datetime import date, datetime, time, timezone
from typing import Union
from urllib.parse import quote

import qrcode
from qrcode.image.svg import SvgImage

from attendance.core.constants import (
    MEETING_CODE_ALPHABET,
    MEETING_CODE_LENGTH,
    QR_IMAGE_SIZE,
)


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_within_window(now: datetime, start: datetime, end: datetime) -> bool:
    """
    Check whether an instant falls inside a validity window.

    Both bounds are inclusive and every value is normalized to UTC first, so
    wall-clock offsets of the stored values do not matter.
    """
    return to_utc(start) <= to_utc(now) <= to_utc(end)


def series_cutoff(meeting_date: Union[date, datetime]) -> datetime:
    """
    Return UTC midnight of the day a meeting takes place.

    Series instances dated on or after this instant are removed when a
    meeting is deleted together with its future recurrences.
    """
    if isinstance(meeting_date, datetime):
        meeting_date = to_utc(meeting_date).date()
    return datetime.combine(meeting_date, time.min, tzinfo=timezone.utc)


def generate_meeting_code(length: int = MEETING_CODE_LENGTH) -> str:
    """Generate a random uppercase alphanumeric self check-in code."""
    return "".join(secrets.choice(MEETING_CODE_ALPHABET) for _ in range(length))


def build_checkin_url(base_url: str, meeting_id: str, code: str) -> str:
    """Link a participant opens (usually by scanning the QR code) to check in."""
    return f"{base_url}/attendance/record/{meeting_id}/{code}"


def build_qr_url(render_url: str, checkin_url: str) -> str:
    """URL of an externally rendered QR image encoding the check-in link."""
    return f"{render_url}?data={quote(checkin_url, safe='')}&size={QR_IMAGE_SIZE}"


def generate_qr_code(data: str) -> io.BytesIO:
    """Generate a QR code as an in-memory SVG document.

    Args:
        data: The data to encode in the QR code

    Returns:
        io.BytesIO: buffer positioned at the start of the SVG image
    """
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(image_factory=SvgImage)
    buffer = io.BytesIO()
    img.save(buffer)
    buffer.seek(0)
    return buffer
