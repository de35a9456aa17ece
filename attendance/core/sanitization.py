"""Input sanitization utilities."""
import re
from typing import Optional

from attendance.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_LOCATION_LENGTH,
    MAX_TITLE_LENGTH,
)


# Maximum length constraints for security
MAX_MEETING_CODE_LENGTH = 16   # Issued codes are 6 characters
MAX_IDENTIFIER_LENGTH = 64     # UUIDs are 36 characters


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input to prevent XSS attacks.

    Strips HTML tags and normalizes whitespace. HTML entities are not escaped,
    the frontend escapes output when rendering.

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce
        strip_html: Whether to strip HTML tags (default True)

    Returns:
        Sanitized text with HTML tags removed and whitespace normalized

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Reject inputs that still contain HTML-like patterns after stripping
    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_title(title: str) -> str:
    """Sanitize a meeting title. Titles cannot be empty."""
    sanitized = sanitize_text(title, max_length=MAX_TITLE_LENGTH)

    if not sanitized:
        raise ValueError("Meeting title cannot be empty")

    return sanitized


def sanitize_description(description: Optional[str]) -> Optional[str]:
    """Sanitize an optional meeting description. Empty strings are kept."""
    if description is None:
        return None
    return sanitize_text(description, max_length=MAX_DESCRIPTION_LENGTH)


def sanitize_location(location: Optional[str]) -> Optional[str]:
    """Sanitize an optional meeting location. Empty strings are kept."""
    if location is None:
        return None
    return sanitize_text(location, max_length=MAX_LOCATION_LENGTH)


def sanitize_meeting_code(meeting_code: str) -> str:
    """
    Sanitize meeting code input.

    Codes are alphanumeric. Comparison is case-insensitive, so the code is
    returned uppercased.

    Raises:
        ValueError: If meeting code is invalid or too long
    """
    if not isinstance(meeting_code, str):
        raise ValueError("Meeting code must be a string")

    sanitized = meeting_code.strip().upper()

    if not sanitized:
        raise ValueError("Meeting code cannot be empty")

    if len(sanitized) > MAX_MEETING_CODE_LENGTH:
        raise ValueError(f"Meeting code exceeds maximum length of {MAX_MEETING_CODE_LENGTH} characters")

    if not re.match(r'^[A-Z0-9]+$', sanitized):
        raise ValueError("Meeting code can only contain letters and numbers")

    return sanitized


def validate_identifier(identifier: str) -> str:
    """
    Validate a user, course or meeting identifier.

    Identifiers are opaque strings (UUIDs in practice). This prevents malformed
    values from reaching the database.
    """
    if not isinstance(identifier, str):
        raise ValueError("Identifier must be a string")

    identifier = identifier.strip()

    if not identifier:
        raise ValueError("Identifier cannot be empty")

    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        raise ValueError(f"Identifier exceeds maximum length of {MAX_IDENTIFIER_LENGTH} characters")

    if not re.match(r'^[A-Za-z0-9_-]+$', identifier):
        raise ValueError("Identifier format is invalid")

    return identifier
