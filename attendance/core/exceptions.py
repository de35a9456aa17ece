"""Domain exceptions raised by the attendance services.

Each exception carries the HTTP status and a short machine-readable code so the
API layer can render it without knowing which service raised it.
"""


class AttendanceError(Exception):
    """Base exception for attendance business rule violations."""

    status_code = 500
    code = "attendance_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AttendanceError):
    """Raised when input data is missing, malformed or inconsistent."""

    status_code = 400
    code = "validation_error"


class AuthorizationError(AttendanceError):
    """Raised when the caller lacks the required relationship to a resource."""

    status_code = 403
    code = "not_authorized"


class NotFoundError(AttendanceError):
    """Raised when a referenced meeting, participant, code or course is absent."""

    status_code = 404
    code = "not_found"


class ConflictError(AttendanceError):
    """Raised when a write conflicts with existing state."""

    status_code = 409
    code = "conflict"


class UnexpectedError(AttendanceError):
    """Raised when persistence fails. The message is always generic."""

    status_code = 500
    code = "unexpected_error"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
