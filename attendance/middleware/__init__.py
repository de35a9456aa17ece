"""HTTP middleware."""
from attendance.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
