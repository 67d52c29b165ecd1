"""
Typed application errors
Every failure that reaches the request boundary is one of these; the
handlers in app.core.errors turn them into response envelopes
"""
from typing import List, Optional

from app.utils.validation import FieldError


class AppError(Exception):
    """Base class for errors rendered as an envelope"""

    status_code = 500
    message = "An unexpected error occurred. Please try again later."

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[FieldError]] = None,
        detail: Optional[str] = None
    ):
        self.message = message or self.message
        self.errors = errors
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AppError):
    """Client-correctable input"""
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        super().__init__(message, errors=errors)


class AuthenticationError(AppError):
    status_code = 401
    message = "Could not validate credentials"


class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found"


class PayloadTooLargeError(AppError):
    status_code = 413
    message = "Request body is too large"


class RateLimitError(AppError):
    """Client exceeded the submission ceiling for its window"""
    status_code = 429
    message = "Too many requests from this IP, please try again later."

    def __init__(self, retry_after: int, message: Optional[str] = None):
        self.retry_after = retry_after
        super().__init__(message)


class PersistenceError(AppError):
    """Remote backend unreachable or rejected the operation"""
    status_code = 503
    message = "The database is temporarily unavailable. Please try again later."


class UploadError(AppError):
    """
    Resume intake failure
    400 when the file itself is unacceptable, 503 when storage failed
    """
    status_code = 400
    message = "Resume upload failed"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[FieldError]] = None,
        detail: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message, errors=errors, detail=detail)
        if status_code is not None:
            self.status_code = status_code
