"""
Error taxonomy for the course service.

Every error carries the HTTP status and the user-facing message used by the
exception handlers in ``main.py``. Messages never include password hashes,
tokens or the signing secret.
"""
from typing import Dict, Optional


class CourseServiceError(Exception):
    status_code: int = 500
    message: str = "Server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(CourseServiceError):
    status_code = 400
    message = "All fields are required"


class ConflictError(CourseServiceError):
    status_code = 409
    message = "Resource already exists"


class DuplicateUserError(ConflictError):
    # /register has always answered duplicates with 400
    status_code = 400
    message = "User already exists"


class AlreadyPurchasedError(ConflictError):
    message = "You have already purchased this course."


class InvalidCredentialsError(CourseServiceError):
    status_code = 401
    message = "Invalid email or password"


class TokenError(CourseServiceError):
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class MissingTokenError(TokenError):
    message = "No token provided"


class InvalidTokenError(TokenError):
    message = "Invalid token"


class ExpiredTokenError(TokenError):
    message = "Token expired"


class UnauthorizedError(CourseServiceError):
    status_code = 403
    message = "Unauthorized"


class ForbiddenError(CourseServiceError):
    status_code = 403
    message = "Access denied. You have not purchased this course."


class CourseNotFoundError(CourseServiceError):
    status_code = 404
    message = "Course not found"


class ServerMisconfigurationError(CourseServiceError):
    status_code = 500
    message = "Server misconfiguration"


class StoreError(CourseServiceError):
    status_code = 500
    message = "Database error"
