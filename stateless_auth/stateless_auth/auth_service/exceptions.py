"""
Domain errors raised by the auth service core.

Every error carries the HTTP status it maps to and a client-safe ``detail``.
The exception's own message is for the log only and is never sent back.
"""
from typing import Optional


class AuthServiceError(Exception):
    status_code = 500
    detail = "Internal server error"


class ValidationError(AuthServiceError):
    status_code = 400
    detail = "Missing or invalid fields"

    def __init__(self, message: str = "", detail: Optional[str] = None):
        super().__init__(message or self.detail)
        if detail:
            self.detail = detail


class DuplicateEmail(AuthServiceError):
    status_code = 400
    detail = "Email already exists"


# Login failures share status and detail so the response does not reveal
# whether the account exists.
class LoginFailed(AuthServiceError):
    status_code = 401
    detail = "Invalid credentials"


class NotFound(LoginFailed):
    pass


class InvalidCredentials(LoginFailed):
    pass


class AccessDenied(AuthServiceError):
    status_code = 403
    detail = "Access denied"
    reason = "access_denied"


class MissingToken(AccessDenied):
    reason = "missing_token"


class InvalidToken(AccessDenied):
    reason = "invalid_token"


class Expired(AccessDenied):
    reason = "expired"


class HashingError(AuthServiceError):
    pass


class SigningError(AuthServiceError):
    pass
