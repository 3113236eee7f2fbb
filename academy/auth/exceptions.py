"""Auth domain exceptions.

401s mean "who are you?" (no or bad credentials); 403s mean the caller is
known but their academy role does not allow the action.
"""

from academy.core.exceptions import AppException


# Authentication errors (401)
class AuthenticationError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when no credentials were presented."""

    error_type = "invalid_credentials"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer ID token or session cookie fails verification."""

    error_type = "invalid_token"

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message)


class SessionCookieError(AuthenticationError):
    """Raised when a session cookie cannot be verified or minted."""

    error_type = "session_cookie_error"

    def __init__(self, message: str = "Session cookie error"):
        super().__init__(message)


# Authorization errors (403)
class AuthorizationError(AppException):
    """Base class for authorization failures."""

    status_code = 403
    error_type = "authorization_error"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class AdminRequiredError(AuthorizationError):
    """Raised when the caller's role is not ADMIN."""

    error_type = "admin_required"

    def __init__(self, message: str = "Admin privileges required"):
        super().__init__(message)


class StaffRequiredError(AuthorizationError):
    """Raised when an admin or coach role is required."""

    error_type = "staff_required"

    def __init__(self, message: str = "Admin or coach privileges required"):
        super().__init__(message)
