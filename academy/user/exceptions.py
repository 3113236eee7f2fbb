"""User domain exceptions.

User-related exceptions for not found, provisioning and conflict scenarios.
"""

from academy.core.exceptions import AppException, ConflictError, NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when user cannot be found."""

    error_type = "user_not_found"

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class UserNotProvisionedError(AppException):
    """Raised when an authenticated principal has no local user record."""

    status_code = 403
    error_type = "user_not_provisioned"

    def __init__(self, message: str = "User profile not found"):
        super().__init__(message)


class EmailExistsError(ConflictError):
    """Raised when an email is already attached to another user."""

    error_type = "email_exists"

    def __init__(self, message: str = "Email already in use"):
        super().__init__(message)


class UserConflictError(ConflictError):
    """Raised by the repository when a write hits a unique key (id or email)."""

    error_type = "user_conflict"

    def __init__(self, message: str = "User id or email already exists"):
        super().__init__(message)
