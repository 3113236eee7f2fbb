"""App-wide exception hierarchy.

Every error that crosses the HTTP boundary is an AppException subclass with
its own status_code and error_type. Domain packages (auth, user, group)
derive their specific errors from the bases defined here.
"""


class AppException(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


# Not found errors (404)
class NotFoundError(AppException):
    """A user, group or program that does not exist."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


# Conflict errors (409)
class ConflictError(AppException):
    """A write that collides with an existing id or unique email."""

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)


# Validation errors (400)
class ValidationError(AppException):
    """Input the schemas accept but the domain rejects (400)."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class BadRequestError(ValidationError):
    """Semantically invalid request, e.g. unknown member ids."""

    error_type = "bad_request"

    def __init__(self, message: str = "Bad request"):
        super().__init__(message)


# Upstream errors (502)
class ExternalServiceError(AppException):
    """Failures of services we call out to (Firebase)."""

    status_code = 502
    error_type = "external_service_error"

    def __init__(self, message: str = "External service error"):
        super().__init__(message)


class ProviderError(ExternalServiceError):
    """Raised when the identity provider fails or returns an unexpected response."""

    error_type = "provider_error"

    def __init__(self, message: str = "Identity provider returned an error"):
        super().__init__(message)


# Internal errors (500)
class InternalError(AppException):
    """A fault on our side the client cannot fix."""

    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str = "An internal error occurred"):
        super().__init__(message)


class StoreError(InternalError):
    """Raised when a database write fails for a reason other than a key conflict."""

    error_type = "store_error"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)
