from academy.core.exceptions import NotFoundError


class ProgramNotFoundError(NotFoundError):
    """Raised when a referenced program does not exist."""

    error_type = "program_not_found"

    def __init__(self, message: str = "Program not found"):
        super().__init__(message)
