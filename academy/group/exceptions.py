from academy.core.exceptions import BadRequestError, NotFoundError


class GroupNotFoundError(NotFoundError):
    """Raised when a group does not exist."""

    error_type = "group_not_found"

    def __init__(self, message: str = "Group not found"):
        super().__init__(message)


class UnknownMemberError(BadRequestError):
    """Raised when member_ids reference users that do not exist."""

    error_type = "unknown_member"

    def __init__(self, missing_ids: list[str]):
        self.missing_ids = missing_ids
        super().__init__(f"Unknown member ids: {', '.join(missing_ids)}")
