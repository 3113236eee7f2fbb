"""Auth domain schemas.

Request and response schemas for authentication operations.
"""

from typing import Literal

from pydantic import BaseModel, Field

from academy.user.models import UserRole


class SessionLoginRequest(BaseModel):
    """Firebase ID token obtained by the client after signing in."""

    id_token: str = Field(min_length=1)


class SessionUser(BaseModel):
    """The signed-in user as the web client sees it.

    source is "database" when the local record could be resolved, and
    "claims" when it fell back to the token's custom claims.
    """

    id: str
    email: str | None
    name: str | None
    role: UserRole
    source: Literal["database", "claims"]


class AuthMessage(BaseModel):
    """Generic auth message response."""

    message: str
