"""User domain schemas.

Request and response schemas for user operations.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import EmailStr, Field, field_serializer
from sqlmodel import SQLModel

from academy.user.models import UserRole


class SyncStatus(str, Enum):
    """Outcome of mirroring a role change into the identity provider.

    Only the database role is authoritative; every value here is advisory.
    """

    SYNCED = "synced"
    ID_MISMATCH_SYNCED = "id-mismatch-synced"
    IDENTITY_NOT_FOUND = "identity-not-found"
    SYNC_ERROR = "sync-error"


class UserRead(SQLModel):
    """Response schema for a user record."""

    id: str
    email: str | None
    name: str | None
    student_name: str | None
    role: UserRole
    created_at: datetime

    @field_serializer("created_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Format datetime as ISO 8601 string in UTC with a Z suffix."""
        # Naive values come from SQLite and are already UTC (see TimestampMixin).
        if value.tzinfo is not None:
            utc_value = value.astimezone(UTC)
        else:
            utc_value = value.replace(tzinfo=UTC)
        return utc_value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


class UserCreate(SQLModel):
    """Schema for staff creating a user who has not signed in yet."""

    name: str = Field(min_length=2, max_length=100)
    student_name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    role: UserRole = UserRole.MEMBER


class UserCreated(SQLModel):
    message: str
    user: UserRead


class UserUpdate(SQLModel):
    """Schema for admin updating a user.

    Fields left unset are not touched; student_name may be cleared with null,
    name may not.
    """

    name: str | None = Field(default=None, min_length=2, max_length=100)
    student_name: str | None = Field(default=None, max_length=100)
    role: UserRole | None = None


class UserUpdated(SQLModel):
    """Response for an admin update.

    sync_status is null when the update did not touch the role.
    """

    message: str
    user: UserRead
    sync_status: SyncStatus | None = None
    warning: str | None = None


class IdentityLinkRead(SQLModel):
    """How one Firebase identity relates to the users table."""

    provider_id: str
    email: str | None
    user_id: str | None
    status: str
