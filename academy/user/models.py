"""User domain models.

SQLModel table definition for User.
"""

from enum import Enum

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from academy.core.ids import new_id
from academy.core.mixins import TimestampMixin


class UserRole(str, Enum):
    """Academy role.

    - ADMIN: manages users, roles, groups and programs
    - COACH: reads users and groups, creates students
    - MEMBER: sees only their own record
    """

    ADMIN = "ADMIN"
    COACH = "COACH"
    MEMBER = "MEMBER"


STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.COACH})


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    `id` equals the Firebase uid once the user has signed in at least once.
    """

    __tablename__: str = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=128)
    email: EmailStr | None = Field(
        default=None, index=True, unique=True, max_length=255
    )
    name: str | None = Field(default=None, max_length=100)
    student_name: str | None = Field(default=None, max_length=100)
    role: UserRole = Field(default=UserRole.MEMBER, max_length=20)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
