"""Group domain schemas."""

from datetime import datetime

from pydantic import EmailStr, Field
from sqlmodel import SQLModel

from academy.program.schemas import ProgramSummary


class MemberUser(SQLModel):
    id: str
    name: str | None
    student_name: str | None
    email: EmailStr | None


class GroupMemberRead(SQLModel):
    user_id: str
    user: MemberUser


class GroupRead(SQLModel):
    id: str
    name: str
    description: str | None
    program_id: str | None
    program: ProgramSummary | None
    members: list[GroupMemberRead]
    created_at: datetime
    updated_at: datetime


class GroupCreate(SQLModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    program_id: str | None = Field(default=None, min_length=1)
    member_ids: list[str] = Field(default_factory=list)


class GroupUpdate(SQLModel):
    """Partial update. member_ids replaces the whole member list when given;
    program_id=null unassigns the program."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    program_id: str | None = Field(default=None, min_length=1)
    member_ids: list[str] | None = None
