"""Group domain models.

A group is a set of users, optionally assigned to one program.
"""

from sqlalchemy import Column, ForeignKey, String
from sqlmodel import Field, Relationship, SQLModel

from academy.core.ids import new_id
from academy.core.mixins import TimestampMixin
from academy.program.models import Program
from academy.user.models import User


class GroupMember(SQLModel, table=True):
    __tablename__: str = "group_members"

    group_id: str = Field(
        sa_column=Column(
            String(128),
            ForeignKey("groups.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    # ON UPDATE CASCADE keeps memberships attached when a user's id is
    # migrated to their Firebase uid.
    user_id: str = Field(
        sa_column=Column(
            String(128),
            ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
            index=True,
        )
    )

    group: "Group" = Relationship(back_populates="members")
    user: User = Relationship()


class Group(TimestampMixin, SQLModel, table=True):
    __tablename__: str = "groups"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=128)
    name: str = Field(max_length=200)
    description: str | None = Field(default=None)
    program_id: str | None = Field(
        default=None,
        sa_column=Column(
            String(128),
            ForeignKey("programs.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )

    program: Program | None = Relationship(back_populates="groups")
    members: list[GroupMember] = Relationship(
        back_populates="group",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
