"""Program domain models."""

from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

from academy.core.ids import new_id
from academy.core.mixins import TimestampMixin

if TYPE_CHECKING:
    from academy.group.models import Group


class Program(TimestampMixin, SQLModel, table=True):
    """A training curriculum that groups can be assigned to."""

    __tablename__: str = "programs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=128)
    title: str = Field(max_length=200)
    description: str | None = Field(default=None)

    groups: list["Group"] = Relationship(back_populates="program")
