from datetime import datetime

from pydantic import Field
from sqlmodel import SQLModel


class ProgramCreate(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None


class ProgramSummary(SQLModel):
    id: str
    title: str


class ProgramRead(ProgramSummary):
    description: str | None
    created_at: datetime
