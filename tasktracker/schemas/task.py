from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(value: datetime | None) -> datetime | None:
    """Deadlines are stored and returned in UTC; naive values are taken as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TaskWrite(BaseModel):
    """Body of POST /api/tasks and PUT /api/tasks/{id}.

    ``title`` is optional at the schema level so that a missing title is
    reported by the service as a 400, not as a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    category: str | None = None
    description: str | None = None
    deadline: datetime | None = None
    status: str | None = None
    user_name: str | None = Field(default=None, alias="userName")

    @field_validator("deadline", mode="before")
    @classmethod
    def _blank_deadline_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("deadline")
    @classmethod
    def _deadline_in_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class TaskRead(BaseModel):
    """A task with its user/category/status ids replaced by their names."""

    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(alias="TaskID")
    title: str = Field(alias="Title")
    description: str | None = Field(alias="Description")
    deadline: datetime | None = Field(alias="Deadline")
    user_name: str | None = Field(alias="UserName")
    category: str | None = Field(alias="Category")
    status: str | None = Field(alias="Status")


class TaskCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    task_id: int = Field(alias="TaskID")


class TaskMessage(BaseModel):
    message: str
