"""Review reminder schema definitions."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_iso_timestamp(value: Union[str, datetime]) -> str:
    """Return an ISO-8601 string for a datetime or a parseable string.

    No check is made that the time lies in the future.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).isoformat()
    except ValueError as e:
        raise ValueError(f"Invalid timestamp: {value!r}") from e


class ReviewReminder(BaseModel):
    """A student-scheduled prompt to revisit a module."""

    id: str
    student_id: str
    module_id: str
    module_title: str = Field(
        description="Module title captured at creation, not kept in sync."
    )
    scheduled_time: str
    completed: bool = False


class ReminderCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    student_id: str
    module_id: str
    module_title: str
    scheduled_time: Union[datetime, str]

    @field_validator("scheduled_time")
    @classmethod
    def check_scheduled_time(cls, value: Union[datetime, str]) -> str:
        return to_iso_timestamp(value)


class ReminderUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scheduled_time: Optional[Union[datetime, str]] = None
    completed: Optional[bool] = None

    @field_validator("scheduled_time")
    @classmethod
    def check_scheduled_time(cls, value: Optional[Union[datetime, str]]) -> Optional[str]:
        return to_iso_timestamp(value) if value is not None else value


class ScheduleReminderRequest(BaseModel):
    module_id: str = Field(min_length=1)
    scheduled_time: Union[datetime, str]
