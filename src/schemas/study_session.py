"""Study session schema definitions.

This module defines the immutable StudySession record and the request and
response bodies used to record timer runs and show session history.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StudySession(BaseModel):
    """One completed, recorded study interval."""

    id: str = Field(description="The unique identifier for the session.")
    student_id: str = Field(description="The user id of the student who studied.")
    module_id: str = Field(description="The module that was studied.")
    duration: int = Field(ge=0, description="Accumulated study time in whole seconds.")
    timestamp: str = Field(description="ISO timestamp of completion.")


class StudySessionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    student_id: str
    module_id: str
    duration: int = Field(ge=0)


class RecordSessionRequest(BaseModel):
    module_id: str = Field(min_length=1)
    elapsed_seconds: int = Field(
        ge=0, description="Seconds accumulated by the client-side timer."
    )


class RecordSessionResponse(BaseModel):
    recorded: bool = Field(
        description="False when the run was too short and was discarded."
    )
    session: Optional[StudySession] = None


class SessionHistoryEntry(StudySession):
    module_title: str
