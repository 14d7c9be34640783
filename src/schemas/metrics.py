"""Dashboard metric schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.study_session import SessionHistoryEntry


class StudentMetrics(BaseModel):
    total_focus_seconds: int = 0
    total_focus_minutes: int = Field(default=0, description="floor(total seconds / 60)")
    modules_studied: int = Field(default=0, description="Distinct modules across sessions.")
    session_count: int = 0


class TeacherMetrics(BaseModel):
    modules_published: int = 0
    total_views: int = Field(
        default=0,
        description="Sessions by any student on one of the teacher's modules.",
    )


class ProfileMetricsResponse(BaseModel):
    user: dict
    student: Optional[StudentMetrics] = None
    teacher: Optional[TeacherMetrics] = None
    history: List[SessionHistoryEntry] = []
