"""Review reminder database model."""

from sqlalchemy import Boolean, Column, Integer, String
from .base import Base


class ReminderModel(Base):
    """Student-scheduled prompt to revisit a module."""

    __tablename__ = "reminders"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    student_id = Column(String, index=True, nullable=False)
    module_id = Column(String, nullable=False)
    # Captured at creation, not kept in sync with module renames
    module_title = Column(String, nullable=False)
    scheduled_time = Column(String, nullable=False)  # ISO format string
    completed = Column(Boolean, nullable=False, default=False)
