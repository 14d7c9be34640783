"""Study session database model."""

from sqlalchemy import Column, Integer, String
from .base import Base


class StudySessionModel(Base):
    """One completed, recorded timer run. Rows are never updated."""

    __tablename__ = "sessions"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    student_id = Column(String, index=True, nullable=False)
    # No foreign key: sessions outlive deleted modules
    module_id = Column(String, index=True, nullable=False)
    duration = Column(Integer, nullable=False)  # seconds
    timestamp = Column(String, nullable=False)  # ISO format string
