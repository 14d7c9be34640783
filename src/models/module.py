"""Learning module database model."""

from sqlalchemy import Column, Integer, String, Text
from .base import Base


class ModuleModel(Base):
    """Teacher-authored learning module."""

    __tablename__ = "modules"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    teacher_id = Column(String, index=True, nullable=False)
    created_at = Column(String, nullable=False)  # ISO format string
