"""Profile database model.

This module defines the user profile table using SQLAlchemy.
"""

from sqlalchemy import Column, Integer, String
from .base import Base


class ProfileModel(Base):
    """User profile database model."""

    __tablename__ = "profiles"

    # Insertion order, used for most-recent-first listings
    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, nullable=False)
    password_hash = Column(String, nullable=True)
    role = Column(String, nullable=False)  # 'teacher' or 'student'
