"""Database models for the four persisted collections."""

from .base import Base
from .module import ModuleModel
from .profile import ProfileModel
from .reminder import ReminderModel
from .study_session import StudySessionModel

__all__ = [
    "Base",
    "ModuleModel",
    "ProfileModel",
    "ReminderModel",
    "StudySessionModel",
]
