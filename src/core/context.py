"""Explicit signed-in user context.

Operations that mutate data take a ``StudyContext`` argument instead of
reading a process-wide "current user".
"""

from dataclasses import dataclass
from typing import Optional

from core.exceptions import NotAuthenticatedError
from schemas.user import User


@dataclass(frozen=True)
class StudyContext:
    """The user on whose behalf an operation runs."""

    user: User

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def is_teacher(self) -> bool:
        return self.user.role == "teacher"

    @property
    def is_student(self) -> bool:
        return self.user.role == "student"


def require_user(context: Optional[StudyContext]) -> User:
    """Return the context's user, or fail when nobody is signed in.

    Raises:
        NotAuthenticatedError: If ``context`` is None.
    """
    if context is None:
        raise NotAuthenticatedError()
    return context.user
