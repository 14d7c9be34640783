"""Spaced-review reminder management.

Reminders are created and deleted by students. Nothing marks a reminder
completed when its time passes; deletion is the only way one goes away.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

from core.context import StudyContext, require_user
from core.exceptions import LearningModuleNotFoundError
from schemas.reminder import ReviewReminder
from utils.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)


class ReminderManager:
    """CRUD over the reminders collection."""

    def __init__(self, store: EntityStore):
        self.store = store

    def schedule(
        self,
        context: Optional[StudyContext],
        module_id: str,
        scheduled_time: Union[datetime, str],
    ) -> ReviewReminder:
        """Schedule a review of a module at a user-chosen time.

        The time is stored as given; it is not required to be in the future.
        The module title is copied onto the reminder.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
            LearningModuleNotFoundError: If the module does not exist.
            ValidationError: If the time cannot be parsed.
        """
        user = require_user(context)
        module = self.store.get(EntityKind.MODULES, module_id)
        if module is None:
            raise LearningModuleNotFoundError(module_id)
        reminder = self.store.create(
            EntityKind.REMINDERS,
            {
                "student_id": user.id,
                "module_id": module.id,
                "module_title": module.title,
                "scheduled_time": scheduled_time,
            },
        )
        logger.info("Scheduled reminder %s for %s", reminder.id, user.id)
        return reminder

    def list_pending(self, student_id: str) -> List[ReviewReminder]:
        """Incomplete reminders of a student, most recently created first."""
        return [
            r
            for r in self.store.list(EntityKind.REMINDERS)
            if r.student_id == student_id and not r.completed
        ]

    def delete(self, context: Optional[StudyContext], reminder_id: str) -> None:
        """Delete one of the signed-in student's reminders.

        Unknown ids, and reminders belonging to someone else, are ignored.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
        """
        user = require_user(context)
        reminder = self.store.get(EntityKind.REMINDERS, reminder_id)
        if reminder is None or reminder.student_id != user.id:
            return
        self.store.delete(EntityKind.REMINDERS, reminder_id)
        logger.info("Deleted reminder %s", reminder_id)
