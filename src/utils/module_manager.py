"""Learning module management.

Modules are readable by everyone; only teachers create them and only the
owning teacher edits or deletes one.
"""

import logging
import re
from typing import List, Optional, Tuple

from core.context import StudyContext, require_user
from core.exceptions import LearningModuleNotFoundError, PermissionDeniedError
from schemas.module import Module, ModuleUpdate
from utils.entity_store import EntityData, EntityKind, EntityStore, validate_data

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r"<[^>]*>?")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_markup(content: str) -> str:
    """Remove anything that looks like a markup tag."""
    return _TAG_PATTERN.sub("", content)


def export_module_text(module: Module) -> Tuple[str, str]:
    """Render a module as a downloadable plain-text file.

    Returns:
        Tuple of (filename, file body).
    """
    filename = f"{_WHITESPACE_PATTERN.sub('_', module.title)}.txt"
    body = (
        f"TITLE: {module.title}\n\n"
        f"DESCRIPTION: {module.description}\n\n"
        f"CONTENT:\n{strip_markup(module.content)}"
    )
    return filename, body


class ModuleManager:
    """Manages module operations over an EntityStore."""

    def __init__(self, store: EntityStore):
        self.store = store

    def list_modules(self, query: Optional[str] = None) -> List[Module]:
        """List modules, newest first.

        Args:
            query: Optional case-insensitive substring of the module title.
        """
        modules = self.store.list(EntityKind.MODULES)
        needle = (query or "").strip().lower()
        if not needle:
            return modules
        return [m for m in modules if needle in m.title.lower()]

    def list_modules_by_owner(self, teacher_id: str) -> List[Module]:
        return [m for m in self.list_modules() if m.teacher_id == teacher_id]

    def get_module(self, module_id: str) -> Module:
        """Read a module.

        Raises:
            LearningModuleNotFoundError: If the module does not exist.
        """
        module = self.store.get(EntityKind.MODULES, module_id)
        if module is None:
            raise LearningModuleNotFoundError(module_id)
        return module

    def _get_owned_module(self, context: Optional[StudyContext], module_id: str) -> Module:
        user = require_user(context)
        module = self.get_module(module_id)
        if module.teacher_id != user.id:
            raise PermissionDeniedError("You can only change modules you created.")
        return module

    def create_module(
        self,
        context: Optional[StudyContext],
        title: str,
        description: str = "",
        content: str = "",
    ) -> Module:
        """Publish a new module owned by the signed-in teacher.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
            PermissionDeniedError: If the user is not a teacher.
            ValidationError: If the title is empty.
        """
        user = require_user(context)
        if user.role != "teacher":
            raise PermissionDeniedError("Only teachers can publish modules.")
        module = self.store.create(
            EntityKind.MODULES,
            {
                "title": title,
                "description": description,
                "content": content,
                "teacher_id": user.id,
            },
        )
        logger.info("Teacher %s published module %s", user.id, module.id)
        return module

    def update_module(
        self, context: Optional[StudyContext], module_id: str, data: EntityData
    ) -> Module:
        """Edit title, description or content of an owned module.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
            LearningModuleNotFoundError: If the module does not exist.
            PermissionDeniedError: If the user does not own the module.
            ValidationError: If a field is unknown or invalid.
        """
        self._get_owned_module(context, module_id)
        patch = validate_data(ModuleUpdate, data)
        updated = self.store.update(EntityKind.MODULES, module_id, patch)
        if updated is None:
            raise LearningModuleNotFoundError(module_id)
        return updated

    def delete_module(self, context: Optional[StudyContext], module_id: str) -> None:
        """Delete an owned module. Sessions recorded on it are kept.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
            LearningModuleNotFoundError: If the module does not exist.
            PermissionDeniedError: If the user does not own the module.
        """
        self._get_owned_module(context, module_id)
        self.store.delete(EntityKind.MODULES, module_id)
        logger.info("Deleted module %s", module_id)
