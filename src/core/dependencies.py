"""Dependency injection module for FastAPI.

This module builds the process-wide entity store for the configured backend
and provides per-request manager instances for the routes.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from config import LOCAL_STORAGE_DIR, STORE_BACKEND
from core.exceptions import ConfigurationError
from utils.entity_store import EntityStore
from utils.key_value_storage import JsonFileStorage
from utils.local_store import LocalEntityStore
from utils.module_manager import ModuleManager
from utils.reminder_manager import ReminderManager
from utils.sql_store import SqlEntityStore
from utils.study_accounting import StudySessionRecorder
from utils.tutor_client import TutorClient, get_tutor_client
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

# Singleton store shared by all requests
_entity_store_instance: Optional[EntityStore] = None


def create_entity_store(backend: str = STORE_BACKEND) -> EntityStore:
    """Build an entity store for the given backend name.

    Args:
        backend: "local" for JSON blobs under LOCAL_STORAGE_DIR, or
            "database" for the SQLAlchemy tables.

    Raises:
        ConfigurationError: If the backend name is unknown.
    """
    if backend == "local":
        logger.info("Using local entity store at %s", LOCAL_STORAGE_DIR)
        return LocalEntityStore(JsonFileStorage(LOCAL_STORAGE_DIR))
    if backend == "database":
        from core.database import SessionLocal, init_db

        init_db()
        logger.info("Using database entity store")
        return SqlEntityStore(SessionLocal)
    raise ConfigurationError(
        f"Unknown STORE_BACKEND '{backend}'. Use 'local' or 'database'."
    )


def get_entity_store() -> EntityStore:
    """Get the EntityStore singleton instance."""
    global _entity_store_instance
    if _entity_store_instance is None:
        _entity_store_instance = create_entity_store()
    return _entity_store_instance


def get_user_manager(store: EntityStore = Depends(get_entity_store)) -> UserManager:
    return UserManager(store)


def get_module_manager(store: EntityStore = Depends(get_entity_store)) -> ModuleManager:
    return ModuleManager(store)


def get_session_recorder(
    store: EntityStore = Depends(get_entity_store),
) -> StudySessionRecorder:
    return StudySessionRecorder(store)


def get_reminder_manager(
    store: EntityStore = Depends(get_entity_store),
) -> ReminderManager:
    return ReminderManager(store)


# Type aliases for dependency injection
EntityStoreDep = Annotated[EntityStore, Depends(get_entity_store)]
UserManagerDep = Annotated[UserManager, Depends(get_user_manager)]
ModuleManagerDep = Annotated[ModuleManager, Depends(get_module_manager)]
SessionRecorderDep = Annotated[StudySessionRecorder, Depends(get_session_recorder)]
ReminderManagerDep = Annotated[ReminderManager, Depends(get_reminder_manager)]
TutorClientDep = Annotated[TutorClient, Depends(get_tutor_client)]
