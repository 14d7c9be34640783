"""Database-backed entity store.

The four collections live in the ``profiles``, ``modules``, ``sessions`` and
``reminders`` tables. Every operation opens its own SQLAlchemy session.
"""

import logging
from typing import Callable, Dict, List, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import DuplicateUserError, PersistenceError
from models import ModuleModel, ProfileModel, ReminderModel, StudySessionModel
from models.base import Base
from utils.converters import entity_to_model, model_to_entity
from utils.entity_store import (
    ENTITY_SCHEMAS,
    EntityData,
    EntityKind,
    EntityStore,
    build_record,
    merge_update,
)

logger = logging.getLogger(__name__)

TABLES: Dict[EntityKind, Type[Base]] = {
    EntityKind.PROFILES: ProfileModel,
    EntityKind.MODULES: ModuleModel,
    EntityKind.SESSIONS: StudySessionModel,
    EntityKind.REMINDERS: ReminderModel,
}


def _row_to_entity(kind: EntityKind, row: Base) -> BaseModel:
    try:
        return model_to_entity(ENTITY_SCHEMAS[kind].entity, row)
    except PydanticValidationError as e:
        raise PersistenceError(f"Stored {kind.value} record {row.id} is malformed") from e


class SqlEntityStore(EntityStore):
    """Entity store over SQLAlchemy tables."""

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        """Initialize SqlEntityStore.

        Args:
            session_factory: Callable returning a new SQLAlchemy Session.
                Defaults to the configured ``SessionLocal``.
        """
        if session_factory is None:
            from core.database import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory

    def list(self, kind: EntityKind) -> List[BaseModel]:
        table = TABLES[kind]
        entity_cls = ENTITY_SCHEMAS[kind].entity
        try:
            with self._session_factory() as db:
                rows = db.query(table).order_by(table.row_id.desc()).all()
                entities = []
                for row in rows:
                    try:
                        entities.append(model_to_entity(entity_cls, row))
                    except PydanticValidationError:
                        logger.warning("Skipping malformed %s record: %s", kind.value, row.id)
                return entities
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list {kind.value}: {e}") from e

    def get(self, kind: EntityKind, entity_id: str) -> Optional[BaseModel]:
        table = TABLES[kind]
        try:
            with self._session_factory() as db:
                row = db.query(table).filter(table.id == entity_id).first()
                if row is None:
                    return None
                return _row_to_entity(kind, row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read {kind.value} {entity_id}: {e}") from e

    def create(self, kind: EntityKind, data: EntityData) -> BaseModel:
        entity = build_record(kind, data)
        try:
            with self._session_factory() as db:
                db.add(entity_to_model(TABLES[kind], entity))
                db.commit()
        except IntegrityError as e:
            # Two registrations can pass the email check at the same time;
            # the unique constraint decides.
            if kind is EntityKind.PROFILES:
                raise DuplicateUserError(entity.email) from e
            raise PersistenceError(f"Failed to create {kind.value}: {e}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create {kind.value}: {e}") from e
        logger.info("Created %s record: %s", kind.value, entity.id)
        return entity

    def update(
        self, kind: EntityKind, entity_id: str, data: EntityData
    ) -> Optional[BaseModel]:
        table = TABLES[kind]
        try:
            with self._session_factory() as db:
                row = db.query(table).filter(table.id == entity_id).first()
                if row is None:
                    logger.debug("Update skipped, no %s record %s", kind.value, entity_id)
                    return None
                current = _row_to_entity(kind, row)
                merged = merge_update(kind, current, data)
                for field, value in merged.model_dump().items():
                    setattr(row, field, value)
                db.commit()
        except IntegrityError as e:
            if kind is EntityKind.PROFILES:
                raise DuplicateUserError(merged.email) from e
            raise PersistenceError(f"Failed to update {kind.value}: {e}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update {kind.value}: {e}") from e
        logger.info("Updated %s record: %s", kind.value, entity_id)
        return merged

    def delete(self, kind: EntityKind, entity_id: str) -> None:
        table = TABLES[kind]
        try:
            with self._session_factory() as db:
                row = db.query(table).filter(table.id == entity_id).first()
                if row is None:
                    return
                db.delete(row)
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete {kind.value}: {e}") from e
        logger.info("Deleted %s record: %s", kind.value, entity_id)
