"""Backend-agnostic entity store contract.

This module defines the four persisted collections, the closed create/update
schemas per collection, and the abstract ``EntityStore`` every backend
implements. Record construction and partial-update merging live here so both
backends validate and stamp records identically.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, Union

import pytz
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError
from schemas.module import Module, ModuleCreate, ModuleUpdate
from schemas.reminder import ReminderCreate, ReminderUpdate, ReviewReminder
from schemas.study_session import StudySession, StudySessionCreate
from schemas.user import ProfileUpdate, User, UserCreate

logger = logging.getLogger(__name__)

EntityData = Union[Mapping[str, Any], BaseModel]


class EntityKind(str, Enum):
    """The persisted collections, named after the backend tables."""

    PROFILES = "profiles"
    MODULES = "modules"
    SESSIONS = "sessions"
    REMINDERS = "reminders"


@dataclass(frozen=True)
class EntitySchema:
    entity: Type[BaseModel]
    create: Type[BaseModel]
    # None means records of this kind are immutable
    update: Optional[Type[BaseModel]] = None
    timestamp_field: Optional[str] = None


ENTITY_SCHEMAS: Dict[EntityKind, EntitySchema] = {
    EntityKind.PROFILES: EntitySchema(User, UserCreate, ProfileUpdate),
    EntityKind.MODULES: EntitySchema(Module, ModuleCreate, ModuleUpdate, "created_at"),
    EntityKind.SESSIONS: EntitySchema(StudySession, StudySessionCreate, None, "timestamp"),
    EntityKind.REMINDERS: EntitySchema(ReviewReminder, ReminderCreate, ReminderUpdate),
}


def utc_now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()


def validate_data(model_cls: Type[BaseModel], data: EntityData) -> BaseModel:
    """Validate ``data`` against ``model_cls``.

    Raises:
        ValidationError: If the data does not fit the schema, including
            unknown fields on closed schemas.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(str(e)) from e


def build_record(kind: EntityKind, data: EntityData) -> BaseModel:
    """Turn create data into a full record with id and timestamp."""
    schema = ENTITY_SCHEMAS[kind]
    payload = validate_data(schema.create, data).model_dump()
    payload["id"] = str(uuid.uuid4())
    if schema.timestamp_field:
        payload[schema.timestamp_field] = utc_now_iso()
    return validate_data(schema.entity, payload)


def merge_update(kind: EntityKind, entity: BaseModel, data: EntityData) -> BaseModel:
    """Merge the given partial fields into ``entity``.

    Only fields present in ``data`` change; everything else is kept.

    Raises:
        ValidationError: If the kind is immutable or a field is unknown or invalid.
    """
    schema = ENTITY_SCHEMAS[kind]
    if schema.update is None:
        raise ValidationError(f"Records in '{kind.value}' cannot be updated")
    patch = validate_data(schema.update, data).model_dump(exclude_unset=True)
    return validate_data(schema.entity, {**entity.model_dump(), **patch})


class EntityStore(ABC):
    """Persistence contract shared by the local fallback and the database.

    Listings are most-recent-first. ``update`` returns None for an unknown id
    and ``delete`` of an unknown id does nothing.
    """

    @abstractmethod
    def list(self, kind: EntityKind) -> List[BaseModel]:
        """Return every record of ``kind``, newest first."""

    @abstractmethod
    def create(self, kind: EntityKind, data: EntityData) -> BaseModel:
        """Validate, stamp and store a new record, returning it."""

    @abstractmethod
    def update(
        self, kind: EntityKind, entity_id: str, data: EntityData
    ) -> Optional[BaseModel]:
        """Merge ``data`` into the record with ``entity_id``."""

    @abstractmethod
    def delete(self, kind: EntityKind, entity_id: str) -> None:
        """Remove the record with ``entity_id`` if it exists."""

    def get(self, kind: EntityKind, entity_id: str) -> Optional[BaseModel]:
        for entity in self.list(kind):
            if entity.id == entity_id:
                return entity
        return None

    # The current-user snapshot is only kept by backends that persist one.

    def remember_user(self, user: User) -> None:
        pass

    def remembered_user(self) -> Optional[User]:
        return None

    def forget_user(self) -> None:
        pass
