"""Local fallback entity store.

Every collection is one JSON array under a fixed storage key, newest record
first, plus one key holding the signed-in user snapshot. Each operation reads
and rewrites the whole blob.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import PersistenceError
from schemas.user import User
from utils.converters import normalize_record
from utils.entity_store import (
    ENTITY_SCHEMAS,
    EntityData,
    EntityKind,
    EntityStore,
    build_record,
    merge_update,
    utc_now_iso,
)
from utils.key_value_storage import JsonFileStorage

logger = logging.getLogger(__name__)

STORAGE_KEYS: Dict[EntityKind, str] = {
    EntityKind.PROFILES: "tracked_all_users",
    EntityKind.MODULES: "tracked_modules",
    EntityKind.SESSIONS: "tracked_sessions",
    EntityKind.REMINDERS: "tracked_reminders",
}
CURRENT_USER_KEY = "tracked_current_user"

_SEED_CREATED_AT = utc_now_iso()

# Shown until the modules key is written for the first time
DEFAULT_MODULES: List[Dict[str, Any]] = [
    {
        "id": "1",
        "title": "Introduction to Biology",
        "description": "Learn the basics of cell structure and function.",
        "content": (
            "Biology is the study of life. In this module, we explore how cells "
            "are the building blocks of every living organism..."
        ),
        "teacher_id": "t1",
        "created_at": _SEED_CREATED_AT,
    },
    {
        "id": "2",
        "title": "Advanced Calculus",
        "description": "Deep dive into integrals and derivatives.",
        "content": (
            "In this module, we focus on the fundamental theorem of calculus and "
            "its applications in real-world scenarios..."
        ),
        "teacher_id": "t1",
        "created_at": _SEED_CREATED_AT,
    },
]


class LocalEntityStore(EntityStore):
    """Entity store over a key-value storage of serialized collections."""

    def __init__(self, storage: JsonFileStorage):
        """Initialize LocalEntityStore.

        Args:
            storage: Key-value storage holding one blob per collection.
        """
        self.storage = storage

    def _load(self, kind: EntityKind) -> List[BaseModel]:
        raw = self.storage.get_item(STORAGE_KEYS[kind])
        if raw is None:
            records = DEFAULT_MODULES if kind is EntityKind.MODULES else []
        else:
            try:
                records = json.loads(raw)
            except json.JSONDecodeError as e:
                raise PersistenceError(f"Stored '{kind.value}' collection is corrupt") from e
            if not isinstance(records, list):
                raise PersistenceError(f"Stored '{kind.value}' collection is not a list")

        entity_cls = ENTITY_SCHEMAS[kind].entity
        entities = []
        for record in records:
            try:
                entities.append(entity_cls.model_validate(normalize_record(record)))
            except PydanticValidationError:
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.warning("Skipping malformed %s record: %s", kind.value, record_id)
        return entities

    def _save(self, kind: EntityKind, entities: List[BaseModel]) -> None:
        payload = json.dumps([e.model_dump() for e in entities], ensure_ascii=False)
        self.storage.set_item(STORAGE_KEYS[kind], payload)

    def list(self, kind: EntityKind) -> List[BaseModel]:
        return self._load(kind)

    def create(self, kind: EntityKind, data: EntityData) -> BaseModel:
        entity = build_record(kind, data)
        self._save(kind, [entity, *self._load(kind)])
        logger.info("Created %s record: %s", kind.value, entity.id)
        return entity

    def update(
        self, kind: EntityKind, entity_id: str, data: EntityData
    ) -> Optional[BaseModel]:
        entities = self._load(kind)
        for index, entity in enumerate(entities):
            if entity.id == entity_id:
                entities[index] = merge_update(kind, entity, data)
                self._save(kind, entities)
                logger.info("Updated %s record: %s", kind.value, entity_id)
                return entities[index]
        logger.debug("Update skipped, no %s record %s", kind.value, entity_id)
        return None

    def delete(self, kind: EntityKind, entity_id: str) -> None:
        entities = self._load(kind)
        remaining = [e for e in entities if e.id != entity_id]
        if len(remaining) != len(entities):
            self._save(kind, remaining)
            logger.info("Deleted %s record: %s", kind.value, entity_id)

    def remember_user(self, user: User) -> None:
        self.storage.set_item(
            CURRENT_USER_KEY, json.dumps(user.public_dict(), ensure_ascii=False)
        )

    def remembered_user(self) -> Optional[User]:
        raw = self.storage.get_item(CURRENT_USER_KEY)
        if raw is None:
            return None
        try:
            return User.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise PersistenceError("Stored current user is corrupt") from e

    def forget_user(self) -> None:
        self.storage.remove_item(CURRENT_USER_KEY)
