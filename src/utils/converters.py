"""Converters between stored representations and schema objects.

``normalize_record`` is the only place that knows about the legacy camelCase
field names some stored records still carry; everything after the read
boundary sees canonical snake_case fields.
"""

from typing import Any, Dict, Type

from pydantic import BaseModel

from models.base import Base

# legacy name -> canonical name
LEGACY_FIELD_NAMES: Dict[str, str] = {
    "teacherId": "teacher_id",
    "createdAt": "created_at",
    "moduleId": "module_id",
    "studentId": "student_id",
    "moduleTitle": "module_title",
    "scheduledTime": "scheduled_time",
}


def normalize_record(record: Any) -> Any:
    """Rename legacy fields of a raw stored record to their canonical names.

    When a record carries both spellings the canonical value wins. Values that
    are not dicts are returned unchanged and left to schema validation.
    """
    if not isinstance(record, dict):
        return record
    normalized = {}
    for key, value in record.items():
        canonical = LEGACY_FIELD_NAMES.get(key)
        if canonical is None:
            normalized[key] = value
        elif canonical not in record:
            normalized[canonical] = value
    return normalized


def model_to_entity(entity_cls: Type[BaseModel], row: Base) -> BaseModel:
    """Build a schema object from an ORM row."""
    return entity_cls.model_validate(
        {field: getattr(row, field) for field in entity_cls.model_fields}
    )


def entity_to_model(model_cls: Type[Base], entity: BaseModel) -> Base:
    """Build an ORM row from a schema object."""
    return model_cls(**entity.model_dump())
