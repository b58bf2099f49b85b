"""Validation of editor submissions against entity schemas."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from editor.schemas import EntitySchema, FieldType, SchemaField
from events.isotime import parse_iso
from events.types import GameEvent, RecurrenceType
from wiki.event_loader import EVENTS_ENTITY_TYPE


@dataclass(frozen=True, slots=True)
class FieldError:
    """A validation failure attached to one field."""

    field: str
    message: str

    def as_json(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _validate_string(schema_field: SchemaField, value: Any) -> str | None:
    label = schema_field.label
    if not isinstance(value, str):
        return f"{label} must be a string"

    rules = schema_field.validation
    if rules is not None:
        if rules.min_length and len(value) < rules.min_length:
            return f"{label} must be at least {rules.min_length} characters"
        if rules.max_length and len(value) > rules.max_length:
            return f"{label} must be at most {rules.max_length} characters"
        if rules.pattern and re.search(rules.pattern, value) is None:
            return f"{label} format is invalid"

    if schema_field.type == FieldType.url and not value.startswith("/"):
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            return f"{label} must be a valid URL or relative path starting with /"
    return None


def _validate_number(schema_field: SchemaField, value: Any) -> str | None:
    label = schema_field.label
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return f"{label} must be a number"
    if isinstance(value, bool) or not isinstance(value, int | float) or value != value:
        return f"{label} must be a number"

    rules = schema_field.validation
    if rules is not None:
        if rules.min is not None and value < rules.min:
            return f"{label} must be at least {rules.min:g}"
        if rules.max is not None and value > rules.max:
            return f"{label} must be at most {rules.max:g}"
    return None


def _validate_select(schema_field: SchemaField, value: Any) -> str | None:
    if not isinstance(value, str):
        return f"{schema_field.label} must be a string"
    if schema_field.options and value not in {option.value for option in schema_field.options}:
        return f"{schema_field.label} must be one of the available options"
    return None


def _validate_multiselect(schema_field: SchemaField, value: Any) -> str | None:
    if not isinstance(value, list):
        return f"{schema_field.label} must be an array"
    allowed = {option.value for option in schema_field.options}
    if allowed:
        for item in value:
            if item not in allowed:
                return f"{schema_field.label} contains invalid option: {item}"
    return None


def _validate_date(schema_field: SchemaField, value: Any) -> str | None:
    if not isinstance(value, str):
        return f"{schema_field.label} must be a date string"
    try:
        parse_iso(value)
    except ValueError:
        return f"{schema_field.label} must be a valid date"
    return None


def validate_field(schema_field: SchemaField, value: Any) -> FieldError | None:
    """Validate one value against its field definition.

    Empty optional values are accepted without further checks.
    """

    if _is_empty(value):
        if schema_field.required:
            return FieldError(schema_field.name, f"{schema_field.label} is required")
        return None

    message: str | None
    match schema_field.type:
        case FieldType.string | FieldType.text | FieldType.url:
            message = _validate_string(schema_field, value)
        case FieldType.number:
            message = _validate_number(schema_field, value)
        case FieldType.boolean:
            message = None if isinstance(value, bool) else f"{schema_field.label} must be true or false"
        case FieldType.select:
            message = _validate_select(schema_field, value)
        case FieldType.multiselect:
            message = _validate_multiselect(schema_field, value)
        case FieldType.array:
            message = None if isinstance(value, list | dict) else f"{schema_field.label} must be an array or object"
        case FieldType.date:
            message = _validate_date(schema_field, value)
        case _:
            message = None
    return FieldError(schema_field.name, message) if message else None


def validate_entity(schema: EntitySchema, data: Mapping[str, Any]) -> list[FieldError]:
    """Validate a record against its entity schema.

    Fields whose `show_when` condition does not hold are skipped. Event
    records are additionally parsed as `GameEvent` so schedule rules
    (positive interval, duration within the interval) hold on save.

    Args:
        schema: Entity schema for the record's type.
        data: Submitted record.

    Returns:
        Field errors in schema order (empty when the record is valid).
    """

    errors: list[FieldError] = []
    for schema_field in schema.fields:
        if not schema_field.applies_to(dict(data)):
            continue
        error = validate_field(schema_field, data.get(schema_field.name))
        if error is not None:
            errors.append(error)

    if schema.entity_type == EVENTS_ENTITY_TYPE and not errors:
        recurrence = data.get("recurrence")
        label = recurrence.get("type") if isinstance(recurrence, Mapping) else None
        labels = [member.value for member in RecurrenceType]
        if label not in (None, "") and label not in labels:
            errors.append(FieldError("recurrence", "Recurrence type must be one of: " + ", ".join(labels)))
            return errors
        try:
            GameEvent.from_json(data)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            errors.append(FieldError("recurrence" if data.get("recurrence") else "startDate", str(exc)))
    return errors


def validate_unique_slug(slug: str, records: Iterable[Mapping[str, Any]], current_id: str | None = None) -> bool:
    """Return True when no other record uses `slug`."""

    return not any(record.get("slug") == slug and record.get("id") != current_id for record in records)


def validate_unique_id(entity_id: str, records: Iterable[Mapping[str, Any]], current_id: str | None = None) -> bool:
    """Return True when no other record uses `entity_id`."""

    return not any(record.get("id") == entity_id and record.get("id") != current_id for record in records)


def validate_relationships(
    data: Mapping[str, Any],
    schema: EntitySchema,
    related: Mapping[str, Iterable[Mapping[str, Any]]],
) -> list[FieldError]:
    """Check that id-list fields reference existing records.

    A list field named after an entity type (`skills`, `heroes`, ...) or its
    singular form is checked against the ids in `related` for that type.
    Fields with no matching related type are ignored.

    Args:
        data: Record being saved.
        schema: Entity schema of the record.
        related: Records of other entity types keyed by type name.

    Returns:
        One error per unknown reference.
    """

    errors: list[FieldError] = []
    for schema_field in schema.fields:
        if schema_field.type != FieldType.array:
            continue
        value = data.get(schema_field.name)
        if not isinstance(value, list) or not value or not all(isinstance(item, str) for item in value):
            continue

        related_type = next(
            (name for name in (schema_field.name, schema_field.name.removesuffix("s")) if name in related),
            None,
        )
        if related_type is None:
            continue
        valid_ids = {record.get("id") for record in related[related_type]}
        for item in value:
            if item not in valid_ids:
                errors.append(FieldError(schema_field.name, f"{schema_field.label} contains invalid reference: {item}"))
    return errors
