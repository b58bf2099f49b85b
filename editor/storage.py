"""Read and write entity JSON files for the editor.

Files are the same `<GAME_DATA_DIR>/<game>/<entity_type>.json` arrays the
wiki reads. Every write rewrites the whole file as 2-space indented JSON.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import cmp_to_key
from pathlib import Path
from typing import Any

import structlog

from editor.schemas import SortOrder
from wiki.loader import data_dir

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """Base error for editor file operations."""


class EntityConflict(StorageError):
    """Raised when an id or slug is already taken."""


class EntityNotFound(StorageError):
    """Raised when no record has the requested id."""


def entity_file_path(game_slug: str, entity_type: str) -> Path:
    return data_dir() / game_slug / f"{entity_type}.json"


def read_entity_data(game_slug: str, entity_type: str) -> list[dict[str, Any]]:
    """Return the records of an entity file, or [] when the file is missing.

    Raises:
        StorageError: When the file is not a JSON array.
    """

    path = entity_file_path(game_slug, entity_type)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return []
    except json.JSONDecodeError as exc:
        raise StorageError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, list):
        raise StorageError(f"Expected a JSON array in {path}")
    return payload


def write_entity_data(game_slug: str, entity_type: str, records: list[dict[str, Any]]) -> None:
    """Write records to the entity file, creating parent directories."""

    path = entity_file_path(game_slug, entity_type)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.info("entity_file_written", game=game_slug, entity_type=entity_type, records=len(records))


def get_entity_by_id(game_slug: str, entity_type: str, entity_id: str) -> dict[str, Any] | None:
    for record in read_entity_data(game_slug, entity_type):
        if record.get("id") == entity_id:
            return record
    return None


def get_entity_by_slug(game_slug: str, entity_type: str, slug: str) -> dict[str, Any] | None:
    for record in read_entity_data(game_slug, entity_type):
        if record.get("slug") == slug:
            return record
    return None


def create_entity(game_slug: str, entity_type: str, record: Mapping[str, Any]) -> dict[str, Any]:
    """Append a new record.

    Raises:
        EntityConflict: When the id or slug is already used.
    """

    records = read_entity_data(game_slug, entity_type)
    if any(row.get("id") == record.get("id") for row in records):
        raise EntityConflict(f"Entity with ID {record.get('id')} already exists")
    if any(row.get("slug") == record.get("slug") for row in records):
        raise EntityConflict(f"Entity with slug {record.get('slug')} already exists")

    created = dict(record)
    records.append(created)
    write_entity_data(game_slug, entity_type, records)
    logger.info("entity_created", game=game_slug, entity_type=entity_type, entity_id=created.get("id"))
    return created


def update_entity(game_slug: str, entity_type: str, entity_id: str, record: Mapping[str, Any]) -> dict[str, Any]:
    """Replace the record with `entity_id`, keeping its original id.

    Raises:
        EntityNotFound: When no record has `entity_id`.
        EntityConflict: When the new slug belongs to another record.
    """

    records = read_entity_data(game_slug, entity_type)
    index = next((i for i, row in enumerate(records) if row.get("id") == entity_id), None)
    if index is None:
        raise EntityNotFound(f"Entity with ID {entity_id} not found")

    slug = record.get("slug")
    if any(row.get("slug") == slug for i, row in enumerate(records) if i != index):
        raise EntityConflict(f"Entity with slug {slug} already exists")

    updated = {**record, "id": entity_id}
    records[index] = updated
    write_entity_data(game_slug, entity_type, records)
    logger.info("entity_updated", game=game_slug, entity_type=entity_type, entity_id=entity_id)
    return updated


def delete_entity(game_slug: str, entity_type: str, entity_id: str) -> None:
    """Remove the record with `entity_id`.

    Raises:
        EntityNotFound: When no record has `entity_id`.
    """

    records = read_entity_data(game_slug, entity_type)
    remaining = [row for row in records if row.get("id") != entity_id]
    if len(remaining) == len(records):
        raise EntityNotFound(f"Entity with ID {entity_id} not found")
    write_entity_data(game_slug, entity_type, remaining)
    logger.info("entity_deleted", game=game_slug, entity_type=entity_type, entity_id=entity_id)


def search_entities(
    game_slug: str,
    entity_type: str,
    query: str,
    search_fields: tuple[str, ...] | list[str],
) -> list[dict[str, Any]]:
    """Return records where any search field contains `query` (case-insensitive).

    String fields match by substring; list fields match when any string item
    contains the query.
    """

    records = read_entity_data(game_slug, entity_type)
    needle = query.strip().lower()
    if not needle:
        return records

    def matches(record: Mapping[str, Any]) -> bool:
        for name in search_fields:
            value = record.get(name)
            if isinstance(value, str) and needle in value.lower():
                return True
            if isinstance(value, list) and any(isinstance(item, str) and needle in item.lower() for item in value):
                return True
        return False

    return [record for record in records if matches(record)]


def _compare_values(left: Any, right: Any) -> int:
    numbers = all(isinstance(value, int | float) and not isinstance(value, bool) for value in (left, right))
    if numbers:
        return (left > right) - (left < right)
    if isinstance(left, str) and isinstance(right, str):
        left_key, right_key = left.casefold(), right.casefold()
        return (left_key > right_key) - (left_key < right_key)
    left_str, right_str = str(left), str(right)
    return (left_str > right_str) - (left_str < right_str)


def sort_entities(
    records: list[dict[str, Any]],
    sort_field: str,
    sort_order: SortOrder | str = SortOrder.asc,
) -> list[dict[str, Any]]:
    """Return records sorted by `sort_field`.

    Records without the field sort after all others in either direction.
    Numbers compare numerically, strings case-insensitively, anything else by
    its string form.
    """

    descending = SortOrder(sort_order) == SortOrder.desc

    def compare(left: Mapping[str, Any], right: Mapping[str, Any]) -> int:
        left_missing, right_missing = sort_field not in left, sort_field not in right
        if left_missing or right_missing:
            return int(left_missing) - int(right_missing)
        result = _compare_values(left[sort_field], right[sort_field])
        return -result if descending else result

    return sorted(records, key=cmp_to_key(compare))


def get_available_games() -> list[str]:
    """Return game directory names under the data root."""

    root = data_dir()
    if not root.is_dir():
        return []
    return sorted(entry.name for entry in root.iterdir() if entry.is_dir() and not entry.name.startswith((".", "_")))


def get_entity_types(game_slug: str) -> list[str]:
    """Return entity file stems for a game, skipping `_`-prefixed files."""

    game_dir = data_dir() / game_slug
    if not game_dir.is_dir():
        return []
    return sorted(path.stem for path in game_dir.glob("*.json") if not path.name.startswith("_"))
