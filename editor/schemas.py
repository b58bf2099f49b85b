"""Entity schemas that drive the editor forms and validation.

Schemas live in `editor/schema_files/<game>.yaml`, one file per game. Each
file names the game and maps entity types to their field definitions.
Conditional fields use a declarative `show_when` mapping: the field applies
only when every listed key in the record equals the given value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

SCHEMA_DIR = Path(__file__).resolve().parent / "schema_files"


class FieldType(StrEnum):
    """Input types supported by editor forms."""

    string = "string"
    text = "text"
    url = "url"
    number = "number"
    boolean = "boolean"
    select = "select"
    multiselect = "multiselect"
    array = "array"
    date = "date"


class SortOrder(StrEnum):
    asc = "asc"
    desc = "desc"


@dataclass(frozen=True, slots=True)
class SelectOption:
    value: str
    label: str


@dataclass(frozen=True, slots=True)
class FieldValidation:
    """Optional constraints applied on top of the field type.

    Attributes:
        min: Inclusive lower bound for number fields.
        max: Inclusive upper bound for number fields.
        pattern: Regular expression a string value must match.
        min_length: Minimum string length.
        max_length: Maximum string length.
    """

    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None

    @classmethod
    def from_yaml(cls, payload: dict[str, Any] | None) -> FieldValidation | None:
        if not payload:
            return None
        return cls(
            min=payload.get("min"),
            max=payload.get("max"),
            pattern=payload.get("pattern"),
            min_length=payload.get("min_length"),
            max_length=payload.get("max_length"),
        )


@dataclass(frozen=True, slots=True)
class SchemaField:
    """One editable field of an entity."""

    name: str
    type: FieldType
    required: bool
    label: str
    description: str = ""
    placeholder: str = ""
    default: Any = None
    options: tuple[SelectOption, ...] = ()
    validation: FieldValidation | None = None
    show_when: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def from_yaml(cls, payload: dict[str, Any]) -> SchemaField:
        """Build a field from its YAML mapping.

        Raises:
            KeyError: When `name` or `type` is missing.
            ValueError: When `type` is not a known field type.
        """

        name = str(payload["name"])
        return cls(
            name=name,
            type=FieldType(payload["type"]),
            required=bool(payload.get("required", False)),
            label=str(payload.get("label") or name),
            description=str(payload.get("description") or ""),
            placeholder=str(payload.get("placeholder") or ""),
            default=payload.get("default"),
            options=tuple(
                SelectOption(value=str(option["value"]), label=str(option.get("label") or option["value"]))
                for option in payload.get("options") or ()
            ),
            validation=FieldValidation.from_yaml(payload.get("validation")),
            show_when=tuple((payload.get("show_when") or {}).items()),
        )

    def applies_to(self, data: dict[str, Any]) -> bool:
        """Return True when the field's `show_when` condition holds for `data`."""

        return all(data.get(key) == value for key, value in self.show_when)


@dataclass(frozen=True, slots=True)
class EntitySchema:
    """Editor schema for one entity type of a game."""

    entity_type: str
    label: str
    plural_label: str
    fields: tuple[SchemaField, ...]
    display_field: str = "name"
    slug_field: str = "slug"
    search_fields: tuple[str, ...] = ()
    sort_field: str | None = None
    sort_order: SortOrder = SortOrder.asc

    @classmethod
    def from_yaml(cls, entity_type: str, payload: dict[str, Any]) -> EntitySchema:
        return cls(
            entity_type=entity_type,
            label=str(payload.get("label") or entity_type),
            plural_label=str(payload.get("plural_label") or entity_type),
            fields=tuple(SchemaField.from_yaml(row) for row in payload.get("fields") or ()),
            display_field=str(payload.get("display_field") or "name"),
            slug_field=str(payload.get("slug_field") or "slug"),
            search_fields=tuple(payload.get("search_fields") or ()),
            sort_field=payload.get("sort_field"),
            sort_order=SortOrder(payload.get("sort_order") or SortOrder.asc),
        )

    def field_by_name(self, name: str) -> SchemaField | None:
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None

    def effective_search_fields(self) -> tuple[str, ...]:
        return self.search_fields or (self.display_field,)


@dataclass(frozen=True, slots=True)
class GameSchemas:
    """All entity schemas declared for one game."""

    game_id: str
    game_slug: str
    game_name: str
    entities: dict[str, EntitySchema]

    @classmethod
    def from_yaml(cls, payload: dict[str, Any]) -> GameSchemas:
        entities = payload.get("entities") or {}
        return cls(
            game_id=str(payload["game_id"]),
            game_slug=str(payload["game_slug"]),
            game_name=str(payload.get("game_name") or payload["game_slug"]),
            entities={
                str(entity_type): EntitySchema.from_yaml(str(entity_type), row) for entity_type, row in entities.items()
            },
        )


def load_schema_file(path: Path) -> GameSchemas:
    """Parse one YAML schema file.

    Raises:
        ValueError: When the file does not describe a game schema.
    """

    payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Schema file {path} must contain a mapping")
    try:
        return GameSchemas.from_yaml(payload)
    except KeyError as exc:
        raise ValueError(f"Schema file {path} is missing {exc}") from exc


@lru_cache(maxsize=1)
def get_all_game_schemas() -> dict[str, GameSchemas]:
    """Return every game schema keyed by game slug."""

    schemas: dict[str, GameSchemas] = {}
    for path in sorted(SCHEMA_DIR.glob("*.yaml")):
        game = load_schema_file(path)
        schemas[game.game_slug] = game
    return schemas


def get_game_schemas(game_slug: str) -> GameSchemas | None:
    return get_all_game_schemas().get(game_slug)


def get_entity_schema(game_slug: str, entity_type: str) -> EntitySchema | None:
    """Return the schema for `game_slug/entity_type`, or None when undeclared."""

    game = get_game_schemas(game_slug)
    if game is None:
        return None
    return game.entities.get(entity_type)
