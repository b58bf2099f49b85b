"""DTOs for game metadata loaded from `_meta.json`."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class DisplayField:
    """A field shown for entities of a category.

    Attributes:
        key: Entity key to read.
        label: Display label.
        type: Rendering hint (string, number, boolean, array, object, badge, image).
        required: Whether every entity is expected to carry the key.
        sortable: Whether list views may sort by this key.
        filterable: Whether list views may filter by this key.
    """

    key: str
    label: str
    type: str = "string"
    required: bool = False
    sortable: bool = False
    filterable: bool = False

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> DisplayField:
        return cls(
            key=str(payload["key"]),
            label=str(payload.get("label") or payload["key"]),
            type=str(payload.get("type") or "string"),
            required=bool(payload.get("required", False)),
            sortable=bool(payload.get("sortable", False)),
            filterable=bool(payload.get("filterable", False)),
        )


@dataclass(frozen=True, slots=True)
class CategoryDefinition:
    """A browsable category of a game, backed by `<entity_type>.json`."""

    id: str
    slug: str
    name: str
    entity_type: str
    display_fields: tuple[DisplayField, ...] = ()
    icon: str | None = None
    description: str | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> CategoryDefinition:
        return cls(
            id=str(payload["id"]),
            slug=str(payload["slug"]),
            name=str(payload["name"]),
            entity_type=str(payload["entityType"]),
            display_fields=tuple(DisplayField.from_json(row) for row in payload.get("displayFields") or ()),
            icon=payload.get("icon"),
            description=payload.get("description"),
        )


@dataclass(frozen=True, slots=True)
class GameMeta:
    """Game-level metadata and its categories."""

    id: str
    slug: str
    name: str
    categories: tuple[CategoryDefinition, ...] = ()
    description: str | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> GameMeta:
        return cls(
            id=str(payload["id"]),
            slug=str(payload["slug"]),
            name=str(payload["name"]),
            categories=tuple(CategoryDefinition.from_json(row) for row in payload.get("categories") or ()),
            description=payload.get("description"),
        )

    def category_by_slug(self, slug: str) -> CategoryDefinition | None:
        for category in self.categories:
            if category.slug == slug:
                return category
        return None


@dataclass(frozen=True, slots=True)
class GameData:
    """Game metadata plus every category's entities."""

    meta: GameMeta
    entities: dict[str, list[dict[str, Any]]]
