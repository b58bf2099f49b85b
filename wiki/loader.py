"""JSON data loader for file-based game content.

Layout under `settings.GAME_DATA_DIR`:

- `<game>/_meta.json`: game metadata and categories.
- `<game>/<entity_type>.json`: a JSON array of entity records.
- `<game>/_i18n/<locale>/<name>.json`: optional locale overlay for `_meta` or
  an entity type. Overlay records are matched by `id` and shallow-merged over
  the base records, so a translation only carries the keys it changes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from django.conf import settings

from wiki.dto import GameData, GameMeta

logger = structlog.get_logger(__name__)

META_FILENAME = "_meta"
I18N_DIRNAME = "_i18n"


class GameDataError(ValueError):
    """Raised when a data file exists but cannot be decoded."""


class GameDataNotFound(LookupError):
    """Raised when a game or entity type has no data file."""


def data_dir() -> Path:
    """Return the configured game data root."""

    return Path(settings.GAME_DATA_DIR)


def _read_json(path: Path) -> Any:
    """Read and decode a JSON file.

    Raises:
        FileNotFoundError: When the file does not exist.
        GameDataError: When the content is not valid JSON.
    """

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise GameDataError(f"Invalid JSON in {path}: {exc}") from exc


def _overlay_path(game_slug: str, name: str, locale: str | None) -> Path | None:
    if not locale:
        return None
    path = data_dir() / game_slug / I18N_DIRNAME / locale / f"{name}.json"
    return path if path.is_file() else None


def _merge_records_by_id(base: list[dict[str, Any]], overlay: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Shallow-merge overlay records onto base records sharing the same `id`."""

    by_id = {row.get("id"): row for row in overlay if isinstance(row, dict) and row.get("id")}
    return [
        {**row, **by_id[row["id"]]} if isinstance(row, dict) and row.get("id") in by_id else row for row in base
    ]


def _apply_meta_overlay(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = {**base, **{key: value for key, value in overlay.items() if key != "categories"}}
    if isinstance(overlay.get("categories"), list):
        merged["categories"] = _merge_records_by_id(base.get("categories") or [], overlay["categories"])
    return merged


def load_game_meta(game_slug: str, *, locale: str | None = None) -> GameMeta:
    """Load `_meta.json` for a game, applying the locale overlay when present.

    Raises:
        GameDataNotFound: When the game has no metadata file.
        GameDataError: When the metadata cannot be decoded.
    """

    path = data_dir() / game_slug / f"{META_FILENAME}.json"
    try:
        payload = _read_json(path)
    except FileNotFoundError as exc:
        raise GameDataNotFound(f"Game metadata not found: {game_slug}") from exc

    overlay_path = _overlay_path(game_slug, META_FILENAME, locale)
    if overlay_path is not None:
        payload = _apply_meta_overlay(payload, _read_json(overlay_path))

    try:
        return GameMeta.from_json(payload)
    except (KeyError, TypeError) as exc:
        raise GameDataError(f"Invalid game metadata for {game_slug}: {exc}") from exc


def load_entities(game_slug: str, entity_type: str, *, locale: str | None = None) -> list[dict[str, Any]]:
    """Load all records of an entity type.

    Args:
        game_slug: Game directory name.
        entity_type: Entity file stem (e.g. "heroes").
        locale: Optional locale whose overlay is merged over the records.

    Returns:
        List of entity records in file order.

    Raises:
        GameDataNotFound: When the entity file does not exist.
        GameDataError: When the file is not a JSON array.
    """

    if entity_type.startswith("_"):
        raise GameDataNotFound(f"Entity type not found: {game_slug}/{entity_type}")

    path = data_dir() / game_slug / f"{entity_type}.json"
    try:
        records = _read_json(path)
    except FileNotFoundError as exc:
        raise GameDataNotFound(f"Entity type not found: {game_slug}/{entity_type}") from exc
    if not isinstance(records, list):
        raise GameDataError(f"Expected a JSON array in {path}")

    overlay_path = _overlay_path(game_slug, entity_type, locale)
    if overlay_path is not None:
        overlay = _read_json(overlay_path)
        if isinstance(overlay, list):
            records = _merge_records_by_id(records, overlay)
        else:
            logger.warning("locale_overlay_ignored", path=str(overlay_path), reason="not a JSON array")
    return records


def load_entity_by_slug(
    game_slug: str,
    entity_type: str,
    entity_slug: str,
    *,
    locale: str | None = None,
) -> dict[str, Any] | None:
    """Return the entity with a matching slug, or None."""

    for entity in load_entities(game_slug, entity_type, locale=locale):
        if entity.get("slug") == entity_slug:
            return entity
    return None


def load_game_data(game_slug: str, *, locale: str | None = None) -> GameData:
    """Load metadata plus the entities of every category.

    Categories whose data file is missing or unreadable yield an empty list.
    """

    meta = load_game_meta(game_slug, locale=locale)
    entities: dict[str, list[dict[str, Any]]] = {}
    for category in meta.categories:
        try:
            entities[category.entity_type] = load_entities(game_slug, category.entity_type, locale=locale)
        except (GameDataNotFound, GameDataError) as exc:
            logger.warning("category_load_failed", game=game_slug, entity_type=category.entity_type, error=str(exc))
            entities[category.entity_type] = []
    return GameData(meta=meta, entities=entities)


def load_available_games(*, locale: str | None = None) -> list[GameMeta]:
    """Return metadata for every game directory, sorted by name."""

    root = data_dir()
    if not root.is_dir():
        logger.error("game_data_dir_missing", path=str(root))
        return []

    games: list[GameMeta] = []
    for entry in sorted(root.iterdir()):
        if not entry.is_dir() or entry.name.startswith((".", "_")):
            continue
        try:
            games.append(load_game_meta(entry.name, locale=locale))
        except (GameDataNotFound, GameDataError) as exc:
            logger.warning("game_meta_load_failed", game=entry.name, error=str(exc))
    games.sort(key=lambda meta: meta.name.lower())
    return games


def search_entities(
    game_slug: str,
    entity_type: str,
    query: str,
    *,
    locale: str | None = None,
) -> list[dict[str, Any]]:
    """Filter entities whose name or description contains `query` (case-insensitive)."""

    entities = load_entities(game_slug, entity_type, locale=locale)
    needle = query.strip().lower()
    if not needle:
        return entities
    return [
        entity
        for entity in entities
        if needle in str(entity.get("name") or "").lower() or needle in str(entity.get("description") or "").lower()
    ]


def get_entity_count(game_slug: str, entity_type: str) -> int:
    try:
        return len(load_entities(game_slug, entity_type))
    except (GameDataNotFound, GameDataError):
        return 0


def game_exists(game_slug: str) -> bool:
    try:
        load_game_meta(game_slug)
    except (GameDataNotFound, GameDataError):
        return False
    return True


def entity_type_exists(game_slug: str, entity_type: str) -> bool:
    try:
        load_entities(game_slug, entity_type)
    except (GameDataNotFound, GameDataError):
        return False
    return True
