"""Load `GameEvent` records for a game from its `events.json` file."""

from __future__ import annotations

from typing import Any

import structlog

from events.types import GameEvent, RecurrenceType
from wiki.loader import GameDataError, GameDataNotFound, load_entities

logger = structlog.get_logger(__name__)

EVENTS_ENTITY_TYPE = "events"


def _unknown_recurrence_label(record: dict[str, Any]) -> str | None:
    recurrence = record.get("recurrence")
    if not isinstance(recurrence, dict):
        return None
    label = recurrence.get("type")
    if label in (None, "") or label in [member.value for member in RecurrenceType]:
        return None
    return str(label)


def get_game_events(game_slug: str, *, locale: str | None = None) -> list[GameEvent]:
    """Return the events of a game.

    A game without a readable events file has no events. Records that fail
    validation are skipped and logged so one bad record does not hide the rest.

    Args:
        game_slug: Game directory name.
        locale: Optional locale overlay for names and descriptions.

    Returns:
        Parsed events in file order.
    """

    try:
        records = load_entities(game_slug, EVENTS_ENTITY_TYPE, locale=locale)
    except GameDataNotFound:
        logger.warning("events_file_missing", game=game_slug)
        return []
    except GameDataError as exc:
        logger.warning("events_file_invalid", game=game_slug, error=str(exc))
        return []

    events: list[GameEvent] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning("event_record_invalid", game=game_slug, error="record is not an object")
            continue
        label = _unknown_recurrence_label(record)
        if label is not None:
            logger.warning("event_recurrence_type_unknown", game=game_slug, event_id=record.get("id"), label=label)
        try:
            events.append(GameEvent.from_json(record))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("event_record_invalid", game=game_slug, event_id=record.get("id"), error=str(exc))
    return events


def get_game_event(game_slug: str, event_slug: str, *, locale: str | None = None) -> GameEvent | None:
    """Return the event with a matching slug, or None."""

    for event in get_game_events(game_slug, locale=locale):
        if event.slug == event_slug:
            return event
    return None
