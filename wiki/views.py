"""Public wiki pages and the events JSON API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from django.conf import settings
from django.http import Http404, HttpRequest, HttpResponse, HttpResponseBadRequest, JsonResponse
from django.shortcuts import render
from django.utils.translation import get_language

from events.calculator import get_current_occurrence
from events.isotime import format_iso, parse_iso, reference_time
from events.predictor import DEFAULT_PREDICTION_COUNT, predict_future_occurrences
from events.timeline import build_timeline, countdown_target, partition_by_status, time_until
from events.types import EventStatus, GameEvent
from wiki.dto import CategoryDefinition, GameMeta
from wiki.event_loader import get_game_event, get_game_events
from wiki.loader import (
    GameDataError,
    GameDataNotFound,
    load_available_games,
    load_entities,
    load_entity_by_slug,
    load_game_meta,
    search_entities,
)

logger = structlog.get_logger(__name__)

MAX_API_PREDICTIONS = 50


class InvalidReferenceTime(ValueError):
    """Raised when the `at` query parameter is not an ISO-8601 timestamp."""


def _request_locale(request: HttpRequest) -> str | None:
    """Return the active locale code for content overlays."""

    return getattr(request, "LANGUAGE_CODE", None) or get_language()


def _request_reference_time(request: HttpRequest) -> datetime:
    """Return the reference time from `?at=` or the current time.

    Raises:
        InvalidReferenceTime: When `at` is present but not ISO-8601.
    """

    raw = (request.GET.get("at") or "").strip()
    if not raw:
        return reference_time()
    try:
        return parse_iso(raw)
    except ValueError as exc:
        raise InvalidReferenceTime(str(exc)) from exc


def _game_meta_or_404(game_slug: str, *, locale: str | None) -> GameMeta:
    try:
        return load_game_meta(game_slug, locale=locale)
    except GameDataNotFound as exc:
        raise Http404(str(exc)) from exc
    except GameDataError as exc:
        logger.error("game_meta_invalid", game=game_slug, error=str(exc))
        raise Http404(str(exc)) from exc


def _category_or_404(meta: GameMeta, category_slug: str) -> CategoryDefinition:
    category = meta.category_by_slug(category_slug)
    if category is None:
        raise Http404(f"Unknown category: {meta.slug}/{category_slug}")
    return category


def _event_card(event: GameEvent, *, now: datetime) -> dict[str, Any]:
    """Build the template row for an event card."""

    occurrence = get_current_occurrence(event, now)
    target = countdown_target(occurrence)
    return {
        "event": event,
        "occurrence": occurrence,
        "status": str(occurrence.status),
        "countdown": time_until(target, now) if target else None,
    }


def home(request: HttpRequest) -> HttpResponse:
    """Render the landing page with every available game."""

    games = load_available_games(locale=_request_locale(request))
    return render(request, "wiki/home.html", {"games": games})


def games_index(request: HttpRequest) -> HttpResponse:
    """Render the game index."""

    games = load_available_games(locale=_request_locale(request))
    return render(request, "wiki/games.html", {"games": games})


def game_detail(request: HttpRequest, game_slug: str) -> HttpResponse:
    """Render a game page with category counts and active events."""

    locale = _request_locale(request)
    try:
        now = _request_reference_time(request)
    except InvalidReferenceTime as exc:
        return HttpResponseBadRequest(str(exc))
    meta = _game_meta_or_404(game_slug, locale=locale)

    category_rows: list[dict[str, Any]] = []
    for category in meta.categories:
        try:
            count = len(load_entities(game_slug, category.entity_type, locale=locale))
        except (GameDataNotFound, GameDataError) as exc:
            logger.warning("category_count_failed", game=game_slug, entity_type=category.entity_type, error=str(exc))
            count = 0
        category_rows.append({"category": category, "count": count})

    groups = partition_by_status(get_game_events(game_slug, locale=locale), now)
    return render(
        request,
        "wiki/game_detail.html",
        {
            "game": meta,
            "category_rows": category_rows,
            "total_items": sum(row["count"] for row in category_rows),
            "active_events": [_event_card(event, now=now) for event in groups[EventStatus.active]],
        },
    )


def events_index(request: HttpRequest, game_slug: str) -> HttpResponse:
    """Render the events page split into active, upcoming and past sections."""

    locale = _request_locale(request)
    try:
        now = _request_reference_time(request)
    except InvalidReferenceTime as exc:
        return HttpResponseBadRequest(str(exc))
    meta = _game_meta_or_404(game_slug, locale=locale)

    groups = partition_by_status(get_game_events(game_slug, locale=locale), now)
    timeline = build_timeline([*groups[EventStatus.active], *groups[EventStatus.upcoming]], now)
    return render(
        request,
        "wiki/events_index.html",
        {
            "game": meta,
            "active_events": [_event_card(event, now=now) for event in groups[EventStatus.active]],
            "upcoming_events": [_event_card(event, now=now) for event in groups[EventStatus.upcoming]],
            "past_events": [_event_card(event, now=now) for event in groups[EventStatus.ended]],
            "timeline": timeline,
        },
    )


def event_detail(request: HttpRequest, game_slug: str, event_slug: str) -> HttpResponse:
    """Render one event with its countdown, stages and future dates."""

    locale = _request_locale(request)
    try:
        now = _request_reference_time(request)
    except InvalidReferenceTime as exc:
        return HttpResponseBadRequest(str(exc))
    meta = _game_meta_or_404(game_slug, locale=locale)
    event = get_game_event(game_slug, event_slug, locale=locale)
    if event is None:
        raise Http404(f"Unknown event: {game_slug}/{event_slug}")

    card = _event_card(event, now=now)
    return render(
        request,
        "wiki/event_detail.html",
        {
            "game": meta,
            **card,
            "predictions": predict_future_occurrences(event, settings.WIKI_PREDICTION_COUNT, now),
        },
    )


def category_list(request: HttpRequest, game_slug: str, category_slug: str) -> HttpResponse:
    """Render the entities of a category, optionally filtered by `?q=`."""

    locale = _request_locale(request)
    meta = _game_meta_or_404(game_slug, locale=locale)
    category = _category_or_404(meta, category_slug)
    query = (request.GET.get("q") or "").strip()
    try:
        entities = search_entities(game_slug, category.entity_type, query, locale=locale)
    except GameDataNotFound:
        entities = []
    except GameDataError as exc:
        logger.warning("category_load_failed", game=game_slug, entity_type=category.entity_type, error=str(exc))
        entities = []
    return render(
        request,
        "wiki/category_list.html",
        {"game": meta, "category": category, "entities": entities, "query": query},
    )


def item_detail(request: HttpRequest, game_slug: str, category_slug: str, item_slug: str) -> HttpResponse:
    """Render a single entity using its category display fields."""

    locale = _request_locale(request)
    meta = _game_meta_or_404(game_slug, locale=locale)
    category = _category_or_404(meta, category_slug)
    try:
        entity = load_entity_by_slug(game_slug, category.entity_type, item_slug, locale=locale)
    except (GameDataNotFound, GameDataError) as exc:
        raise Http404(str(exc)) from exc
    if entity is None:
        raise Http404(f"Unknown item: {game_slug}/{category_slug}/{item_slug}")

    field_rows = [
        {"field": display_field, "value": entity.get(display_field.key)}
        for display_field in category.display_fields
        if display_field.key in entity
    ]
    return render(
        request,
        "wiki/item_detail.html",
        {"game": meta, "category": category, "entity": entity, "field_rows": field_rows},
    )


def events_api(request: HttpRequest, game_slug: str) -> JsonResponse:
    """Return every event of a game with its status, occurrence and predictions.

    Query parameters:
        at: Optional ISO-8601 reference time (defaults to now).
        count: Number of predictions per recurring event (default 5, max 50).
    """

    try:
        now = _request_reference_time(request)
    except InvalidReferenceTime as exc:
        return JsonResponse({"success": False, "error": str(exc)}, status=400)

    raw_count = (request.GET.get("count") or "").strip()
    try:
        count = int(raw_count) if raw_count else DEFAULT_PREDICTION_COUNT
    except ValueError:
        return JsonResponse({"success": False, "error": "count must be an integer"}, status=400)
    count = max(0, min(count, MAX_API_PREDICTIONS))

    try:
        load_game_meta(game_slug)
    except (GameDataNotFound, GameDataError) as exc:
        return JsonResponse({"success": False, "error": str(exc)}, status=404)

    rows: list[dict[str, Any]] = []
    for event in get_game_events(game_slug, locale=_request_locale(request)):
        occurrence = get_current_occurrence(event, now)
        rows.append(
            {
                "id": event.id,
                "slug": event.slug,
                "name": event.name,
                "type": str(event.type),
                "status": str(occurrence.status),
                "occurrence": occurrence.as_json(),
                "predictions": [row.as_json() for row in predict_future_occurrences(event, count, now)],
            }
        )
    return JsonResponse({"success": True, "at": format_iso(now), "data": rows})
