"""Development-only editor for game data files.

Every view is gated by `settings.WIKI_ADMIN_ENABLED`; when it is off the
editor responds 404 as if it did not exist.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from functools import wraps
from typing import Any

import structlog
from django.conf import settings
from django.contrib import messages
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from editor.forms import EntityForm
from editor.schemas import EntitySchema, get_all_game_schemas, get_entity_schema
from editor.storage import (
    EntityConflict,
    EntityNotFound,
    StorageError,
    create_entity,
    delete_entity,
    get_entity_by_id,
    get_entity_types,
    read_entity_data,
    search_entities,
    sort_entities,
    update_entity,
)
from editor.validation import FieldError, validate_entity, validate_relationships

logger = structlog.get_logger(__name__)

ADMIN_DISABLED_MESSAGE = "Admin access is only available in development mode"


def admin_required(view: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
    """Hide a view behind `settings.WIKI_ADMIN_ENABLED`."""

    @wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        if not settings.WIKI_ADMIN_ENABLED:
            raise Http404(ADMIN_DISABLED_MESSAGE)
        return view(request, *args, **kwargs)

    return wrapper


def _schema_or_404(game_slug: str, entity_type: str) -> EntitySchema:
    schema = get_entity_schema(game_slug, entity_type)
    if schema is None:
        raise Http404(f"Schema not found for {game_slug}/{entity_type}")
    return schema


def _related_records(game_slug: str, entity_type: str) -> dict[str, list[dict[str, Any]]]:
    """Return the records of every other entity type of the game."""

    return {
        other: read_entity_data(game_slug, other)
        for other in get_entity_types(game_slug)
        if other != entity_type
    }


def _check_record(game_slug: str, schema: EntitySchema, record: dict[str, Any]) -> list[FieldError]:
    errors = validate_entity(schema, record)
    if not errors:
        errors = validate_relationships(record, schema, _related_records(game_slug, schema.entity_type))
    return errors


def _sorted_records(
    records: list[dict[str, Any]],
    schema: EntitySchema,
    sort_by: str | None,
    sort_order: str | None,
) -> list[dict[str, Any]]:
    if sort_by:
        return sort_entities(records, sort_by, sort_order or "asc")
    if schema.sort_field:
        return sort_entities(records, schema.sort_field, schema.sort_order)
    return records


@admin_required
def index(request: HttpRequest) -> HttpResponse:
    """List games with editable entity types and their record counts."""

    games = []
    for game in get_all_game_schemas().values():
        entity_rows = []
        for entity_type, schema in game.entities.items():
            try:
                count = len(read_entity_data(game.game_slug, entity_type))
            except StorageError as exc:
                logger.warning("editor_count_failed", game=game.game_slug, entity_type=entity_type, error=str(exc))
                count = 0
            entity_rows.append({"entity_type": entity_type, "schema": schema, "count": count})
        games.append({"game": game, "entities": entity_rows})
    return render(request, "editor/index.html", {"games": games})


@admin_required
def entity_list(request: HttpRequest, game_slug: str, entity_type: str) -> HttpResponse:
    """List records of one entity type with search and sorting."""

    schema = _schema_or_404(game_slug, entity_type)
    query = (request.GET.get("search") or "").strip()
    sort_by = request.GET.get("sortBy") or None
    sort_order = request.GET.get("sortOrder") or None
    if sort_order not in (None, "asc", "desc"):
        sort_order = None

    try:
        records = search_entities(game_slug, entity_type, query, schema.effective_search_fields())
    except StorageError as exc:
        messages.error(request, str(exc))
        records = []
    records = _sorted_records(records, schema, sort_by, sort_order)

    rows = [
        {
            "id": record.get("id"),
            "display": record.get(schema.display_field) or record.get("id"),
            "slug": record.get(schema.slug_field),
        }
        for record in records
    ]
    return render(
        request,
        "editor/entity_list.html",
        {
            "game_slug": game_slug,
            "schema": schema,
            "rows": rows,
            "query": query,
            "sort_by": sort_by or schema.sort_field or "",
            "sort_order": sort_order or schema.sort_order,
        },
    )


def _apply_record_errors(form: EntityForm, errors: list[FieldError]) -> None:
    for error in errors:
        form.add_error(error.field if error.field in form.fields else None, error.message)


@admin_required
def entity_new(request: HttpRequest, game_slug: str, entity_type: str) -> HttpResponse:
    """Create a record from the schema-driven form."""

    schema = _schema_or_404(game_slug, entity_type)
    form = EntityForm(request.POST or None, schema=schema)
    if request.method == "POST" and form.is_valid():
        record = form.to_record()
        errors = validate_relationships(record, schema, _related_records(game_slug, entity_type))
        if errors:
            _apply_record_errors(form, errors)
        else:
            try:
                create_entity(game_slug, entity_type, record)
            except StorageError as exc:
                form.add_error(None, str(exc))
            else:
                messages.success(request, f"{schema.label} {record.get('id')} created.")
                return redirect("editor:entity_list", game_slug=game_slug, entity_type=entity_type)

    return render(
        request,
        "editor/entity_form.html",
        {"game_slug": game_slug, "schema": schema, "form": form, "entity_id": None, "preview": None},
    )


@admin_required
def entity_edit(request: HttpRequest, game_slug: str, entity_type: str, entity_id: str) -> HttpResponse:
    """Edit an existing record; the id stays fixed."""

    schema = _schema_or_404(game_slug, entity_type)
    try:
        existing = get_entity_by_id(game_slug, entity_type, entity_id)
    except StorageError as exc:
        messages.error(request, str(exc))
        return redirect("editor:entity_list", game_slug=game_slug, entity_type=entity_type)
    if existing is None:
        raise Http404(f"Entity with ID {entity_id} not found")

    form = EntityForm(request.POST or None, schema=schema, existing_id=entity_id, initial=existing)
    if request.method == "POST" and form.is_valid():
        record = form.to_record()
        errors = validate_relationships(record, schema, _related_records(game_slug, entity_type))
        if errors:
            _apply_record_errors(form, errors)
        else:
            try:
                update_entity(game_slug, entity_type, entity_id, record)
            except StorageError as exc:
                form.add_error(None, str(exc))
            else:
                messages.success(request, f"{schema.label} {entity_id} saved.")
                return redirect("editor:entity_list", game_slug=game_slug, entity_type=entity_type)

    return render(
        request,
        "editor/entity_form.html",
        {
            "game_slug": game_slug,
            "schema": schema,
            "form": form,
            "entity_id": entity_id,
            "preview": json.dumps(existing, indent=2, ensure_ascii=False),
        },
    )


@admin_required
@require_POST
def entity_delete(request: HttpRequest, game_slug: str, entity_type: str, entity_id: str) -> HttpResponse:
    """Delete a record and return to the list."""

    schema = _schema_or_404(game_slug, entity_type)
    try:
        delete_entity(game_slug, entity_type, entity_id)
    except EntityNotFound as exc:
        raise Http404(str(exc)) from exc
    except StorageError as exc:
        messages.error(request, str(exc))
        return redirect("editor:entity_list", game_slug=game_slug, entity_type=entity_type)
    messages.success(request, f"{schema.label} {entity_id} deleted.")
    return redirect("editor:entity_list", game_slug=game_slug, entity_type=entity_type)


def _api_error(message: str, *, status: int, errors: list[FieldError] | None = None) -> JsonResponse:
    payload: dict[str, Any] = {"success": False, "error": message}
    if errors:
        payload["errors"] = [error.as_json() for error in errors]
    return JsonResponse(payload, status=status)


def _request_record(request: HttpRequest) -> dict[str, Any]:
    """Decode the JSON object in the request body.

    Raises:
        ValueError: When the body is not a JSON object.
    """

    try:
        payload = json.loads(request.body or b"null")
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON body: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    return payload


@csrf_exempt
@require_http_methods(["GET", "POST", "PUT", "DELETE"])
def entity_api(request: HttpRequest, game_slug: str, entity_type: str) -> JsonResponse:
    """JSON CRUD endpoint for one entity type.

    - GET: list records (`search`, `sortBy`, `sortOrder`) or one record (`id`).
    - POST: create a record from the JSON body.
    - PUT: replace the record named by `id` with the JSON body.
    - DELETE: remove the record named by `id`.

    Responses use `{success, data?, error?, errors?}`.
    """

    if not settings.WIKI_ADMIN_ENABLED:
        return _api_error(ADMIN_DISABLED_MESSAGE, status=404)

    schema = get_entity_schema(game_slug, entity_type)
    if schema is None:
        return _api_error(f"Schema not found for {game_slug}/{entity_type}", status=404)

    entity_id = request.GET.get("id") or None
    try:
        if request.method == "GET":
            return _api_get(request, game_slug, schema, entity_id)
        if request.method == "DELETE":
            if entity_id is None:
                return _api_error("Entity ID is required", status=400)
            try:
                delete_entity(game_slug, entity_type, entity_id)
            except EntityNotFound as exc:
                return _api_error(str(exc), status=404)
            return JsonResponse({"success": True, "data": {"id": entity_id}})

        if request.method == "PUT" and entity_id is None:
            return _api_error("Entity ID is required", status=400)
        try:
            record = _request_record(request)
        except ValueError as exc:
            return _api_error(str(exc), status=400)

        if request.method == "PUT":
            record = {**record, "id": entity_id}
        errors = _check_record(game_slug, schema, record)
        if errors:
            logger.info("editor_validation_failed", game=game_slug, entity_type=entity_type, errors=len(errors))
            return _api_error("Validation failed", status=400, errors=errors)

        if request.method == "POST":
            saved = create_entity(game_slug, entity_type, record)
        else:
            saved = update_entity(game_slug, entity_type, entity_id, record)
        return JsonResponse({"success": True, "data": saved})
    except (EntityConflict, EntityNotFound) as exc:
        return _api_error(str(exc), status=400)
    except StorageError as exc:
        logger.error("editor_storage_failed", game=game_slug, entity_type=entity_type, error=str(exc))
        return _api_error(str(exc), status=500)


def _api_get(request: HttpRequest, game_slug: str, schema: EntitySchema, entity_id: str | None) -> JsonResponse:
    if entity_id is not None:
        record = get_entity_by_id(game_slug, schema.entity_type, entity_id)
        if record is None:
            return _api_error(f"Entity with ID {entity_id} not found", status=404)
        return JsonResponse({"success": True, "data": record})

    query = (request.GET.get("search") or "").strip()
    records = search_entities(game_slug, schema.entity_type, query, schema.effective_search_fields())
    sort_order = request.GET.get("sortOrder")
    records = _sorted_records(
        records,
        schema,
        request.GET.get("sortBy") or None,
        sort_order if sort_order in ("asc", "desc") else None,
    )
    return JsonResponse({"success": True, "data": records})
