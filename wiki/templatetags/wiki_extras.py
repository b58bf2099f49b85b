"""Template filters for rendering event dates and entity fields."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from django import template

from events.isotime import parse_iso

register = template.Library()


@register.filter
def iso_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string so it can be piped into Django's `date` filter."""

    if not value:
        return None
    try:
        return parse_iso(value)
    except ValueError:
        return None


@register.filter
def display_value(value: Any) -> str:
    """Render an entity field value as plain text."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list | tuple):
        return ", ".join(display_value(item) for item in value)
    if isinstance(value, dict):
        return ", ".join(f"{key}: {display_value(item)}" for key, item in value.items())
    return str(value)
