"""ISO-8601 helpers shared by the event engine.

Event data crosses every boundary as ISO-8601 strings. Parsing accepts the
`Z` suffix or an explicit offset; formatting always emits UTC with millisecond
precision so emitted values round-trip exactly.
"""

from __future__ import annotations

from datetime import datetime, timezone


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Args:
        value: Timestamp string such as `2024-01-01T00:00:00Z`.

    Returns:
        Timezone-aware datetime in UTC. Naive inputs are treated as UTC.

    Raises:
        ValueError: When `value` is not a string or not ISO-8601.
    """

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected an ISO-8601 timestamp, got {value!r}.")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}.") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_iso(moment: datetime) -> str:
    """Format a datetime as `YYYY-MM-DDTHH:MM:SS.mmmZ` in UTC."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def reference_time(at: datetime | None = None) -> datetime:
    """Resolve an optional reference time.

    Args:
        at: Caller-supplied reference time, or None for the current time.

    Returns:
        Timezone-aware UTC datetime.
    """

    if at is None:
        return datetime.now(timezone.utc)
    if at.tzinfo is None:
        return at.replace(tzinfo=timezone.utc)
    return at.astimezone(timezone.utc)
