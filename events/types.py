"""Event data model for the occurrence engine.

Records mirror the camelCase JSON shape stored under `data/games/<game>/events.json`
but expose snake_case attributes. Dates are kept as the verbatim ISO strings
from the source data; parsed values are exposed through `GameEvent.schedule`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any

from events.isotime import parse_iso

DEFAULT_INTERVAL_DAYS = 7


class EventType(StrEnum):
    """How an event repeats."""

    one_time = "one_time"
    recurring = "recurring"


class RecurrenceType(StrEnum):
    """Informational recurrence label; never changes cycle arithmetic."""

    weekly = "weekly"
    biweekly = "biweekly"
    custom = "custom"

    @classmethod
    def parse(cls, value: Any) -> RecurrenceType:
        """Return the matching label, or `custom` for a missing or unknown one."""

        try:
            return cls(value)
        except ValueError:
            return cls.custom


class EventStatus(StrEnum):
    """Status of an event relative to a reference time."""

    active = "active"
    upcoming = "upcoming"
    ended = "ended"


@dataclass(frozen=True, slots=True)
class RecurrenceConfig:
    """Cycle definition for a recurring event.

    Attributes:
        duration_days: Length of the active window inside each cycle.
        interval_days: Length of one full cycle.
        type: Informational recurrence label.

    Raises:
        ValueError: When the interval is not positive, the duration is negative,
            or the duration is longer than the interval.
    """

    duration_days: float
    interval_days: float = DEFAULT_INTERVAL_DAYS
    type: RecurrenceType = RecurrenceType.custom

    def __post_init__(self) -> None:
        if self.interval_days <= 0:
            raise ValueError("interval_days must be positive.")
        if self.duration_days < 0:
            raise ValueError("duration_days must not be negative.")
        if self.duration_days > self.interval_days:
            raise ValueError("duration_days must not exceed interval_days.")

    @property
    def interval(self) -> timedelta:
        return timedelta(days=self.interval_days)

    @property
    def duration(self) -> timedelta:
        return timedelta(days=self.duration_days)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> RecurrenceConfig:
        """Build a config from `{type, intervalDays?, durationDays}`."""

        interval = payload.get("intervalDays")
        return cls(
            duration_days=_number(payload.get("durationDays"), name="durationDays"),
            interval_days=DEFAULT_INTERVAL_DAYS if interval is None else _number(interval, name="intervalDays"),
            type=RecurrenceType.parse(payload.get("type")),
        )

    def as_json(self) -> dict[str, Any]:
        return {
            "type": str(self.type),
            "intervalDays": self.interval_days,
            "durationDays": self.duration_days,
        }


@dataclass(frozen=True, slots=True)
class StageItem:
    """A requirement or reward line inside an event stage."""

    item_name: str
    quantity: int
    item_id: str | None = None
    rarity: str | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> StageItem:
        return cls(
            item_name=str(payload["itemName"]),
            quantity=int(payload.get("quantity", 0)),
            item_id=payload.get("itemId"),
            rarity=payload.get("rarity"),
        )

    def as_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"itemName": self.item_name, "quantity": self.quantity}
        if self.item_id is not None:
            payload["itemId"] = self.item_id
        if self.rarity is not None:
            payload["rarity"] = self.rarity
        return payload


@dataclass(frozen=True, slots=True)
class EventStage:
    """An ordered stage of an event with its requirements and rewards."""

    id: str
    name: str
    order: int
    requirements: tuple[StageItem, ...] = ()
    rewards: tuple[StageItem, ...] = ()

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> EventStage:
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            order=int(payload.get("order", 0)),
            requirements=tuple(StageItem.from_json(row) for row in payload.get("requirements") or ()),
            rewards=tuple(StageItem.from_json(row) for row in payload.get("rewards") or ()),
        )

    def as_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "order": self.order,
            "requirements": [item.as_json() for item in self.requirements],
            "rewards": [item.as_json() for item in self.rewards],
        }


@dataclass(frozen=True, slots=True)
class OneTimeSchedule:
    """Parsed schedule for a one-time event.

    Attributes:
        start: Parsed start.
        end: Parsed end; equal to `start` when the record has no end date.
        start_raw: Start string as stored.
        end_raw: End string as stored, or the start string when absent.
    """

    start: datetime
    end: datetime
    start_raw: str
    end_raw: str


@dataclass(frozen=True, slots=True)
class RecurringSchedule:
    """Parsed schedule for a recurring event anchored at cycle 0."""

    start: datetime
    start_raw: str
    interval: timedelta
    duration: timedelta


EventSchedule = OneTimeSchedule | RecurringSchedule


@dataclass(frozen=True, slots=True)
class GameEvent:
    """Immutable event definition loaded from game data.

    A `recurring` record without `recurrence` is accepted so incomplete data
    stays loadable; its `schedule` is None.
    """

    id: str
    slug: str
    name: str
    type: EventType
    start_date: str
    end_date: str | None = None
    recurrence: RecurrenceConfig | None = None
    stages: tuple[EventStage, ...] = ()
    description: str | None = None
    category: str | None = None
    image: str | None = None

    def __post_init__(self) -> None:
        parse_iso(self.start_date)
        if self.end_date is not None:
            parse_iso(self.end_date)

    @property
    def schedule(self) -> EventSchedule | None:
        """Return the parsed schedule for this event."""

        start = parse_iso(self.start_date)
        if self.type == EventType.one_time:
            end_raw = self.end_date or self.start_date
            return OneTimeSchedule(start=start, end=parse_iso(end_raw), start_raw=self.start_date, end_raw=end_raw)
        if self.recurrence is None:
            return None
        return RecurringSchedule(
            start=start,
            start_raw=self.start_date,
            interval=self.recurrence.interval,
            duration=self.recurrence.duration,
        )

    @property
    def is_recurring(self) -> bool:
        return self.type == EventType.recurring

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> GameEvent:
        """Build an event from its stored JSON record.

        Args:
            payload: Mapping with camelCase keys (`startDate`, `endDate`, ...).

        Returns:
            A validated GameEvent.

        Raises:
            ValueError: When required keys are missing or values are invalid.
        """

        missing = [key for key in ("id", "slug", "name", "type", "startDate") if not payload.get(key)]
        if missing:
            raise ValueError(f"Event record is missing required keys: {', '.join(missing)}.")

        recurrence_payload = payload.get("recurrence")
        stages_payload: Sequence[Mapping[str, Any]] = payload.get("stages") or ()
        event_type = EventType(payload["type"])
        return cls(
            id=str(payload["id"]),
            slug=str(payload["slug"]),
            name=str(payload["name"]),
            type=event_type,
            start_date=str(payload["startDate"]),
            end_date=payload.get("endDate") or None,
            recurrence=RecurrenceConfig.from_json(recurrence_payload) if recurrence_payload else None,
            stages=tuple(sorted((EventStage.from_json(row) for row in stages_payload), key=lambda s: s.order)),
            description=payload.get("description"),
            category=payload.get("category"),
            image=payload.get("image"),
        )

    def as_json(self) -> dict[str, Any]:
        """Return the stored JSON shape for this event."""

        payload: dict[str, Any] = {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "type": str(self.type),
            "startDate": self.start_date,
        }
        optional: dict[str, Any] = {
            "description": self.description,
            "endDate": self.end_date,
            "recurrence": self.recurrence.as_json() if self.recurrence else None,
            "stages": [stage.as_json() for stage in self.stages] or None,
            "category": self.category,
            "image": self.image,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


@dataclass(frozen=True, slots=True)
class EventOccurrence:
    """A concrete occurrence window with its status."""

    start_date: str
    end_date: str
    status: EventStatus

    def as_json(self) -> dict[str, Any]:
        return {"startDate": self.start_date, "endDate": self.end_date, "status": str(self.status)}


@dataclass(frozen=True, slots=True)
class PredictedOccurrence:
    """A predicted occurrence of a recurring event.

    Attributes:
        cycle_index: Absolute cycle number since the event's anchor start.
    """

    start_date: str
    end_date: str
    status: EventStatus
    cycle_index: int

    def as_json(self) -> dict[str, Any]:
        return {
            "startDate": self.start_date,
            "endDate": self.end_date,
            "status": str(self.status),
            "cycleIndex": self.cycle_index,
        }


def _number(value: Any, *, name: str) -> float:
    """Coerce a JSON number, rejecting booleans and missing values."""

    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"{name} must be a number, got {value!r}.")
    return value
