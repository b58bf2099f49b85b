"""Future-occurrence prediction for recurring events."""

from __future__ import annotations

from datetime import datetime
from typing import Final

import structlog

from events.isotime import format_iso, reference_time
from events.types import EventStatus, GameEvent, PredictedOccurrence, RecurringSchedule

logger = structlog.get_logger(__name__)

DEFAULT_PREDICTION_COUNT: Final[int] = 5
EXTRA_CYCLE_ALLOWANCE: Final[int] = 100


def predict_future_occurrences(
    event: GameEvent,
    count: int = DEFAULT_PREDICTION_COUNT,
    at: datetime | None = None,
) -> list[PredictedOccurrence]:
    """Enumerate the next occurrences of a recurring event.

    The walk starts at the cycle containing `at` (cycle 0 when `at` is before
    the anchor) and keeps every cycle whose end is still in the future, so a
    cycle that already ended is skipped and the walk moves on to the next one.

    Args:
        event: Event definition.
        count: Number of occurrences to return.
        at: Reference time; None means the current time.

    Returns:
        Up to `count` predicted occurrences with absolute cycle indices, or an
        empty list when the event is not a configured recurring event.
    """

    schedule = event.schedule
    if not event.is_recurring or not isinstance(schedule, RecurringSchedule) or count <= 0:
        return []

    now = reference_time(at)
    starting_cycle = (now - schedule.start) // schedule.interval if now > schedule.start else 0
    max_cycle = starting_cycle + count + EXTRA_CYCLE_ALLOWANCE

    occurrences: list[PredictedOccurrence] = []
    cycle = starting_cycle
    while len(occurrences) < count:
        cycle_start = schedule.start + cycle * schedule.interval
        cycle_end = cycle_start + schedule.duration
        if cycle_end > now:
            status = EventStatus.active if cycle_start <= now <= cycle_end else EventStatus.upcoming
            occurrences.append(
                PredictedOccurrence(
                    start_date=format_iso(cycle_start),
                    end_date=format_iso(cycle_end),
                    status=status,
                    cycle_index=cycle,
                )
            )
        cycle += 1
        if cycle > max_cycle:
            logger.warning(
                "prediction_cycle_cap_reached",
                event_id=event.id,
                starting_cycle=starting_cycle,
                found=len(occurrences),
                requested=count,
            )
            break

    return occurrences
