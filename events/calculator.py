"""Occurrence calculator for game events.

Given an event and a reference time, this module determines whether the event
is active, upcoming or ended and which concrete window applies. Recurring
events locate their cycle with floor division on the elapsed time since the
anchor start, so evaluation cost does not depend on how many cycles passed.
"""

from __future__ import annotations

from datetime import datetime

from events.isotime import format_iso, reference_time
from events.types import (
    EventOccurrence,
    EventStatus,
    GameEvent,
    OneTimeSchedule,
    RecurringSchedule,
)


def is_event_active(event: GameEvent, at: datetime | None = None) -> bool:
    """Return True when the event is active at `at` (defaults to now)."""

    return get_current_occurrence(event, at).status == EventStatus.active


def get_event_status(event: GameEvent, at: datetime | None = None) -> EventStatus:
    """Return the event status at `at` (defaults to now)."""

    return get_current_occurrence(event, at).status


def get_current_occurrence(event: GameEvent, at: datetime | None = None) -> EventOccurrence:
    """Return the occurrence relevant to a reference time.

    Args:
        event: Event definition.
        at: Reference time; None means the current time.

    Returns:
        EventOccurrence. One-time events echo their stored dates. Recurring
        events return the current cycle while it is active, otherwise the next
        cycle. A recurring event without recurrence config is reported as
        ended with its start date as both bounds.
    """

    now = reference_time(at)
    schedule = event.schedule
    if isinstance(schedule, OneTimeSchedule):
        return _one_time_occurrence(schedule, now=now)
    if isinstance(schedule, RecurringSchedule):
        return _recurring_occurrence(schedule, now=now)
    return EventOccurrence(start_date=event.start_date, end_date=event.start_date, status=EventStatus.ended)


def _one_time_occurrence(schedule: OneTimeSchedule, *, now: datetime) -> EventOccurrence:
    """Classify a one-time window; both bounds are inclusive."""

    if now < schedule.start:
        status = EventStatus.upcoming
    elif now > schedule.end:
        status = EventStatus.ended
    else:
        status = EventStatus.active
    return EventOccurrence(start_date=schedule.start_raw, end_date=schedule.end_raw, status=status)


def _recurring_occurrence(schedule: RecurringSchedule, *, now: datetime) -> EventOccurrence:
    """Locate the active or next cycle of a recurring schedule."""

    if now < schedule.start:
        return EventOccurrence(
            start_date=schedule.start_raw,
            end_date=format_iso(schedule.start + schedule.duration),
            status=EventStatus.upcoming,
        )

    cycles_passed = (now - schedule.start) // schedule.interval
    cycle_start = schedule.start + cycles_passed * schedule.interval
    cycle_end = cycle_start + schedule.duration

    if cycle_start <= now <= cycle_end:
        return EventOccurrence(
            start_date=format_iso(cycle_start),
            end_date=format_iso(cycle_end),
            status=EventStatus.active,
        )

    next_start = cycle_start + schedule.interval
    return EventOccurrence(
        start_date=format_iso(next_start),
        end_date=format_iso(next_start + schedule.duration),
        status=EventStatus.upcoming,
    )
