"""Presentation helpers built on the occurrence calculator.

These helpers back the countdown, the events index sections and the timeline
sidebar. They stay pure: every function takes the reference time explicitly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from events.calculator import get_current_occurrence
from events.isotime import parse_iso, reference_time
from events.types import EventOccurrence, EventStatus, GameEvent

_DAY = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class Countdown:
    """Remaining time split into display units."""

    days: int
    hours: int
    minutes: int
    seconds: int

    @property
    def expired(self) -> bool:
        return not (self.days or self.hours or self.minutes or self.seconds)


@dataclass(frozen=True, slots=True)
class TimelineEntry:
    """A single row of the events timeline.

    Attributes:
        event: The event shown on this row.
        occurrence: Current (or next) occurrence at the reference time.
        days_until_start: Whole days until the occurrence starts, rounded up.
    """

    event: GameEvent
    occurrence: EventOccurrence
    days_until_start: int


def time_until(target: str | datetime, at: datetime | None = None) -> Countdown:
    """Return the remaining time until `target`; zero once it has passed."""

    moment = parse_iso(target) if isinstance(target, str) else reference_time(target)
    remaining = int((moment - reference_time(at)).total_seconds())
    if remaining <= 0:
        return Countdown(days=0, hours=0, minutes=0, seconds=0)
    days, remainder = divmod(remaining, 86_400)
    hours, remainder = divmod(remainder, 3_600)
    minutes, seconds = divmod(remainder, 60)
    return Countdown(days=days, hours=hours, minutes=minutes, seconds=seconds)


def countdown_target(occurrence: EventOccurrence) -> str | None:
    """Return the date a countdown should run to for an occurrence.

    Active occurrences count down to their end, upcoming ones to their start,
    and ended occurrences have no countdown.
    """

    if occurrence.status == EventStatus.active:
        return occurrence.end_date
    if occurrence.status == EventStatus.upcoming:
        return occurrence.start_date
    return None


def partition_by_status(
    events: Iterable[GameEvent],
    at: datetime | None = None,
) -> dict[EventStatus, list[GameEvent]]:
    """Group events by status, preserving input order within each group."""

    now = reference_time(at)
    groups: dict[EventStatus, list[GameEvent]] = {status: [] for status in EventStatus}
    for event in events:
        groups[get_current_occurrence(event, now).status].append(event)
    return groups


def build_timeline(events: Iterable[GameEvent], at: datetime | None = None) -> list[TimelineEntry]:
    """Build timeline rows sorted by occurrence start."""

    now = reference_time(at)
    entries: list[TimelineEntry] = []
    for event in events:
        occurrence = get_current_occurrence(event, now)
        delta = parse_iso(occurrence.start_date) - now
        entries.append(
            TimelineEntry(
                event=event,
                occurrence=occurrence,
                days_until_start=math.ceil(delta / _DAY),
            )
        )
    entries.sort(key=lambda entry: parse_iso(entry.occurrence.start_date))
    return entries
