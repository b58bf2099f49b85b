"""Unit tests for countdown and timeline helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from events.timeline import Countdown, build_timeline, countdown_target, partition_by_status, time_until
from events.types import EventOccurrence, EventStatus, EventType, GameEvent

pytestmark = pytest.mark.unit


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_time_until_splits_remaining_time() -> None:
    countdown = time_until("2024-01-02T01:02:03Z", _utc(2024, 1, 1))
    assert countdown == Countdown(days=1, hours=1, minutes=2, seconds=3)
    assert not countdown.expired


def test_time_until_is_zero_once_target_passed() -> None:
    countdown = time_until(_utc(2024, 1, 1), _utc(2024, 1, 5))
    assert countdown == Countdown(days=0, hours=0, minutes=0, seconds=0)
    assert countdown.expired


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (EventStatus.active, "end"),
        (EventStatus.upcoming, "start"),
        (EventStatus.ended, None),
    ],
)
def test_countdown_target_depends_on_status(status, expected) -> None:
    occurrence = EventOccurrence(start_date="start", end_date="end", status=status)
    assert countdown_target(occurrence) == expected


def test_partition_by_status_keeps_every_group(lucky_spin, lunar_festival) -> None:
    groups = partition_by_status([lunar_festival, lucky_spin], _utc(2024, 1, 3))
    assert set(groups) == set(EventStatus)
    assert groups[EventStatus.active] == [lucky_spin]
    assert groups[EventStatus.upcoming] == [lunar_festival]
    assert groups[EventStatus.ended] == []


def test_build_timeline_sorts_by_start_and_rounds_days_up(lucky_spin) -> None:
    soon = GameEvent(
        id="soon",
        slug="soon",
        name="Soon",
        type=EventType.one_time,
        start_date="2024-01-04T12:00:00Z",
        end_date="2024-01-05T00:00:00Z",
    )
    entries = build_timeline([soon, lucky_spin], _utc(2024, 1, 3))
    assert [entry.event.slug for entry in entries] == ["lucky-spin", "soon"]
    assert entries[0].days_until_start == -2
    assert entries[1].days_until_start == 2
