"""Unit tests for the event occurrence calculator."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from events.calculator import get_current_occurrence, get_event_status, is_event_active
from events.isotime import parse_iso
from events.types import EventStatus, EventType, GameEvent, RecurrenceConfig

pytestmark = pytest.mark.unit


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_recurring_event_before_anchor_is_upcoming_with_first_window(lucky_spin) -> None:
    """Before the anchor the first window is returned with a computed end."""

    occurrence = get_current_occurrence(lucky_spin, _utc(2023, 12, 25))
    assert occurrence.status == EventStatus.upcoming
    assert occurrence.start_date == "2024-01-01T00:00:00Z"
    assert occurrence.end_date == "2024-01-08T00:00:00.000Z"


def test_recurring_event_active_inside_current_cycle(lucky_spin) -> None:
    """A reference time inside a cycle's window reports that cycle."""

    occurrence = get_current_occurrence(lucky_spin, _utc(2024, 1, 24, 12))
    assert occurrence.status == EventStatus.active
    assert occurrence.start_date == "2024-01-22T00:00:00.000Z"
    assert occurrence.end_date == "2024-01-29T00:00:00.000Z"


def test_recurring_event_in_downtime_reports_next_cycle(lucky_spin) -> None:
    """Between windows the next cycle is reported as upcoming."""

    occurrence = get_current_occurrence(lucky_spin, _utc(2024, 1, 10))
    assert occurrence.status == EventStatus.upcoming
    assert occurrence.start_date == "2024-01-22T00:00:00.000Z"
    assert occurrence.end_date == "2024-01-29T00:00:00.000Z"


def test_recurring_event_window_bounds_are_inclusive(lucky_spin) -> None:
    """The anchor instant and the exact window end are both active."""

    assert get_event_status(lucky_spin, _utc(2024, 1, 1)) == EventStatus.active
    assert get_event_status(lucky_spin, _utc(2024, 1, 8)) == EventStatus.active
    after_end = get_current_occurrence(lucky_spin, _utc(2024, 1, 8, 0, 0, 1))
    assert after_end.status == EventStatus.upcoming
    assert after_end.start_date == "2024-01-22T00:00:00.000Z"


def test_recurring_event_far_future_uses_same_cycle_math(lucky_spin) -> None:
    """Cycles are located directly even years after the anchor."""

    at = _utc(2029, 6, 1)
    occurrence = get_current_occurrence(lucky_spin, at)
    start = parse_iso(occurrence.start_date)
    anchor = _utc(2024, 1, 1)
    assert (start - anchor) % timedelta(days=21) == timedelta(0)
    assert parse_iso(occurrence.end_date) - start == timedelta(days=7)
    if occurrence.status == EventStatus.active:
        assert start <= at <= parse_iso(occurrence.end_date)
    else:
        assert start > at


def test_recurring_status_is_periodic(lucky_spin) -> None:
    """Shifting the reference time by one interval shifts the window by one interval."""

    interval = timedelta(days=21)
    for at in (_utc(2024, 2, 1), _utc(2024, 2, 14, 6), _utc(2025, 7, 3, 23, 59)):
        first = get_current_occurrence(lucky_spin, at)
        second = get_current_occurrence(lucky_spin, at + interval)
        assert first.status == second.status
        assert parse_iso(second.start_date) - parse_iso(first.start_date) == interval


def test_zero_duration_cycle_is_active_only_at_its_instant() -> None:
    """A zero-length window is active at its start and upcoming right after."""

    event = GameEvent(
        id="flash",
        slug="flash",
        name="Flash Sale",
        type=EventType.recurring,
        start_date="2024-01-01T00:00:00Z",
        recurrence=RecurrenceConfig(duration_days=0, interval_days=7),
    )
    assert is_event_active(event, _utc(2024, 1, 8))
    occurrence = get_current_occurrence(event, _utc(2024, 1, 8, 0, 0, 1))
    assert occurrence.status == EventStatus.upcoming
    assert occurrence.start_date == "2024-01-15T00:00:00.000Z"
    assert occurrence.end_date == "2024-01-15T00:00:00.000Z"


def test_recurring_event_without_recurrence_falls_back_to_ended() -> None:
    """Incomplete recurring data reports ended with the start date as both bounds."""

    event = GameEvent(
        id="broken",
        slug="broken",
        name="Broken",
        type=EventType.recurring,
        start_date="2024-01-01T00:00:00Z",
    )
    occurrence = get_current_occurrence(event, _utc(2024, 1, 3))
    assert occurrence.status == EventStatus.ended
    assert occurrence.start_date == "2024-01-01T00:00:00Z"
    assert occurrence.end_date == "2024-01-01T00:00:00Z"


@pytest.mark.parametrize(
    ("at", "expected"),
    [
        (_utc(2026, 1, 15), EventStatus.upcoming),
        (_utc(2026, 2, 1), EventStatus.active),
        (_utc(2026, 2, 3, 12), EventStatus.active),
        (_utc(2026, 2, 7, 23, 59, 59), EventStatus.active),
        (_utc(2026, 2, 8), EventStatus.ended),
        (_utc(2026, 2, 10), EventStatus.ended),
    ],
)
def test_one_time_event_status(lunar_festival, at, expected) -> None:
    """One-time windows are inclusive on both ends."""

    assert get_event_status(lunar_festival, at) == expected


def test_one_time_event_echoes_stored_dates(lunar_festival) -> None:
    """One-time occurrences always report the stored strings verbatim."""

    for at in (_utc(2025, 1, 1), _utc(2026, 2, 2), _utc(2027, 1, 1)):
        occurrence = get_current_occurrence(lunar_festival, at)
        assert occurrence.start_date == "2026-02-01T00:00:00Z"
        assert occurrence.end_date == "2026-02-07T23:59:59Z"


def test_one_time_event_without_end_date_is_a_single_instant() -> None:
    """Missing end dates collapse the window onto the start."""

    event = GameEvent(
        id="launch",
        slug="launch",
        name="Launch Day",
        type=EventType.one_time,
        start_date="2026-03-01T12:00:00Z",
    )
    assert is_event_active(event, _utc(2026, 3, 1, 12))
    occurrence = get_current_occurrence(event, _utc(2026, 3, 1, 12, 0, 1))
    assert occurrence.status == EventStatus.ended
    assert occurrence.end_date == "2026-03-01T12:00:00Z"


def test_naive_reference_time_is_treated_as_utc(lucky_spin) -> None:
    """Naive reference times are interpreted as UTC."""

    assert get_event_status(lucky_spin, datetime(2024, 1, 10)) == EventStatus.upcoming


def test_default_reference_time_uses_current_clock(lunar_festival) -> None:
    """Omitting the reference time evaluates against now."""

    now = datetime.now(timezone.utc)
    assert get_event_status(lunar_festival) == get_event_status(lunar_festival, now)
