"""Unit tests for recurring-event prediction."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from events import predictor
from events.calculator import get_current_occurrence
from events.isotime import format_iso, parse_iso
from events.predictor import predict_future_occurrences
from events.types import EventStatus, EventType, GameEvent, RecurrenceConfig

pytestmark = pytest.mark.unit


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_predictions_start_with_active_cycle(lucky_spin) -> None:
    """While a cycle is active it is the first prediction."""

    predictions = predict_future_occurrences(lucky_spin, 5, _utc(2024, 1, 3))
    assert [row.start_date for row in predictions] == [
        "2024-01-01T00:00:00.000Z",
        "2024-01-22T00:00:00.000Z",
        "2024-02-12T00:00:00.000Z",
        "2024-03-04T00:00:00.000Z",
        "2024-03-25T00:00:00.000Z",
    ]
    assert [row.cycle_index for row in predictions] == [0, 1, 2, 3, 4]
    assert [row.status for row in predictions] == [EventStatus.active] + [EventStatus.upcoming] * 4


def test_predictions_at_the_anchor_instant_start_with_cycle_zero(lucky_spin) -> None:
    """At exactly the anchor the first cycle is active and the walk starts at cycle 0."""

    predictions = predict_future_occurrences(lucky_spin, 5, _utc(2024, 1, 1))
    assert [row.start_date for row in predictions] == [
        "2024-01-01T00:00:00.000Z",
        "2024-01-22T00:00:00.000Z",
        "2024-02-12T00:00:00.000Z",
        "2024-03-04T00:00:00.000Z",
        "2024-03-25T00:00:00.000Z",
    ]
    assert [row.cycle_index for row in predictions] == [0, 1, 2, 3, 4]
    assert predictions[0].status == EventStatus.active
    assert all(row.status == EventStatus.upcoming for row in predictions[1:])
    for row in predictions:
        assert parse_iso(row.end_date) - parse_iso(row.start_date) == timedelta(days=7)


def test_predictions_skip_cycle_that_already_ended(lucky_spin) -> None:
    """During downtime the walk moves past the finished cycle."""

    predictions = predict_future_occurrences(lucky_spin, 3, _utc(2024, 1, 10))
    assert [row.cycle_index for row in predictions] == [1, 2, 3]
    assert predictions[0].start_date == "2024-01-22T00:00:00.000Z"
    assert predictions[0].end_date == "2024-01-29T00:00:00.000Z"
    assert all(row.status == EventStatus.upcoming for row in predictions)


def test_predictions_before_anchor_start_at_cycle_zero(lucky_spin) -> None:
    """Reference times before the anchor begin with cycle 0."""

    predictions = predict_future_occurrences(lucky_spin, 2, _utc(2023, 6, 1))
    assert predictions[0].cycle_index == 0
    assert predictions[0].start_date == "2024-01-01T00:00:00.000Z"
    assert predictions[0].status == EventStatus.upcoming


def test_first_prediction_matches_current_occurrence(lucky_spin) -> None:
    """The first prediction is the calculator's current or next window."""

    for at in (_utc(2024, 1, 5), _utc(2024, 1, 15), _utc(2027, 9, 9, 9)):
        first = predict_future_occurrences(lucky_spin, 1, at)[0]
        current = get_current_occurrence(lucky_spin, at)
        assert parse_iso(first.start_date) == parse_iso(current.start_date)
        assert first.status == current.status


def test_predictions_are_evenly_spaced_and_round_trip(lucky_spin) -> None:
    """Consecutive predictions are one interval apart and re-format identically."""

    predictions = predict_future_occurrences(lucky_spin, 6, _utc(2025, 3, 3))
    starts = [parse_iso(row.start_date) for row in predictions]
    assert all(later - earlier == timedelta(days=21) for earlier, later in zip(starts, starts[1:]))
    for row in predictions:
        assert format_iso(parse_iso(row.start_date)) == row.start_date
        assert format_iso(parse_iso(row.end_date)) == row.end_date
        assert parse_iso(row.end_date) - parse_iso(row.start_date) == timedelta(days=7)


def test_interval_defaults_to_seven_days() -> None:
    """Recurrence without an interval repeats weekly."""

    event = GameEvent.from_json(
        {
            "id": "weekly",
            "slug": "weekly",
            "name": "Weekly",
            "type": "recurring",
            "startDate": "2024-01-06T00:00:00Z",
            "recurrence": {"type": "weekly", "durationDays": 2},
        }
    )
    predictions = predict_future_occurrences(event, 2, _utc(2024, 1, 9))
    assert [row.start_date for row in predictions] == ["2024-01-13T00:00:00.000Z", "2024-01-20T00:00:00.000Z"]


@pytest.mark.parametrize("count", [0, -3])
def test_non_positive_count_returns_nothing(lucky_spin, count) -> None:
    assert predict_future_occurrences(lucky_spin, count, _utc(2024, 1, 3)) == []


def test_one_time_events_have_no_predictions(lunar_festival) -> None:
    assert predict_future_occurrences(lunar_festival, 5, _utc(2026, 1, 1)) == []


def test_recurring_event_without_recurrence_has_no_predictions() -> None:
    event = GameEvent(
        id="broken",
        slug="broken",
        name="Broken",
        type=EventType.recurring,
        start_date="2024-01-01T00:00:00Z",
    )
    assert predict_future_occurrences(event, 5, _utc(2024, 1, 3)) == []


def test_walk_stops_at_cycle_cap(monkeypatch) -> None:
    """The walk gives up after the cycle allowance instead of looping forever."""

    monkeypatch.setattr(predictor, "EXTRA_CYCLE_ALLOWANCE", -3)
    event = GameEvent(
        id="daily",
        slug="daily",
        name="Daily",
        type=EventType.recurring,
        start_date="2024-01-01T00:00:00Z",
        recurrence=RecurrenceConfig(duration_days=1, interval_days=1),
    )
    predictions = predict_future_occurrences(event, 5, _utc(2024, 1, 1, 12))
    assert 0 < len(predictions) < 5


def test_prediction_json_shape(lucky_spin) -> None:
    row = predict_future_occurrences(lucky_spin, 1, _utc(2024, 1, 3))[0]
    assert row.as_json() == {
        "startDate": "2024-01-01T00:00:00.000Z",
        "endDate": "2024-01-08T00:00:00.000Z",
        "status": "active",
        "cycleIndex": 0,
    }
