"""Pytest fixtures shared across gameWiki tests."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path

import pytest
from django.utils import translation

from events.types import EventType, GameEvent, RecurrenceConfig

REPO_DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "games"


@pytest.fixture(autouse=True)
def _default_language(settings):
    """Start every test in the default language; requests may activate others."""

    translation.activate(settings.LANGUAGE_CODE)
    yield
    translation.deactivate()


@pytest.fixture
def game_data_dir(tmp_path, settings) -> Path:
    """Point `GAME_DATA_DIR` at a writable copy of the bundled game data."""

    target = tmp_path / "games"
    shutil.copytree(REPO_DATA_DIR, target)
    settings.GAME_DATA_DIR = target
    return target


@pytest.fixture
def editor_enabled(settings):
    """Turn on the data editor for the duration of a test."""

    settings.WIKI_ADMIN_ENABLED = True
    return settings


@pytest.fixture
def lucky_spin() -> GameEvent:
    """Recurring event: 7 active days every 21 days from 2024-01-01."""

    return GameEvent(
        id="event-001",
        slug="lucky-spin",
        name="Lucky Spin",
        type=EventType.recurring,
        start_date="2024-01-01T00:00:00Z",
        recurrence=RecurrenceConfig(duration_days=7, interval_days=21),
    )


@pytest.fixture
def lunar_festival() -> GameEvent:
    """One-time event running 2026-02-01 through the end of 2026-02-07."""

    return GameEvent(
        id="event-003",
        slug="lunar-festival",
        name="Lunar Festival",
        type=EventType.one_time,
        start_date="2026-02-01T00:00:00Z",
        end_date="2026-02-07T23:59:59Z",
    )


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no Django request cycle or file IO.
    - `integration`: tests touching Django views, commands, settings, or files.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
