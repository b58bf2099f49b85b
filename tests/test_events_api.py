"""Integration tests for the events JSON API."""

from __future__ import annotations

import pytest
from django.urls import reverse

pytestmark = pytest.mark.integration

GAME = "wittle-defender"


def _api(client, **params):
    return client.get(reverse("events_api", args=[GAME]), params)


def test_events_api_reports_status_occurrence_and_predictions(client, game_data_dir) -> None:
    response = _api(client, at="2024-01-10T00:00:00Z", count="2")
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["at"] == "2024-01-10T00:00:00.000Z"

    rows = {row["slug"]: row for row in payload["data"]}
    lucky = rows["lucky-spin"]
    assert lucky["type"] == "recurring"
    assert lucky["status"] == "upcoming"
    assert lucky["occurrence"] == {
        "startDate": "2024-01-22T00:00:00.000Z",
        "endDate": "2024-01-29T00:00:00.000Z",
        "status": "upcoming",
    }
    assert [row["cycleIndex"] for row in lucky["predictions"]] == [1, 2]

    festival = rows["lunar-festival"]
    assert festival["status"] == "upcoming"
    assert festival["occurrence"]["startDate"] == "2026-02-01T00:00:00Z"
    assert festival["predictions"] == []


def test_events_api_defaults_to_five_predictions(client, game_data_dir) -> None:
    payload = _api(client, at="2024-01-03T00:00:00Z").json()
    lucky = next(row for row in payload["data"] if row["slug"] == "lucky-spin")
    assert len(lucky["predictions"]) == 5


def test_events_api_caps_prediction_count(client, game_data_dir) -> None:
    payload = _api(client, at="2024-01-03T00:00:00Z", count="500").json()
    lucky = next(row for row in payload["data"] if row["slug"] == "lucky-spin")
    assert len(lucky["predictions"]) == 50


def test_events_api_translates_names(client, game_data_dir) -> None:
    response = client.get(
        reverse("events_api", args=[GAME]),
        {"at": "2024-01-03T00:00:00Z"},
        HTTP_ACCEPT_LANGUAGE="zh",
    )
    names = {row["slug"]: row["name"] for row in response.json()["data"]}
    assert names["lucky-spin"] == "幸运转盘"


@pytest.mark.parametrize(("params", "status"), [({"at": "never"}, 400), ({"count": "many"}, 400)])
def test_events_api_rejects_bad_parameters(client, game_data_dir, params, status) -> None:
    response = _api(client, **params)
    assert response.status_code == status
    assert response.json()["success"] is False


def test_events_api_unknown_game_is_404(client, game_data_dir) -> None:
    response = client.get(reverse("events_api", args=["nope"]))
    assert response.status_code == 404
    assert response.json()["success"] is False
