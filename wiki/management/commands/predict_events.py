"""Print the status and predicted occurrences of a game's events."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from events.calculator import get_current_occurrence
from events.isotime import format_iso, parse_iso, reference_time
from events.predictor import DEFAULT_PREDICTION_COUNT, predict_future_occurrences
from wiki.event_loader import get_game_event, get_game_events
from wiki.loader import GameDataNotFound, load_game_meta


class Command(BaseCommand):
    """Show current and upcoming occurrences for events of one game."""

    help = "Print event status and predicted occurrences for a game."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("--game", required=True, help="Game slug (directory under GAME_DATA_DIR).")
        parser.add_argument("--event", default=None, help="Only report the event with this slug.")
        parser.add_argument(
            "--count",
            type=int,
            default=DEFAULT_PREDICTION_COUNT,
            help="Number of predicted occurrences per recurring event.",
        )
        parser.add_argument(
            "--at",
            default=None,
            help="ISO-8601 reference time (defaults to now).",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        game_slug: str = options["game"]
        event_slug: str | None = options["event"]
        count: int = options["count"]

        if count < 0:
            raise CommandError("--count must not be negative.")
        try:
            now = parse_iso(options["at"]) if options["at"] else reference_time()
        except ValueError as exc:
            raise CommandError(f"Invalid --at value: {exc}") from exc
        try:
            load_game_meta(game_slug)
        except GameDataNotFound as exc:
            raise CommandError(str(exc)) from exc

        if event_slug:
            event = get_game_event(game_slug, event_slug)
            if event is None:
                raise CommandError(f"Unknown event: {game_slug}/{event_slug}")
            events = [event]
        else:
            events = get_game_events(game_slug)

        self.stdout.write(f"[AT] {format_iso(now)} events={len(events)}")
        for event in events:
            occurrence = get_current_occurrence(event, now)
            self.stdout.write(
                f"{event.slug} type={event.type} status={occurrence.status} "
                f"start={occurrence.start_date} end={occurrence.end_date}"
            )
            for prediction in predict_future_occurrences(event, count, now):
                self.stdout.write(
                    f"  #{prediction.cycle_index} {prediction.start_date} -> {prediction.end_date} "
                    f"({prediction.status})"
                )
        return None
