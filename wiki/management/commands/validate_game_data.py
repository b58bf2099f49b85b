"""Validate game data files against the editor schemas.

Every entity file with a declared schema is checked record by record
(field rules, unique ids and slugs). Exits with an error when any record is
invalid so the command can gate CI.
"""

from __future__ import annotations

from collections import Counter

from django.core.management.base import BaseCommand, CommandError

from editor.schemas import get_all_game_schemas, get_game_schemas
from editor.storage import StorageError, read_entity_data
from editor.validation import validate_entity


class Command(BaseCommand):
    """Validate data files for one or all games."""

    help = "Validate game data JSON files against their editor schemas."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("--game", default=None, help="Only validate this game slug.")

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        game_slug: str | None = options["game"]
        if game_slug:
            game = get_game_schemas(game_slug)
            if game is None:
                raise CommandError(f"No schema declared for game: {game_slug}")
            games = [game]
        else:
            games = list(get_all_game_schemas().values())

        problems: list[str] = []
        totals = {"games": len(games), "files": 0, "records": 0, "invalid": 0}
        for game in games:
            for entity_type, schema in game.entities.items():
                try:
                    records = read_entity_data(game.game_slug, entity_type)
                except StorageError as exc:
                    problems.append(f"{game.game_slug}/{entity_type}: {exc}")
                    totals["invalid"] += 1
                    continue
                totals["files"] += 1
                totals["records"] += len(records)

                for key in ("id", "slug"):
                    counts = Counter(r.get(key) for r in records if isinstance(r, dict))
                    duplicates = [value for value, n in counts.items() if n > 1]
                    for value in duplicates:
                        problems.append(f"{game.game_slug}/{entity_type}: duplicate {key} {value!r}")
                        totals["invalid"] += 1

                for index, record in enumerate(records):
                    if not isinstance(record, dict):
                        problems.append(f"{game.game_slug}/{entity_type}[{index}]: record is not an object")
                        totals["invalid"] += 1
                        continue
                    errors = validate_entity(schema, record)
                    if errors:
                        totals["invalid"] += 1
                    label = record.get("id") or index
                    for error in errors:
                        problems.append(f"{game.game_slug}/{entity_type}[{label}].{error.field}: {error.message}")

        for problem in problems:
            self.stderr.write(problem)
        self.stdout.write(f"[VALIDATE] {totals}")
        if problems:
            raise CommandError(f"Found {len(problems)} problem(s) in game data.")
        return None
