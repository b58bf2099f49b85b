"""Unit tests for YAML-declared editor schemas."""

from __future__ import annotations

import pytest

from editor.schemas import (
    FieldType,
    SortOrder,
    get_all_game_schemas,
    get_entity_schema,
    get_game_schemas,
    load_schema_file,
)

pytestmark = pytest.mark.unit


def test_bundled_schema_declares_every_entity_type() -> None:
    game = get_game_schemas("wittle-defender")
    assert game is not None
    assert game.game_id == "wittle-defender-001"
    assert set(game.entities) == {"heroes", "dungeons", "skills", "mechanics", "events"}
    assert "wittle-defender" in get_all_game_schemas()


def test_hero_schema_fields_and_rules() -> None:
    schema = get_entity_schema("wittle-defender", "heroes")
    assert schema.label == "Hero"
    assert schema.sort_field == "tier"
    assert schema.sort_order == SortOrder.desc
    slug = schema.field_by_name("slug")
    assert slug.required
    assert slug.validation.pattern == "^[a-z0-9-]+$"
    rarity = schema.field_by_name("rarity")
    assert rarity.type == FieldType.select
    assert [option.value for option in rarity.options] == ["common", "rare", "epic", "legendary", "mythic"]
    assert schema.field_by_name("stats").type == FieldType.array


def test_event_schema_uses_conditional_fields() -> None:
    schema = get_entity_schema("wittle-defender", "events")
    end_date = schema.field_by_name("endDate")
    recurrence = schema.field_by_name("recurrence")
    assert end_date.applies_to({"type": "one_time"})
    assert not end_date.applies_to({"type": "recurring"})
    assert recurrence.applies_to({"type": "recurring"})
    assert not recurrence.applies_to({})


def test_unknown_lookups_return_none() -> None:
    assert get_game_schemas("nope") is None
    assert get_entity_schema("nope", "heroes") is None
    assert get_entity_schema("wittle-defender", "pets") is None


def test_search_fields_use_declared_fields() -> None:
    schema = get_entity_schema("wittle-defender", "mechanics")
    assert schema.effective_search_fields() == ("name", "description", "category")


def test_load_schema_file_reports_missing_game_keys(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("entities: {}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="game_id"):
        load_schema_file(path)


def test_load_schema_file_rejects_non_mapping(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_schema_file(path)


def test_load_schema_file_parses_minimal_schema(tmp_path) -> None:
    path = tmp_path / "mini.yaml"
    path.write_text(
        "\n".join(
            [
                "game_id: mini-001",
                "game_slug: mini",
                "entities:",
                "  pets:",
                "    fields:",
                "      - {name: id, type: string, required: true}",
                "      - {name: cute, type: boolean}",
            ]
        ),
        encoding="utf-8",
    )
    game = load_schema_file(path)
    assert game.game_name == "mini"
    pets = game.entities["pets"]
    assert pets.label == "pets"
    assert pets.effective_search_fields() == ("name",)
    assert pets.field_by_name("cute").required is False
    assert pets.field_by_name("id").label == "id"
