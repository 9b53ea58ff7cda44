"""Integration tests for full dungeon generation."""

import json

import pytest

from templegen.config import Config, DungeonConfig
from templegen.generator import generate_with_retry
from templegen.output import export_json, export_spoiler_log
from templegen.payload import PuzzleType
from templegen.validator import validate_topology


@pytest.mark.parametrize("seed", [1, 17, 256, 9001])
def test_default_dungeon_is_valid(seed):
    """Full default-sized generation validates for a range of seeds."""
    config = Config(seed=seed)
    result = generate_with_retry(config)

    assert result.validation.is_valid, result.validation.errors
    topology = result.topology
    assert len(topology.rooms) >= 1
    assert validate_topology(topology, config).errors == []


@pytest.mark.parametrize(
    "types",
    [
        ["path", "stones"],
        ["altar", "key_or_lock"],
        ["knights", "rest", "key_or_lock"],
    ],
)
def test_restricted_puzzle_types(types):
    config = Config(seed=5, dungeon=DungeonConfig(rooms=10, puzzle_types=types))
    result = generate_with_retry(config)

    allowed = {PuzzleType(t) for t in types}
    for room in result.topology.rooms:
        assert room.type in allowed


def test_levels_increase_along_exits():
    """A room is always one level deeper than the room it grew from."""
    config = Config(seed=31, dungeon=DungeonConfig(rooms=15))
    topology = generate_with_retry(config).topology
    for room in topology.rooms:
        if room.parent is not None:
            assert room.level == room.parent.level + 1


def test_full_export(tmp_path):
    """Generate, export, and read back a dungeon."""
    config = Config(seed=2024, dungeon=DungeonConfig(rooms=12))
    result = generate_with_retry(config)

    json_path = tmp_path / "temple.json"
    spoiler_path = tmp_path / "spoiler.txt"
    export_json(result.topology, result.seed, json_path)
    export_spoiler_log(result.topology, result.seed, spoiler_path)

    data = json.loads(json_path.read_text())
    assert data["seed"] == 2024
    assert data["total_rooms"] == len(result.topology.rooms)
    assert {pair["name"] for pair in data["key_pairs"]} == {
        name for name, _, _ in result.topology.key_pairs()
    }
    assert "TEMPLEGEN SPOILER (seed: 2024)" in spoiler_path.read_text()


def test_reproducible_export(tmp_path):
    config = Config(seed=808, dungeon=DungeonConfig(rooms=12))
    first = tmp_path / "a.json"
    second = tmp_path / "b.json"
    export_json(generate_with_retry(config).topology, 808, first)
    export_json(generate_with_retry(config).topology, 808, second)
    assert first.read_text() == second.read_text()
