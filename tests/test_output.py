"""Tests for JSON and spoiler log export."""

import json
import random

import pytest

from templegen.config import Config, DungeonConfig
from templegen.generator import generate_dungeon
from templegen.maze import walk_path
from templegen.output import (
    FORMAT_VERSION,
    content_summary,
    export_json,
    export_spoiler_log,
    topology_to_dict,
)
from templegen.partition import generate_partition
from templegen.payload import (
    PuzzleType,
    altar_payload,
    empty_payload,
    path_payload,
    stones_payload,
)
from templegen.stones import walk_stones
from templegen.topology import DungeonTopology


def make_dungeon(seed: int = 11, rooms: int = 10, types=None) -> DungeonTopology:
    """Helper to generate a small dungeon."""
    dungeon = DungeonConfig(rooms=rooms)
    if types is not None:
        dungeon = DungeonConfig(rooms=rooms, puzzle_types=types)
    return generate_dungeon(Config(seed=seed, dungeon=dungeon), seed)


# =============================================================================
# Content summaries
# =============================================================================


class TestContentSummary:
    """Tests for per-type content summaries."""

    def test_path(self):
        maze = walk_path(4, 4, random.Random(1))
        summary = content_summary(path_payload(maze))
        assert summary["root"] == [2, 3]
        assert summary["path"][0] == [0, 0]
        assert len(summary["edges"]) == len(maze.edges)
        assert all(len(edge) == 2 for edge in summary["edges"])

    def test_stones(self):
        walk = walk_stones(5, 5, 10, random.Random(1))
        summary = content_summary(stones_payload(walk))
        assert summary["stones"][0] == [0, 0]
        assert len(summary["moves"]) == len(summary["stones"]) - 1
        assert set(summary["moves"]) <= {"up", "down", "left", "right"}

    def test_altar(self):
        partition = generate_partition(2, random.Random(1))
        summary = content_summary(altar_payload(partition))
        assert summary["target"] == 6
        assert all(sum(bucket) == 6 for bucket in summary["buckets"])

    def test_empty(self):
        assert content_summary(empty_payload(3, 3)) is None


# =============================================================================
# JSON export
# =============================================================================


class TestTopologyToDict:
    """Tests for topology_to_dict."""

    def test_top_level_keys(self):
        topology = make_dungeon()
        data = topology_to_dict(topology, 11)
        assert data["version"] == FORMAT_VERSION
        assert data["seed"] == 11
        assert data["total_rooms"] == len(topology.rooms)
        assert data["entry_id"] == topology.entry.id
        assert len(data["rooms"]) == len(topology.rooms)

    def test_exits_reference_rooms(self):
        data = topology_to_dict(make_dungeon(), 11)
        by_id = {room["id"]: room for room in data["rooms"]}
        opposite = {"up": "down", "down": "up", "left": "right", "right": "left"}
        for room in data["rooms"]:
            for direction, target in room["exits"].items():
                assert by_id[target]["exits"][opposite[direction]] == room["id"]

    def test_key_pairs(self):
        topology = make_dungeon(types=["key_or_lock", "rest"], rooms=12)
        data = topology_to_dict(topology, 11)
        by_id = {room["id"]: room for room in data["rooms"]}
        for pair in data["key_pairs"]:
            assert by_id[pair["key_room"]]["options"]["key_provided"] == pair["name"]
            assert by_id[pair["lock_room"]]["options"]["lock_required"] == pair["name"]

    def test_knights_content(self):
        topology = make_dungeon(types=["knights", "rest"], rooms=6)
        data = topology_to_dict(topology, 11)
        knight_rooms = [r for r in data["rooms"] if r["type"] == "knights"]
        assert knight_rooms
        for room in knight_rooms:
            names = [k["name"] for k in room["content"]["knights"]]
            assert sorted(room["options"]["declarations"]) == sorted(names)
            assert len(room["options"]["revealed"]) == 2

    def test_json_serializable(self):
        data = topology_to_dict(make_dungeon(), 11)
        assert json.loads(json.dumps(data)) == data


class TestExportJson:
    """Tests for export_json."""

    def test_writes_file(self, tmp_path):
        topology = make_dungeon()
        output = tmp_path / "temple.json"
        export_json(topology, 11, output)

        with output.open() as f:
            data = json.load(f)
        assert data["seed"] == 11
        assert data["total_rooms"] == len(topology.rooms)

    def test_indented(self, tmp_path):
        output = tmp_path / "temple.json"
        export_json(make_dungeon(rooms=2), 11, output)
        assert output.read_text().startswith('{\n  "version"')


# =============================================================================
# Spoiler log
# =============================================================================


class TestExportSpoilerLog:
    """Tests for export_spoiler_log."""

    def test_header(self, tmp_path):
        output = tmp_path / "spoiler.txt"
        topology = make_dungeon()
        export_spoiler_log(topology, 11, output)

        content = output.read_text()
        assert "TEMPLEGEN SPOILER (seed: 11)" in content
        assert f"Total rooms: {len(topology.rooms)}" in content
        assert "ROOMS" in content

    def test_every_room_listed(self, tmp_path):
        output = tmp_path / "spoiler.txt"
        topology = make_dungeon()
        export_spoiler_log(topology, 11, output)

        content = output.read_text()
        for room in topology.rooms:
            assert f"[{room.id:>3}]" in content

    def test_keys_section(self, tmp_path):
        output = tmp_path / "spoiler.txt"
        topology = make_dungeon(types=["key_or_lock", "rest"], rooms=12)
        export_spoiler_log(topology, 11, output)

        content = output.read_text()
        for name, key_room, lock_room in topology.key_pairs():
            assert (
                f"{name}: key in room {key_room.id}, lock in room {lock_room.id}"
                in content
            )

    @pytest.mark.parametrize("seed", [3, 11])
    def test_knights_narrative(self, tmp_path, seed):
        output = tmp_path / "spoiler.txt"
        topology = make_dungeon(seed=seed, types=["knights", "rest"], rooms=6)
        export_spoiler_log(topology, seed, output)

        content = output.read_text()
        for room in topology.rooms:
            if room.type is not PuzzleType.KNIGHTS:
                continue
            assert f"KNIGHTS OF ROOM {room.id}" in content
            for name in room.payload.options["declarations"]:
                assert f"I am {name}." in content
