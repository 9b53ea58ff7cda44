"""Output module for dungeon export to JSON and spoiler logs.

This module provides functions to export the generated dungeon to:
- JSON format for consumption by the renderer and visualization tools
- Human-readable spoiler log for players
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from templegen.knights import EnemyGraph
from templegen.maze import PathMaze
from templegen.partition import BeadPartition
from templegen.payload import Payload, PuzzleType
from templegen.stones import StoneWalk
from templegen.topology import DungeonTopology, Room

FORMAT_VERSION = "1.0"


# =============================================================================
# Content summaries
# =============================================================================


def _maze_summary(maze: PathMaze) -> dict[str, Any]:
    return {
        "width": maze.width,
        "height": maze.height,
        "root": list(maze.root),
        "path": [list(cell) for cell in maze.path.cells()],
        "edges": [[list(a), list(b)] for a, b in sorted(maze.edges)],
        "junctions": [list(cell) for cell in sorted(maze.junctions())],
    }


def _stones_summary(walk: StoneWalk) -> dict[str, Any]:
    return {
        "width": walk.width,
        "height": walk.height,
        "step_budget": walk.step_budget,
        "stones": [list(cell) for cell in walk.stones],
        "moves": [d.value for d in walk.moves],
    }


def _altar_summary(partition: BeadPartition) -> dict[str, Any]:
    return {
        "target": partition.target,
        "buckets": [list(bucket) for bucket in partition.buckets],
    }


def _knights_summary(graph: EnemyGraph) -> dict[str, Any]:
    knights = sorted(graph.knights.values(), key=lambda k: k.name)
    return {
        "knights": [
            {
                "name": knight.name,
                "color": knight.color.value,
                "enemies": sorted(e.name for e in graph.enemies_of(knight)),
            }
            for knight in knights
        ],
    }


def content_summary(payload: Payload) -> dict[str, Any] | None:
    """Serializable view of a payload's generator output.

    Args:
        payload: Room payload.

    Returns:
        Type-specific summary, or None for rooms without content.
    """
    content = payload.content
    if isinstance(content, PathMaze):
        return _maze_summary(content)
    if isinstance(content, StoneWalk):
        return _stones_summary(content)
    if isinstance(content, BeadPartition):
        return _altar_summary(content)
    if isinstance(content, EnemyGraph):
        return _knights_summary(content)
    if isinstance(content, dict):
        return dict(content)
    return None


def _options_to_dict(options: dict[str, Any]) -> dict[str, Any]:
    return {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in sorted(options.items())
    }


def room_to_dict(room: Room) -> dict[str, Any]:
    """Convert a room to its JSON form."""
    return {
        "id": room.id,
        "type": room.type.value,
        "level": room.level,
        "position": list(room.position),
        "dimension": list(room.dimension),
        "start_dir": room.start_dir.value if room.start_dir is not None else None,
        "exits": {
            direction.value: neighbour.id for direction, neighbour in room.neighbours()
        },
        "options": _options_to_dict(room.payload.options),
        "content": content_summary(room.payload),
    }


def topology_to_dict(topology: DungeonTopology, seed: int) -> dict[str, Any]:
    """Convert a finished topology to the JSON export format.

    Args:
        topology: The topology to export.
        seed: Seed the topology was generated with.

    Returns:
        Dictionary ready for ``json.dump``.
    """
    return {
        "version": FORMAT_VERSION,
        "seed": seed,
        "total_rooms": len(topology.rooms),
        "entry_id": topology.entry.id,
        "rooms": [room_to_dict(room) for room in topology.rooms],
        "key_pairs": [
            {
                "name": name,
                "key_room": key_room.id if key_room is not None else None,
                "lock_room": lock_room.id if lock_room is not None else None,
            }
            for name, key_room, lock_room in topology.key_pairs()
        ],
    }


def export_json(topology: DungeonTopology, seed: int, output_path: Path) -> None:
    """Export a topology to a JSON file.

    Args:
        topology: The topology to export
        seed: Seed the topology was generated with
        output_path: Path to write the JSON file
    """
    data = topology_to_dict(topology, seed)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


# =============================================================================
# Spoiler log
# =============================================================================


def _room_label(room: Room) -> str:
    options = room.payload.options
    if options.get("key_provided"):
        return f"key '{options['key_provided']}'"
    if options.get("lock_required"):
        return f"lock '{options['lock_required']}'"
    if room.type is PuzzleType.KEY_OR_LOCK:
        return "empty"
    if room.type is PuzzleType.ALTAR:
        return f"altar (target {options['altar_target']})"
    if room.type is PuzzleType.KNIGHTS:
        return f"knights ({len(room.payload.content)})"
    return room.type.value


def export_spoiler_log(topology: DungeonTopology, seed: int, output_path: Path) -> None:
    """Export human-readable spoiler log.

    Args:
        topology: The topology to export
        seed: Seed the topology was generated with
        output_path: Path to write the spoiler log
    """
    lines: list[str] = []

    # Header
    lines.append("=" * 60)
    lines.append(f"TEMPLEGEN SPOILER (seed: {seed})")
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("=" * 60)
    lines.append(f"Total rooms: {len(topology.rooms)}")
    lines.append(f"Entry room: {topology.entry.id}")
    lines.append("")

    # Rooms
    lines.append("ROOMS")
    lines.append("-" * 60)
    for room in sorted(topology.rooms, key=lambda r: (r.level, r.id)):
        x, y = room.position
        w, h = room.dimension
        exits = ", ".join(
            f"{d.value}->{neighbour.id}" for d, neighbour in room.neighbours()
        )
        lines.append(
            f"[{room.id:>3}] L{room.level:<3} {_room_label(room):<24} "
            f"at ({x}, {y}) size {w}x{h}"
        )
        if exits:
            lines.append(f"      exits: {exits}")
    lines.append("")

    # Keys
    pairs = topology.key_pairs()
    if pairs:
        lines.append("KEYS")
        lines.append("-" * 60)
        for name, key_room, lock_room in pairs:
            key_id = key_room.id if key_room is not None else "?"
            lock_id = lock_room.id if lock_room is not None else "?"
            lines.append(f"{name}: key in room {key_id}, lock in room {lock_id}")
        lines.append("")

    # Knight histories
    for room in topology.rooms:
        if room.type is not PuzzleType.KNIGHTS:
            continue
        graph: EnemyGraph = room.payload.content
        lines.append(f"KNIGHTS OF ROOM {room.id}")
        lines.append("-" * 60)
        for knight in sorted(graph.knights.values(), key=lambda k: k.name):
            lines.append(f"{knight.name}: {knight.color.value}")
        lines.append("")
        lines.append(graph.render_text(room.payload.options["declarations"]))
        lines.append("")

    with open(output_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
