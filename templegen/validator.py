"""Topology validation for templegen.

This module validates finished dungeons, distinguishing between errors
(broken invariants) and warnings (informational).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations

from templegen.config import Config
from templegen.payload import PuzzleType
from templegen.topology import DungeonTopology


@dataclass
class ValidationResult:
    """Result of topology validation.

    Attributes:
        is_valid: True if the topology passes all required checks (no errors).
        errors: List of blocking issues that make the topology invalid.
        warnings: List of informational issues that don't block validation.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_topology(
    topology: DungeonTopology, config: Config | None = None
) -> ValidationResult:
    """Validate a finished topology against all constraints.

    Checks:
    - No two rooms overlap
    - Every exit points at a kept room whose opposite exit points back
    - Every room is reachable from the entry room
    - Every key has exactly one lock and vice versa
    - Room count against the requested size (warning)
    - At least one puzzle room (warning)

    Args:
        topology: The finalized topology.
        config: Configuration with the requested dungeon size.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    errors.extend(_check_overlaps(topology))
    errors.extend(_check_exit_symmetry(topology))
    errors.extend(_check_reachability(topology))
    errors.extend(_check_key_pairs(topology))

    _check_size(topology, config, warnings)

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _check_overlaps(topology: DungeonTopology) -> list[str]:
    """Check that no two room bounding boxes intersect."""
    errors: list[str] = []
    for a, b in combinations(topology.rooms, 2):
        if a.intersects(b):
            errors.append(
                f"Rooms {a.id} at {a.position} and {b.id} at {b.position} overlap"
            )
    return errors


def _check_exit_symmetry(topology: DungeonTopology) -> list[str]:
    """Check that exits point at kept rooms that link back."""
    errors: list[str] = []
    kept = {room.id for room in topology.rooms}
    for room in topology.rooms:
        for direction, neighbour in room.neighbours():
            if neighbour.id not in kept:
                errors.append(
                    f"Room {room.id}: exit {direction.value} leads to "
                    f"removed room {neighbour.id}"
                )
                continue
            back = neighbour.exits.get(direction.opposite)
            if back is not room:
                errors.append(
                    f"Room {room.id}: exit {direction.value} to room "
                    f"{neighbour.id} has no matching {direction.opposite.value} exit"
                )
    return errors


def _check_reachability(topology: DungeonTopology) -> list[str]:
    reachable = topology.reachable_from_entry()
    return [
        f"Room {room.id} is unreachable from the entry room"
        for room in topology.rooms
        if room.id not in reachable
    ]


def _check_key_pairs(topology: DungeonTopology) -> list[str]:
    """Check that every key name has one key room and one lock room."""
    errors: list[str] = []
    for name, key_room, lock_room in topology.key_pairs():
        if key_room is None:
            errors.append(f"Lock '{name}' has no matching key")
        if lock_room is None:
            errors.append(f"Key '{name}' has no matching lock")

    granted: dict[str, int] = {}
    required: dict[str, int] = {}
    for room in topology.rooms:
        if room.payload.key_provided is not None:
            name = room.payload.key_provided
            granted[name] = granted.get(name, 0) + 1
        if room.payload.lock_required is not None:
            name = room.payload.lock_required
            required[name] = required.get(name, 0) + 1
    for name, count in sorted(granted.items()):
        if count > 1:
            errors.append(f"Key '{name}' is granted by {count} rooms")
    for name, count in sorted(required.items()):
        if count > 1:
            errors.append(f"Lock '{name}' is required by {count} rooms")
    return errors


def _check_size(
    topology: DungeonTopology, config: Config | None, warnings: list[str]
) -> None:
    if config is not None and len(topology.rooms) < config.dungeon.rooms:
        warnings.append(
            f"Few rooms: {len(topology.rooms)} < {config.dungeon.rooms} requested"
        )

    puzzles = [
        room
        for room in topology.rooms
        if room.type not in (PuzzleType.REST, PuzzleType.KEY_OR_LOCK)
    ]
    if not puzzles:
        warnings.append("No puzzle rooms in the dungeon")
