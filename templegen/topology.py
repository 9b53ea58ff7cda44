"""Dungeon topology: rooms placed on an unbounded plane.

Rooms are grown outwards from an entry room. Each extension tries one new
room per free side, keeps those that do not collide with any existing room,
and links them both ways. A finite dungeon is produced by extending random
frontier rooms, pruning the frontier that was never extended, and pairing
every key/lock room with exactly one counterpart.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field

from templegen.grid import Direction
from templegen.payload import (
    Payload,
    PuzzleType,
    Template,
    TemplateFactory,
    empty_payload,
    key_payload,
    lock_payload,
)

logger = logging.getLogger(__name__)

ROOM_GAP = 2


@dataclass(eq=False)
class Room:
    """A placed room.

    Rooms compare by identity; ``id`` is unique within a topology.

    Attributes:
        id: Sequential identifier.
        position: Top-left corner ``(x, y)``.
        level: Search depth; the entry room sits at the configured entry level.
        type: Puzzle type of the room.
        payload: Generated content (its footprint gives the dimension).
        start_dir: Side the room was entered from (None for the entry room).
        parent: Room this one was grown from.
        exits: Neighbour per side; None once the neighbour was pruned.
        extended: True once the room has been extended.
    """

    id: int
    position: tuple[int, int]
    level: int
    type: PuzzleType
    payload: Payload
    start_dir: Direction | None = None
    parent: Room | None = field(default=None, repr=False)
    exits: dict[Direction, Room | None] = field(default_factory=dict, repr=False)
    extended: bool = False

    def __post_init__(self) -> None:
        if self.start_dir is not None and self.parent is not None:
            self.exits[self.start_dir] = self.parent

    @property
    def dimension(self) -> tuple[int, int]:
        return self.payload.dimension

    def intersects(self, other: Room) -> bool:
        """Bounding-box test on both axes; touching boxes count as overlapping."""
        (x, y), (w, h) = self.position, self.dimension
        (ox, oy), (ow, oh) = other.position, other.dimension
        return not (ox > x + w or x > ox + ow or oy > y + h or y > oy + oh)

    def neighbours(self) -> list[tuple[Direction, Room]]:
        """Linked neighbours, skipping pruned exits."""
        return [(d, room) for d, room in self.exits.items() if room is not None]


def place_template(
    parent: Room, direction: Direction, width: int, height: int
) -> tuple[int, int]:
    """Position for a ``width x height`` room beside ``parent``.

    The child sits ``ROOM_GAP`` tiles past the parent's side and is centred
    on it.
    """
    (px, py), (pw, ph) = parent.position, parent.dimension
    if direction is Direction.LEFT:
        return (px - width - ROOM_GAP, py + ph // 2 - height // 2)
    if direction is Direction.RIGHT:
        return (px + pw + ROOM_GAP, py + ph // 2 - height // 2)
    if direction is Direction.UP:
        return (px + pw // 2 - width // 2, py - height - ROOM_GAP)
    return (px + pw // 2 - width // 2, py + ph + ROOM_GAP)


class DungeonTopology:
    """Growing set of non-overlapping rooms.

    Args:
        seed_payload: Payload of the entry room, placed at ``(0, 0)``.
        rng: Random source for the run.
        factory: Template factory used to fill new rooms.
        entry_level: Level of the entry room.
        seed_type: Puzzle type of the entry room (defaults to the payload's).
    """

    def __init__(
        self,
        seed_payload: Payload,
        rng: random.Random,
        factory: TemplateFactory,
        entry_level: int = 5,
        seed_type: PuzzleType | None = None,
    ) -> None:
        self.rng = rng
        self.factory = factory
        self._next_id = 0
        self.entry = self._new_room(
            position=(0, 0),
            level=entry_level,
            room_type=seed_type or seed_payload.type,
            payload=seed_payload,
        )
        self.rooms: list[Room] = [self.entry]

    def _new_room(
        self,
        position: tuple[int, int],
        level: int,
        room_type: PuzzleType,
        payload: Payload,
        start_dir: Direction | None = None,
        parent: Room | None = None,
    ) -> Room:
        room = Room(
            id=self._next_id,
            position=position,
            level=level,
            type=room_type,
            payload=payload,
            start_dir=start_dir,
            parent=parent,
        )
        self._next_id += 1
        return room

    @property
    def unused_keys(self) -> set[str]:
        """Key names placed during extension that no lock has claimed yet."""
        return self.factory.unused_keys

    def room_by_id(self, room_id: int) -> Room | None:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def collides(self, candidate: Room) -> bool:
        return any(room.intersects(candidate) for room in self.rooms)

    def extend(self, room: Room) -> list[Room]:
        """Try to grow a new room on every side except the entry side.

        Returns:
            Rooms that were accepted.
        """
        if room.extended:
            return []

        accepted: list[Room] = []
        for direction in Direction:
            if direction is room.start_dir:
                continue
            template: Template = self.factory.generate(room.level + 1, room.type)
            width, height = template.payload.dimension
            candidate = self._new_room(
                position=place_template(room, direction, width, height),
                level=room.level + 1,
                room_type=template.type,
                payload=template.payload,
                start_dir=direction.opposite,
                parent=room,
            )

            if self.collides(candidate):
                logger.debug(
                    "Rejected %s room %s of room %d (overlap)",
                    template.type.value,
                    direction.value,
                    room.id,
                )
                continue

            self.rooms.append(candidate)
            room.exits[direction] = candidate
            if template.on_place is not None:
                template.on_place()
            accepted.append(candidate)

        room.extended = True
        return accepted

    def generate_finite(self, n: int) -> None:
        """Extend ``n`` random frontier rooms, then prune and pair keys.

        Raises:
            ValueError: If ``n`` is negative.
        """
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")

        for iteration in range(n):
            frontier = [room for room in self.rooms if not room.extended]
            if not frontier:
                logger.debug("No frontier left after %d extensions", iteration)
                break
            self.extend(self.rng.choice(frontier))

        self._prune_frontier()
        self._pair_keys_and_locks()

    def _prune_frontier(self) -> None:
        """Detach every never-extended room except the entry room."""
        kept: list[Room] = []
        for room in self.rooms:
            if room.extended or room is self.entry:
                kept.append(room)
                continue
            if room.parent is not None and room.start_dir is not None:
                room.parent.exits[room.start_dir.opposite] = None
        logger.debug("Pruned %d frontier rooms", len(self.rooms) - len(kept))
        self.rooms = kept

    def _pair_keys_and_locks(self) -> None:
        """Re-pair every key/lock room with a freshly named counterpart.

        Overrides any key or lock chosen lazily during extension. An odd room
        out becomes a neutral room with the same footprint.
        """
        key_rooms = [room for room in self.rooms if room.type is PuzzleType.KEY_OR_LOCK]
        remaining = list(range(len(key_rooms)))

        while len(remaining) > 1:
            first = remaining.pop(self.rng.randrange(len(remaining)))
            second = remaining.pop(self.rng.randrange(len(remaining)))
            key_index, lock_index = sorted((first, second))

            name = self.factory.names.forge()
            key_room, lock_room = key_rooms[key_index], key_rooms[lock_index]
            # Neighbours were placed against the current footprints.
            key_room.payload = key_payload(name, *key_room.dimension)
            lock_room.payload = lock_payload(name, *lock_room.dimension)

        if remaining:
            leftover = key_rooms[remaining[0]]
            width, height = leftover.dimension
            leftover.payload = empty_payload(width, height, PuzzleType.KEY_OR_LOCK)

        self.factory.unused_keys.clear()

    def key_pairs(self) -> list[tuple[str, Room | None, Room | None]]:
        """Key names with the rooms granting and requiring them."""
        pairs: dict[str, list[Room | None]] = {}
        for room in self.rooms:
            key = room.payload.key_provided
            lock = room.payload.lock_required
            if key is not None:
                pairs.setdefault(key, [None, None])[0] = room
            if lock is not None:
                pairs.setdefault(lock, [None, None])[1] = room
        return [(name, key, lock) for name, (key, lock) in sorted(pairs.items())]

    def reachable_from_entry(self) -> set[int]:
        """Ids of rooms reachable from the entry through linked exits."""
        seen: set[int] = set()
        queue: deque[Room] = deque([self.entry])
        while queue:
            room = queue.popleft()
            if room.id in seen:
                continue
            seen.add(room.id)
            for _, neighbour in room.neighbours():
                if neighbour.id not in seen:
                    queue.append(neighbour)
        return seen
