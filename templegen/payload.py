"""Room payloads and the template factory.

A payload is what a room hands to the rendering layer: the puzzle type, the
room footprint, a small option bag and the raw generator result. Footprints
follow the board layouts the renderer draws (walls and a border walkway
around the puzzle area), so the topology can place rooms without knowing
anything about tiles.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from templegen.knights import EnemyGraph
from templegen.maze import PathMaze, walk_path
from templegen.names import NameForge
from templegen.partition import BeadPartition, generate_partition
from templegen.stones import StoneWalk, walk_stones

logger = logging.getLogger(__name__)

KEY_ROOM_SIZE = 7
ALTAR_HEIGHT = 12
MAX_REST_COLUMNS = 5
MAX_REST_ROWS = 3


class PuzzleType(Enum):
    """Kinds of rooms the factory can produce."""

    PATH = "path"
    STONES = "stones"
    ALTAR = "altar"
    KEY_OR_LOCK = "key_or_lock"
    REST = "rest"
    KNIGHTS = "knights"


ALL_PUZZLE_TYPES: tuple[PuzzleType, ...] = tuple(PuzzleType)


@dataclass
class Payload:
    """Generated content of a room.

    Attributes:
        type: Puzzle type this payload was built for.
        width: Footprint width in tiles.
        height: Footprint height in tiles.
        options: Read-only option bag for the interaction layer
            (``root``, ``altar_target``, ``key_provided``, ``lock_required``,
            ``auto_finish``, ``revealed``, ``declarations``, ``goishi_hiroi``).
        content: Raw generator output, if any.
    """

    type: PuzzleType
    width: int
    height: int
    options: dict[str, Any] = field(default_factory=dict)
    content: Any = None

    @property
    def dimension(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def key_provided(self) -> str | None:
        return self.options.get("key_provided")

    @property
    def lock_required(self) -> str | None:
        return self.options.get("lock_required")


@dataclass
class Template:
    """A payload ready for placement.

    Attributes:
        type: Puzzle type of the room.
        payload: The generated payload.
        on_place: Hook to run only if the room is actually placed.
    """

    type: PuzzleType
    payload: Payload
    on_place: Callable[[], None] | None = None


# =============================================================================
# Per-level sizing
# =============================================================================


def path_side(level: int) -> int:
    return math.isqrt(5 * level + 4)


def stone_side(level: int) -> int:
    return 2 * math.ceil(math.sqrt(5 * level + 5) / 2) + 1


def stone_budget(level: int) -> int:
    return level * 3


def altar_buckets(level: int) -> int:
    return max(1, math.ceil(level / 3))


def knight_iterations(level: int) -> int:
    return max(0, math.ceil((level - 5) / 10))


# =============================================================================
# Payload builders
# =============================================================================


def path_payload(maze: PathMaze) -> Payload:
    return Payload(
        type=PuzzleType.PATH,
        width=maze.width * 2 + 3,
        height=maze.height * 2 + 3,
        options={"root": maze.root},
        content=maze,
    )


def stones_payload(walk: StoneWalk) -> Payload:
    return Payload(
        type=PuzzleType.STONES,
        width=walk.width + 6,
        height=walk.height + 6,
        options={"goishi_hiroi": True},
        content=walk,
    )


def altar_payload(partition: BeadPartition) -> Payload:
    return Payload(
        type=PuzzleType.ALTAR,
        width=partition.bucket_count * 4 + 5,
        height=ALTAR_HEIGHT,
        options={"altar_target": partition.target},
        content=partition,
    )


def knights_payload(graph: EnemyGraph) -> Payload:
    """Square room with one pedestal per knight."""
    side = math.ceil(math.sqrt(len(graph)))
    revealed = graph.reveal_pair()
    return Payload(
        type=PuzzleType.KNIGHTS,
        width=side * 2 + 3,
        height=side * 2 + 3,
        options={
            "revealed": [k.name for k in revealed] if revealed is not None else [],
            "declarations": graph.render(),
        },
        content=graph,
    )


def key_payload(
    name: str, width: int = KEY_ROOM_SIZE, height: int = KEY_ROOM_SIZE
) -> Payload:
    return Payload(
        type=PuzzleType.KEY_OR_LOCK,
        width=width,
        height=height,
        options={"key_provided": name, "auto_finish": True},
    )


def lock_payload(
    name: str, width: int = KEY_ROOM_SIZE, height: int = KEY_ROOM_SIZE
) -> Payload:
    return Payload(
        type=PuzzleType.KEY_OR_LOCK,
        width=width,
        height=height,
        options={"lock_required": name},
    )


def empty_payload(
    width: int, height: int, puzzle_type: PuzzleType = PuzzleType.REST
) -> Payload:
    """Neutral room that opens as soon as it is entered."""
    return Payload(
        type=puzzle_type,
        width=width,
        height=height,
        options={"auto_finish": True},
    )


def rest_payload(columns: int, rows: int) -> Payload:
    """Garden room laid out as a ``columns x rows`` grid of plots."""
    return Payload(
        type=PuzzleType.REST,
        width=2 * math.ceil((columns * 6 + 2) / 2) + 1,
        height=2 * math.ceil((rows * 7 + 2) / 2) + 1,
        options={"auto_finish": True},
        content={"columns": columns, "rows": rows},
    )


# =============================================================================
# Template factory
# =============================================================================


class TemplateFactory:
    """Builds room templates for the dungeon topology.

    The factory also owns the lazy key bookkeeping: key rooms register a new
    name when placed, lock rooms consume one of the still unmatched names.

    Args:
        rng: Random source for the run.
        names: Forge for key names and knight names.
        puzzle_types: Types the factory may choose from.
    """

    def __init__(
        self,
        rng: random.Random,
        names: NameForge,
        puzzle_types: Sequence[PuzzleType] = ALL_PUZZLE_TYPES,
    ) -> None:
        if len(set(puzzle_types)) < 2:
            raise ValueError("At least two distinct puzzle types are required")
        self.rng = rng
        self.names = names
        self.puzzle_types = list(dict.fromkeys(puzzle_types))
        self.unused_keys: set[str] = set()

    def generate(self, level: int, exclude: PuzzleType | None = None) -> Template:
        """Pick a type other than ``exclude`` and build a template for it."""
        candidates = [t for t in self.puzzle_types if t is not exclude]
        selection = self.rng.choice(candidates)
        return self.build(selection, level)

    def build(self, puzzle_type: PuzzleType, level: int) -> Template:
        if puzzle_type is PuzzleType.PATH:
            side = path_side(level)
            payload = path_payload(walk_path(side, side, self.rng))
        elif puzzle_type is PuzzleType.STONES:
            side = stone_side(level)
            payload = stones_payload(
                walk_stones(side, side, stone_budget(level), self.rng)
            )
        elif puzzle_type is PuzzleType.ALTAR:
            payload = altar_payload(generate_partition(altar_buckets(level), self.rng))
        elif puzzle_type is PuzzleType.KNIGHTS:
            names = self.names.with_nameset(self.names.random_nameset())
            graph = EnemyGraph(names, self.rng, knight_iterations(level))
            payload = knights_payload(graph)
        elif puzzle_type is PuzzleType.REST:
            payload = rest_payload(
                self.rng.randint(1, MAX_REST_COLUMNS),
                self.rng.randint(1, MAX_REST_ROWS),
            )
        else:
            return self.key_or_lock()

        logger.debug(
            "Built %s payload %dx%d at level %d",
            puzzle_type.value,
            payload.width,
            payload.height,
            level,
        )
        return Template(type=puzzle_type, payload=payload)

    def key_or_lock(self) -> Template:
        """Mint a new key, or require one of the unmatched keys.

        With ``n`` unmatched keys a new key is minted with probability
        ``1 / (n + 1)``.
        """
        unused = self.unused_keys
        if not unused or self.rng.random() < 1 / (len(unused) + 1):
            name = self.names.forge()
            return Template(
                type=PuzzleType.KEY_OR_LOCK,
                payload=key_payload(name),
                on_place=lambda: unused.add(name),
            )

        chosen = self.rng.choice(sorted(unused))
        return Template(
            type=PuzzleType.KEY_OR_LOCK,
            payload=lock_payload(chosen),
            on_place=lambda: unused.discard(chosen),
        )
