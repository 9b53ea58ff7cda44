"""Goishi-Hiroi stone walks.

The walker starts in the top-left corner and repeatedly jumps along its row
or column to a free cell, never reversing the previous move. The resulting
single-line path is the solution the player must retrace by picking up every
stone.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from templegen.grid import Cell, Direction, cells_between
from templegen.path import Path

logger = logging.getLogger(__name__)


@dataclass
class StoneWalk:
    """A generated stone walk.

    Attributes:
        width: Board width.
        height: Board height.
        step_budget: Maximum number of moves that were allowed.
        path: Visited stones, starting at ``(0, 0)``.
    """

    width: int
    height: int
    step_budget: int
    path: Path

    @property
    def stones(self) -> list[Cell]:
        return self.path.cells()

    @property
    def moves(self) -> list[Direction]:
        """Direction of every move, in order."""
        return [d for d in self.path.directions() if d is not None]


def _candidates(
    head: Cell, width: int, height: int, taken: set[Cell]
) -> dict[Direction, list[Cell]]:
    """Free cells strictly beyond ``head`` in each direction."""
    i, j = head
    return {
        Direction.UP: [(i, c) for c in range(height) if c < j and (i, c) not in taken],
        Direction.DOWN: [
            (i, c) for c in range(height) if c > j and (i, c) not in taken
        ],
        Direction.RIGHT: [
            (c, j) for c in range(width) if c > i and (c, j) not in taken
        ],
        Direction.LEFT: [(c, j) for c in range(width) if c < i and (c, j) not in taken],
    }


def walk_stones(
    width: int, height: int, step_budget: int, rng: random.Random
) -> StoneWalk:
    """Generate a stone walk on a ``width x height`` board.

    Every cell passed over by a move is taken, so later moves can jump over
    those cells but never land on them. Only the exact reverse of the
    previous move is forbidden.

    Args:
        width: Board width (>= 1).
        height: Board height (>= 1).
        step_budget: Maximum number of moves (>= 0).
        rng: Random source for the run.

    Returns:
        StoneWalk whose path holds at most ``step_budget + 1`` cells.

    Raises:
        ValueError: On non-positive dimensions or a negative budget.
    """
    if width < 1 or height < 1:
        raise ValueError(f"board must be at least 1x1, got {width}x{height}")
    if step_budget < 0:
        raise ValueError(f"step_budget must be >= 0, got {step_budget}")

    path = Path()
    path.append((0, 0))
    taken: set[Cell] = {(0, 0)}
    previous: Direction | None = None

    for _ in range(step_budget):
        head = path.head_cell
        all_candidates = _candidates(head, width, height, taken)
        directions = [
            d
            for d, cells in all_candidates.items()
            if cells and (previous is None or d is not previous.opposite)
        ]
        if not directions:
            logger.debug("Stone walk hit a dead end after %d stones", len(path))
            break

        direction = rng.choice(directions)
        destination = rng.choice(all_candidates[direction])

        taken.update(cells_between(head, destination))
        path.append(destination, direction)
        previous = direction

    return StoneWalk(width=width, height=height, step_budget=step_budget, path=path)
