"""Grid primitives shared by every generator.

Cells are ``(i, j)`` pairs where ``i`` is the column and ``j`` the row.
Moving ``UP`` decreases ``j``; moving ``RIGHT`` increases ``i``.
"""

from __future__ import annotations

from enum import Enum

Cell = tuple[int, int]
Edge = tuple[Cell, Cell]


class Direction(Enum):
    """Cardinal direction on the grid."""

    UP = "up"
    DOWN = "down"
    RIGHT = "right"
    LEFT = "left"

    @property
    def opposite(self) -> Direction:
        """Direction pointing the other way."""
        return OPPOSITES[self]

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)


OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def step(cell: Cell, direction: Direction) -> Cell:
    """Return the cell one step from ``cell`` in ``direction``."""
    i, j = cell
    if direction is Direction.UP:
        return (i, j - 1)
    if direction is Direction.DOWN:
        return (i, j + 1)
    if direction is Direction.RIGHT:
        return (i + 1, j)
    return (i - 1, j)


def neighbors(cell: Cell) -> list[Cell]:
    """The four orthogonal neighbours of a cell, in Direction order."""
    return [step(cell, d) for d in Direction]


def in_bounds(cell: Cell, width: int, height: int) -> bool:
    """Check that a cell lies inside ``[0, width) x [0, height)``."""
    i, j = cell
    return 0 <= i < width and 0 <= j < height


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def edge_key(a: Cell, b: Cell) -> Edge:
    """Canonical key for the undirected edge between two cells.

    ``edge_key(a, b) == edge_key(b, a)`` for any pair.
    """
    return (a, b) if a <= b else (b, a)


def cells_between(start: Cell, end: Cell) -> list[Cell]:
    """All cells on the straight segment from ``start`` to ``end``, inclusive.

    Returns an empty list when the two cells share neither a row nor a column.
    The result is ordered from ``start`` towards ``end``.
    """
    i1, j1 = start
    i2, j2 = end
    if i1 == i2:
        delta = 1 if j2 >= j1 else -1
        return [(i1, j) for j in range(j1, j2 + delta, delta)]
    if j1 == j2:
        delta = 1 if i2 >= i1 else -1
        return [(i, j1) for i in range(i1, i2 + delta, delta)]
    return []
