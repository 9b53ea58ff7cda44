"""Hamiltonian-style path mazes for torch-lighting puzzles.

The generator grows a non-self-intersecting "gold path" by random nudging:
a straight stretch of the path is pushed one cell sideways into free space,
and whatever the stretch used to cover is released. Once the path stops
growing, passages are laid along it and a balancing pass adds side passages
so that path cells tend towards three exits and other cells towards two.
Path cells that end up with three or more passages are the junctions the
player has to light.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from templegen.grid import Cell, Edge, cells_between, edge_key, in_bounds, neighbors
from templegen.path import Path

logger = logging.getLogger(__name__)

# Seed loop, oldest cell first; the head is (0, 1).
SEED_LOOP: tuple[Cell, ...] = ((0, 0), (1, 0), (1, 1), (0, 1))

PATH_DEGREE = 3
OPEN_DEGREE = 2


@dataclass
class Corridor:
    """A candidate rewrite of the path.

    Attributes:
        start: Arena index of the older node the corridor leaves from.
        cells: Replacement cells, ordered from ``start`` to ``end``.
        end: Arena index of the newer node the corridor rejoins.
    """

    start: int
    cells: list[Cell]
    end: int


@dataclass
class PathMaze:
    """A generated maze.

    Attributes:
        width: Grid width.
        height: Grid height.
        path: The gold path, oldest cell first.
        edges: Canonical passages between adjacent cells.
    """

    width: int
    height: int
    path: Path
    edges: set[Edge] = field(default_factory=set)

    @property
    def root(self) -> Cell:
        """Cell holding the source torch, centred on the bottom row."""
        return (self.width // 2, self.height - 1)

    def add_edge(self, a: Cell, b: Cell) -> None:
        self.edges.add(edge_key(a, b))

    def has_edge(self, a: Cell, b: Cell) -> bool:
        return edge_key(a, b) in self.edges

    def degree(self, cell: Cell) -> int:
        """Number of passages touching ``cell``."""
        return sum(1 for n in neighbors(cell) if self.has_edge(cell, n))

    def junctions(self) -> list[Cell]:
        """Path cells with three or more passages, in path order."""
        return [cell for cell in self.path if self.degree(cell) >= PATH_DEGREE]


def find_corridors(
    path: Path, width: int, height: int, taken: set[Cell]
) -> list[Corridor]:
    """Collect every valid sideways rewrite of the path.

    For each consecutive pair of nodes (walking back from the head), every
    older node still aligned with the pair's axis is a possible partner.
    Each aligned pair yields up to two corridors: the straight segment
    between the pair shifted one cell to either side. A corridor is kept only
    if all its cells are inside the grid and free.
    """

    def free(cell: Cell) -> bool:
        return in_bounds(cell, width, height) and cell not in taken

    corridors: list[Corridor] = []
    for cursor in path.indices_from_head():
        before = path.prev_of(cursor)
        if before is None:
            break
        i1, j1 = path.cell(cursor)
        same_column = path.cell(before)[0] == i1

        tail: int | None = before
        while tail is not None:
            i2, j2 = path.cell(tail)
            if same_column and i2 != i1:
                break
            if not same_column and j2 != j1:
                break

            if i1 == i2:
                tries = [
                    cells_between((i2 + 1, j2), (i1 + 1, j1)),
                    cells_between((i2 - 1, j2), (i1 - 1, j1)),
                ]
            else:
                tries = [
                    cells_between((i2, j2 + 1), (i1, j1 + 1)),
                    cells_between((i2, j2 - 1), (i1, j1 - 1)),
                ]

            for cells in tries:
                if all(free(c) for c in cells):
                    corridors.append(Corridor(start=tail, cells=cells, end=cursor))

            tail = path.prev_of(tail)

    return corridors


def _balance_degrees(maze: PathMaze, rng: random.Random) -> None:
    """Add at most one side passage per cell towards its target degree."""
    on_path = set(maze.path)

    def target(cell: Cell) -> int:
        return PATH_DEGREE if cell in on_path else OPEN_DEGREE

    for i in range(maze.width):
        for j in range(maze.height):
            cell = (i, j)
            around = neighbors(cell)
            available = [
                n
                for n in around
                if in_bounds(n, maze.width, maze.height)
                and maze.degree(n) < target(n)
            ]
            present = [n for n in around if maze.has_edge(cell, n)]
            desired = target(cell)

            if len(present) < desired and len(available) >= desired:
                missing = [n for n in available if n not in present]
                if missing:
                    maze.add_edge(cell, rng.choice(missing))


def walk_path(width: int, height: int, rng: random.Random) -> PathMaze:
    """Generate a path maze on a ``width x height`` grid.

    Args:
        width: Grid width (>= 2).
        height: Grid height (>= 2).
        rng: Random source for the run.

    Returns:
        PathMaze with its gold path and passages.

    Raises:
        ValueError: If the grid cannot hold the 2x2 seed loop.
    """
    if width < 2 or height < 2:
        raise ValueError(f"path maze needs at least 2x2, got {width}x{height}")

    path = Path.from_cells(SEED_LOOP)
    taken: set[Cell] = set(SEED_LOOP)

    iterations = width * height * 3 // 4
    for iteration in range(iterations):
        corridors = find_corridors(path, width, height, taken)
        if not corridors:
            logger.debug(
                "Path maze %dx%d settled after %d rewrites", width, height, iteration
            )
            break

        chosen = rng.choice(corridors)
        released = path.splice(chosen.start, chosen.end, chosen.cells)
        taken.difference_update(released)
        taken.update(chosen.cells)

    maze = PathMaze(width=width, height=height, path=path)

    for a, b in zip(SEED_LOOP, SEED_LOOP[1:] + SEED_LOOP[:1]):
        maze.add_edge(a, b)
    maze.add_edge(path.first_cell, path.head_cell)

    cells = path.cells()
    for a, b in zip(cells, cells[1:]):
        maze.add_edge(a, b)

    _balance_degrees(maze, rng)
    return maze
