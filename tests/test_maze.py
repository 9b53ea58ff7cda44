"""Tests for path maze generation."""

import random

import pytest

from templegen.grid import edge_key, in_bounds, manhattan
from templegen.maze import SEED_LOOP, PathMaze, find_corridors, walk_path
from templegen.path import Path


@pytest.mark.parametrize("size", [2, 3, 4, 6])
@pytest.mark.parametrize("seed", range(5))
def test_path_properties(size, seed):
    """Gold path is duplicate-free, in bounds and adjacent cell to cell."""
    maze = walk_path(size, size, random.Random(seed))
    cells = maze.path.cells()

    assert len(set(cells)) == len(cells)
    assert all(in_bounds(cell, size, size) for cell in cells)
    for a, b in zip(cells, cells[1:]):
        assert manhattan(a, b) == 1


@pytest.mark.parametrize("seed", range(5))
def test_edges_canonical_and_adjacent(seed):
    maze = walk_path(5, 4, random.Random(seed))
    for a, b in maze.edges:
        assert edge_key(a, b) == (a, b)
        assert manhattan(a, b) == 1
        assert in_bounds(a, 5, 4) and in_bounds(b, 5, 4)


@pytest.mark.parametrize("seed", range(5))
def test_seed_loop_edges_present(seed):
    """The initial 2x2 loop stays connected whatever the rewrites did."""
    maze = walk_path(4, 4, random.Random(seed))
    loop = list(SEED_LOOP)
    for a, b in zip(loop, loop[1:] + loop[:1]):
        assert maze.has_edge(a, b)


@pytest.mark.parametrize("seed", range(5))
def test_path_ends_fixed(seed):
    """Rewrites only touch inner nodes, so the path still runs (0,0)..(0,1)."""
    maze = walk_path(5, 5, random.Random(seed))
    assert maze.path.first_cell == (0, 0)
    assert maze.path.head_cell == (0, 1)


def test_path_grows():
    maze = walk_path(6, 6, random.Random(1))
    assert len(maze.path) > len(SEED_LOOP)


def test_consecutive_path_cells_linked():
    maze = walk_path(5, 5, random.Random(3))
    cells = maze.path.cells()
    for a, b in zip(cells, cells[1:]):
        assert maze.has_edge(a, b)


def test_junctions_are_path_cells():
    maze = walk_path(6, 6, random.Random(2))
    on_path = set(maze.path)
    for cell in maze.junctions():
        assert cell in on_path
        assert maze.degree(cell) >= 3


def test_root():
    maze = PathMaze(width=5, height=4, path=Path())
    assert maze.root == (2, 3)


def test_deterministic():
    a = walk_path(5, 5, random.Random(9))
    b = walk_path(5, 5, random.Random(9))
    assert a.path.cells() == b.path.cells()
    assert a.edges == b.edges


class TestFindCorridors:
    """Tests for the sideways rewrite search."""

    def test_two_by_two_has_no_room(self):
        """A seed loop filling the whole grid cannot move."""
        path = Path.from_cells(SEED_LOOP)
        assert find_corridors(path, 2, 2, set(SEED_LOOP)) == []

    def test_corridors_are_free_and_in_bounds(self):
        path = Path.from_cells(SEED_LOOP)
        taken = set(SEED_LOOP)
        corridors = find_corridors(path, 4, 4, taken)
        assert corridors
        for corridor in corridors:
            for cell in corridor.cells:
                assert in_bounds(cell, 4, 4)
                assert cell not in taken

    def test_corridor_cells_join_their_ends(self):
        path = Path.from_cells(SEED_LOOP)
        for corridor in find_corridors(path, 4, 4, set(SEED_LOOP)):
            assert manhattan(path.cell(corridor.start), corridor.cells[0]) == 1
            assert manhattan(corridor.cells[-1], path.cell(corridor.end)) == 1


@pytest.mark.parametrize("width,height", [(1, 4), (4, 1), (0, 0)])
def test_rejects_small_grid(width, height):
    with pytest.raises(ValueError, match="at least 2x2"):
        walk_path(width, height, random.Random(1))
