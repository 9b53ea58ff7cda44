"""Index-addressed path used by the walk generators.

A path is a doubly linked list whose nodes live in a flat arena. Nodes refer
to each other by index, so cutting a run out of the middle of the path and
inserting a replacement is a constant number of link updates per node.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from templegen.grid import Cell, Direction


@dataclass
class PathNode:
    """A single cell on a path.

    Attributes:
        cell: Grid coordinate of this node.
        prev: Arena index of the previous (older) node, or None for the first.
        next: Arena index of the next (newer) node, or None for the head.
        direction: Move that led onto this cell, when the generator records it.
    """

    cell: Cell
    prev: int | None = None
    next: int | None = None
    direction: Direction | None = None


@dataclass
class Path:
    """Ordered, duplicate-free walk over grid cells.

    ``first`` is the oldest node and ``head`` the most recent one. Nodes that
    are spliced out stay in the arena but are unlinked and forgotten by the
    membership index, so their slots are never visited again.
    """

    nodes: list[PathNode] = field(default_factory=list)
    first: int | None = None
    head: int | None = None
    _index: dict[Cell, int] = field(default_factory=dict, repr=False)

    @classmethod
    def from_cells(cls, cells: Iterable[Cell]) -> Path:
        """Build a path by appending cells in order."""
        path = cls()
        for cell in cells:
            path.append(cell)
        return path

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[Cell]:
        """Iterate cells from the first node to the head."""
        for index in self.indices():
            yield self.nodes[index].cell

    def __contains__(self, cell: object) -> bool:
        return cell in self._index

    def visited(self, cell: Cell) -> bool:
        """True if ``cell`` is currently on the path."""
        return cell in self._index

    def cells(self) -> list[Cell]:
        return list(self)

    def cell(self, index: int) -> Cell:
        return self.nodes[index].cell

    def prev_of(self, index: int) -> int | None:
        return self.nodes[index].prev

    def next_of(self, index: int) -> int | None:
        return self.nodes[index].next

    @property
    def head_cell(self) -> Cell:
        if self.head is None:
            raise IndexError("head of an empty path")
        return self.nodes[self.head].cell

    @property
    def first_cell(self) -> Cell:
        if self.first is None:
            raise IndexError("first cell of an empty path")
        return self.nodes[self.first].cell

    def indices(self) -> Iterator[int]:
        """Arena indices from the first node to the head."""
        cursor = self.first
        while cursor is not None:
            yield cursor
            cursor = self.nodes[cursor].next

    def indices_from_head(self) -> Iterator[int]:
        """Arena indices from the head back to the first node."""
        cursor = self.head
        while cursor is not None:
            yield cursor
            cursor = self.nodes[cursor].prev

    def directions(self) -> list[Direction | None]:
        """Recorded move direction for each node, first to head."""
        return [self.nodes[index].direction for index in self.indices()]

    def _new_node(self, cell: Cell, direction: Direction | None) -> int:
        if cell in self._index:
            raise ValueError(f"Cell {cell} is already on the path")
        self.nodes.append(PathNode(cell=cell, direction=direction))
        index = len(self.nodes) - 1
        self._index[cell] = index
        return index

    def append(self, cell: Cell, direction: Direction | None = None) -> int:
        """Add ``cell`` after the current head and make it the new head.

        Returns:
            Arena index of the new node.

        Raises:
            ValueError: If the cell is already on the path.
        """
        index = self._new_node(cell, direction)
        if self.head is None:
            self.first = index
        else:
            self.nodes[self.head].next = index
            self.nodes[index].prev = self.head
        self.head = index
        return index

    def splice(self, start: int, end: int, cells: Iterable[Cell]) -> list[Cell]:
        """Replace the run strictly between two nodes with new cells.

        ``start`` must come before ``end`` on the path. The new cells are
        linked in order after ``start`` and before ``end``.

        Args:
            start: Arena index of the older boundary node (kept).
            end: Arena index of the newer boundary node (kept).
            cells: Replacement run, ordered from ``start`` towards ``end``.

        Returns:
            The cells that were removed from the path, in path order.

        Raises:
            ValueError: If ``end`` does not follow ``start`` or a new cell is
                already on the path after the removal.
        """
        removed: list[Cell] = []
        cursor = self.nodes[start].next
        while cursor != end:
            if cursor is None:
                raise ValueError("splice end does not follow splice start")
            removed.append(self.nodes[cursor].cell)
            cursor = self.nodes[cursor].next

        for cell in removed:
            unlinked = self._index.pop(cell)
            self.nodes[unlinked].prev = None
            self.nodes[unlinked].next = None

        previous = start
        for cell in cells:
            index = self._new_node(cell, None)
            self.nodes[previous].next = index
            self.nodes[index].prev = previous
            previous = index
        self.nodes[previous].next = end
        self.nodes[end].prev = previous

        return removed
