"""Knight enemy graphs for the deduction puzzle.

Three colored houses of knights feud with each other. The graph starts as a
triangle of kings and grows by expanding a knight: it is replaced by an
anchor/core pair of the other two colors and one fringe knight per former
enemy. Every enemy edge therefore joins two different colors, so the player
can deduce each knight's color from the rendered history of duels.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from templegen.names import NameForge

logger = logging.getLogger(__name__)

SEASONS = ("spring", "fall", "winter", "summer")
BASE_YEAR_RANGE = 4000
YEAR_OFFSET_RANGE = 80


class KnightColor(Enum):
    """House colors."""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"


@dataclass
class Knight:
    """A knight in the enemy graph.

    Knights are identified by their integer ``id``; the name is only used
    when rendering.
    """

    id: int
    color: KnightColor
    name: str
    enemies: set[int] = field(default_factory=set)

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Knight):
            return NotImplemented
        return self.id == other.id


class EnemyGraph:
    """Colored conflict graph between knights.

    Args:
        names: Forge used to name new knights.
        rng: Random source for the run.
        iterations: Number of random expansions applied after seeding.
    """

    def __init__(
        self, names: NameForge, rng: random.Random, iterations: int = 0
    ) -> None:
        if iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {iterations}")
        self.names = names
        self.rng = rng
        self.knights: dict[int, Knight] = {}
        self._next_id = 0

        red = self.add_knight(KnightColor.RED)
        blue = self.add_knight(KnightColor.BLUE)
        green = self.add_knight(KnightColor.GREEN)
        self.make_enemies(red, blue)
        self.make_enemies(red, green)
        self.make_enemies(blue, green)

        for _ in range(iterations):
            self.iterate()

    def __len__(self) -> int:
        return len(self.knights)

    @property
    def knights_by_name(self) -> dict[str, Knight]:
        return {knight.name: knight for knight in self.knights.values()}

    def add_knight(self, color: KnightColor) -> Knight:
        knight = Knight(id=self._next_id, color=color, name=self.names.forge())
        self._next_id += 1
        self.knights[knight.id] = knight
        return knight

    def make_enemies(self, a: Knight, b: Knight) -> None:
        if a.id == b.id:
            raise ValueError(f"Knight {a.name} cannot be its own enemy")
        a.enemies.add(b.id)
        b.enemies.add(a.id)

    def remove_knight(self, knight: Knight) -> None:
        """Remove a knight and every edge pointing at it."""
        for enemy_id in knight.enemies:
            self.knights[enemy_id].enemies.discard(knight.id)
        knight.enemies.clear()
        del self.knights[knight.id]

    def enemies_of(self, knight: Knight) -> list[Knight]:
        return [self.knights[enemy_id] for enemy_id in sorted(knight.enemies)]

    def expand(self, knight: Knight) -> None:
        """Replace ``knight`` with an anchor, a core and its fringe knights."""
        others = [c for c in KnightColor if c is not knight.color]
        anchor_color = self.rng.choice(others)
        core_color = next(c for c in others if c is not anchor_color)

        anchor = self.add_knight(anchor_color)
        core = self.add_knight(core_color)
        self.make_enemies(anchor, core)

        locations = [
            k
            for k in self.knights.values()
            if k.color is core_color and k.id != core.id
        ]
        if locations:
            self.make_enemies(anchor, self.rng.choice(locations))
        else:
            logger.debug("No %s knight left to anchor to", core_color.value)

        for enemy in self.enemies_of(knight):
            fringe = self.add_knight(knight.color)
            self.make_enemies(fringe, enemy)
            self.make_enemies(fringe, anchor)
            self.make_enemies(fringe, core)

        self.remove_knight(knight)

    def iterate(self) -> None:
        """Expand a uniformly random knight."""
        knight = self.rng.choice(list(self.knights.values()))
        self.expand(knight)

    def edges(self) -> list[tuple[int, int]]:
        """Every undirected enemy edge exactly once."""
        done: set[int] = set()
        events: list[tuple[int, int]] = []
        for knight in self.knights.values():
            for enemy_id in sorted(knight.enemies):
                if enemy_id not in done:
                    events.append((knight.id, enemy_id))
            done.add(knight.id)
        return events

    def render(self) -> dict[str, list[str]]:
        """Render the duel history each knight declares.

        Edges are shuffled into a timeline with ascending dates. For each duel
        a coin flip decides the winner, who "felled" the loser if the loser
        never appears in a later duel and "bested" them otherwise.

        Returns:
            Knight name -> declarations in timeline order, keys sorted.
        """
        events = self.edges()
        self.rng.shuffle(events)

        base_year = self.rng.randrange(BASE_YEAR_RANGE)
        dates = sorted(
            base_year + self.rng.randrange(YEAR_OFFSET_RANGE) for _ in events
        )

        declarations: dict[int, list[str]] = {k: [] for k in self.knights}

        for index, (a, b) in enumerate(events):
            winner, loser = (a, b) if self.rng.random() < 0.5 else (b, a)
            is_last = all(loser not in later for later in events[index + 1 :])
            when = f"In the {SEASONS[dates[index] % 4]} of {dates[index] // 4}"
            loser_name = self.knights[loser].name
            winner_name = self.knights[winner].name

            verb = "felled" if is_last else "bested"
            declarations[winner].append(f"{when}, I {verb} {loser_name}")
            if is_last:
                declarations[loser].append(f"{when}, I was felled by {winner_name}")

        by_name = {self.knights[k].name: lines for k, lines in declarations.items()}
        return {name: by_name[name] for name in sorted(by_name)}

    def render_text(self, rendering: dict[str, list[str]] | None = None) -> str:
        """Format a rendering as the text each knight speaks."""
        if rendering is None:
            rendering = self.render()
        return "\n".join(
            "\n".join([f"I am {name}.", *lines]) for name, lines in rendering.items()
        )

    def reveal_pair(self) -> tuple[Knight, Knight] | None:
        """Pick a knight and one of its enemies whose colors are shown."""
        candidates = [k for k in self.knights.values() if k.enemies]
        if not candidates:
            return None
        king = self.rng.choice(candidates)
        queen = self.rng.choice(self.enemies_of(king))
        return king, queen
