"""Fantasy name generation for knights and keys.

Names are assembled from syllable tables in ``data/names.toml``. A
:class:`NameForge` never hands out the same name twice, which keeps knight
names unique within a graph and key names fresh across a whole dungeon.
"""

from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Use tomllib (Python 3.11+) with fallback to tomli
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError as e:
        raise ImportError(
            "tomli is required for Python < 3.11. Install with: pip install tomli"
        ) from e

DEFAULT_NAMES_PATH = Path(__file__).parent / "data" / "names.toml"

EPITHET_CHANCE = 0.25
MAX_DRAWS = 50
ROMAN = ["II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X"]


@dataclass
class NameSet:
    """Syllables for one naming flavour."""

    id: str
    onsets: list[str]
    endings: list[str]
    epithets: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, nameset_id: str, data: dict[str, Any]) -> NameSet:
        return cls(
            id=nameset_id,
            onsets=list(data["onsets"]),
            endings=list(data["endings"]),
            epithets=list(data.get("epithets", [])),
        )

    def draw(self, rng: random.Random) -> str:
        name = rng.choice(self.onsets) + rng.choice(self.endings)
        if self.epithets and rng.random() < EPITHET_CHANCE:
            name = f"{name} {rng.choice(self.epithets)}"
        return name


def load_namesets(path: Path = DEFAULT_NAMES_PATH) -> dict[str, NameSet]:
    """Load syllable tables from a TOML file.

    Raises:
        ValueError: If the file defines no namesets or a nameset is empty.
    """
    with path.open("rb") as f:
        data: dict[str, Any] = tomllib.load(f)

    namesets = {
        nameset_id: NameSet.from_dict(nameset_id, entry)
        for nameset_id, entry in data.get("namesets", {}).items()
    }
    if not namesets:
        raise ValueError(f"No namesets defined in {path}")
    for nameset in namesets.values():
        if not nameset.onsets or not nameset.endings:
            raise ValueError(f"Nameset '{nameset.id}' needs onsets and endings")
    return namesets


class NameForge:
    """Hands out unique names drawn from the loaded namesets.

    Args:
        rng: Random source for the run.
        namesets: Tables to draw from (defaults to the bundled file).
        nameset: Restrict every draw to this nameset; otherwise each draw
            picks a nameset at random.
    """

    def __init__(
        self,
        rng: random.Random,
        namesets: dict[str, NameSet] | None = None,
        nameset: str | None = None,
    ) -> None:
        self.rng = rng
        self.namesets = namesets if namesets is not None else load_namesets()
        if nameset is not None and nameset not in self.namesets:
            raise ValueError(f"Unknown nameset: '{nameset}'")
        self.nameset = nameset
        self.used: set[str] = set()

    def with_nameset(self, nameset: str) -> NameForge:
        """A forge sharing this one's tables, RNG and used names."""
        forge = NameForge(self.rng, self.namesets, nameset)
        forge.used = self.used
        return forge

    def random_nameset(self) -> str:
        return self.rng.choice(sorted(self.namesets))

    def _pick_set(self) -> NameSet:
        if self.nameset is not None:
            return self.namesets[self.nameset]
        return self.namesets[self.random_nameset()]

    def forge(self) -> str:
        """Return a name that this forge has never returned before."""
        name = self._pick_set().draw(self.rng)
        for _ in range(MAX_DRAWS):
            if name not in self.used:
                break
            name = self._pick_set().draw(self.rng)
        else:
            name = self._numbered(name)
        self.used.add(name)
        return name

    def _numbered(self, base: str) -> str:
        for suffix in ROMAN:
            candidate = f"{base} {suffix}"
            if candidate not in self.used:
                return candidate
        count = 11
        while f"{base} {count}" in self.used:
            count += 1
        return f"{base} {count}"
