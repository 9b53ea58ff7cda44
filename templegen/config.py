"""Configuration parsing for templegen."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from templegen.payload import ALL_PUZZLE_TYPES, PuzzleType

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

DEFAULT_PUZZLE_TYPES = [t.value for t in ALL_PUZZLE_TYPES]


@dataclass
class DungeonConfig:
    """Dungeon topology configuration."""

    rooms: int = 20
    entry_level: int = 5
    puzzle_types: list[str] = field(default_factory=lambda: list(DEFAULT_PUZZLE_TYPES))

    def __post_init__(self) -> None:
        """Validate dungeon configuration."""
        if self.rooms < 0:
            raise ValueError(f"rooms must be >= 0, got {self.rooms}")
        if self.entry_level < 1:
            raise ValueError(f"entry_level must be >= 1, got {self.entry_level}")
        valid = set(DEFAULT_PUZZLE_TYPES)
        unknown = [t for t in self.puzzle_types if t not in valid]
        if unknown:
            raise ValueError(
                f"Unknown puzzle types: {', '.join(unknown)}. "
                f"Valid options: {', '.join(sorted(valid))}"
            )
        if len(set(self.puzzle_types)) < 2:
            raise ValueError("puzzle_types needs at least two distinct types")

    @property
    def types(self) -> list[PuzzleType]:
        """Configured puzzle types as enum members, duplicates removed."""
        return [PuzzleType(t) for t in dict.fromkeys(self.puzzle_types)]


@dataclass
class OutputConfig:
    """Output configuration."""

    output_dir: str = "./output"
    spoiler: bool = False


@dataclass
class Config:
    """Main configuration container."""

    seed: int = 0
    dungeon: DungeonConfig = field(default_factory=DungeonConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create Config from a dictionary (e.g., parsed TOML)."""
        run_section = data.get("run", {})
        dungeon_section = data.get("dungeon", {})
        output_section = data.get("output", {})

        return cls(
            seed=run_section.get("seed", 0),
            dungeon=DungeonConfig(
                rooms=dungeon_section.get("rooms", 20),
                entry_level=dungeon_section.get("entry_level", 5),
                puzzle_types=dungeon_section.get(
                    "puzzle_types", list(DEFAULT_PUZZLE_TYPES)
                ),
            ),
            output=OutputConfig(
                output_dir=output_section.get("output_dir", "./output"),
                spoiler=output_section.get("spoiler", False),
            ),
        )

    @classmethod
    def from_toml(cls, path: str | Path) -> Config:
        """Load configuration from a TOML file."""
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data)


def load_config(path: str | Path) -> Config:
    """Load configuration from a TOML file.

    This is a convenience function that wraps Config.from_toml().

    Args:
        path: Path to the TOML configuration file.

    Returns:
        Parsed Config object.
    """
    return Config.from_toml(path)
