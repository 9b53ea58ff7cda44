"""Tests for config parsing."""

import pytest

from templegen.config import (
    DEFAULT_PUZZLE_TYPES,
    Config,
    DungeonConfig,
    load_config,
)
from templegen.payload import PuzzleType


def test_config_defaults():
    """Config.from_dict with empty dict uses all defaults."""
    config = Config.from_dict({})
    assert config.seed == 0
    assert config.dungeon.rooms == 20
    assert config.dungeon.entry_level == 5
    assert config.dungeon.puzzle_types == DEFAULT_PUZZLE_TYPES
    assert config.output.output_dir == "./output"
    assert config.output.spoiler is False


def test_config_from_toml(tmp_path):
    """Config.from_toml parses TOML file correctly."""
    config_file = tmp_path / "config.toml"
    config_file.write_text("""
[run]
seed = 42

[dungeon]
rooms = 8
puzzle_types = ["path", "altar", "rest"]
""")
    config = Config.from_toml(config_file)
    assert config.seed == 42
    assert config.dungeon.rooms == 8
    assert config.dungeon.types == [
        PuzzleType.PATH,
        PuzzleType.ALTAR,
        PuzzleType.REST,
    ]
    # Defaults for unspecified values
    assert config.dungeon.entry_level == 5
    assert config.output.output_dir == "./output"


def test_config_full_toml(tmp_path):
    """Config.from_toml parses all sections correctly."""
    config_file = tmp_path / "config.toml"
    config_file.write_text("""
[run]
seed = 12345

[dungeon]
rooms = 40
entry_level = 2
puzzle_types = ["stones", "knights"]

[output]
output_dir = "/tmp/temples"
spoiler = true
""")
    config = load_config(config_file)
    assert config.seed == 12345
    assert config.dungeon.rooms == 40
    assert config.dungeon.entry_level == 2
    assert config.dungeon.types == [PuzzleType.STONES, PuzzleType.KNIGHTS]
    assert config.output.output_dir == "/tmp/temples"
    assert config.output.spoiler is True


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.toml")


class TestDungeonConfigValidation:
    """Tests for DungeonConfig.__post_init__."""

    def test_negative_rooms(self):
        with pytest.raises(ValueError, match="rooms must be >= 0"):
            DungeonConfig(rooms=-1)

    def test_zero_rooms_allowed(self):
        assert DungeonConfig(rooms=0).rooms == 0

    def test_entry_level(self):
        with pytest.raises(ValueError, match="entry_level"):
            DungeonConfig(entry_level=0)

    def test_unknown_puzzle_type(self):
        with pytest.raises(ValueError, match="Unknown puzzle types: maze"):
            DungeonConfig(puzzle_types=["path", "maze"])

    def test_single_puzzle_type(self):
        with pytest.raises(ValueError, match="at least two"):
            DungeonConfig(puzzle_types=["rest", "rest"])

    def test_types_deduplicated(self):
        config = DungeonConfig(puzzle_types=["rest", "altar", "rest"])
        assert config.types == [PuzzleType.REST, PuzzleType.ALTAR]

    def test_invalid_values_in_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("""
[dungeon]
rooms = -3
""")
        with pytest.raises(ValueError):
            load_config(config_file)
