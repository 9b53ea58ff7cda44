"""templegen core - procedural puzzle dungeon generator."""

__version__ = "0.1.0"

from templegen.config import Config, DungeonConfig, OutputConfig, load_config
from templegen.generator import (
    GenerationError,
    GenerationResult,
    generate_dungeon,
    generate_with_retry,
)
from templegen.knights import EnemyGraph, Knight, KnightColor
from templegen.maze import PathMaze, walk_path
from templegen.names import NameForge, load_namesets
from templegen.output import export_json, export_spoiler_log, topology_to_dict
from templegen.partition import BeadPartition, generate_partition
from templegen.payload import Payload, PuzzleType, Template, TemplateFactory
from templegen.stones import StoneWalk, walk_stones
from templegen.topology import DungeonTopology, Room
from templegen.validator import ValidationResult, validate_topology

__all__ = [
    # Config
    "Config",
    "DungeonConfig",
    "OutputConfig",
    "load_config",
    # Puzzles
    "BeadPartition",
    "generate_partition",
    "StoneWalk",
    "walk_stones",
    "PathMaze",
    "walk_path",
    "EnemyGraph",
    "Knight",
    "KnightColor",
    "NameForge",
    "load_namesets",
    # Topology
    "DungeonTopology",
    "Payload",
    "PuzzleType",
    "Room",
    "Template",
    "TemplateFactory",
    # Generator
    "GenerationError",
    "GenerationResult",
    "generate_dungeon",
    "generate_with_retry",
    # Validator
    "ValidationResult",
    "validate_topology",
    # Output
    "export_json",
    "export_spoiler_log",
    "topology_to_dict",
]
