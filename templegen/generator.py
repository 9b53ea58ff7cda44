"""Dungeon generation driver for templegen.

Wires one seeded random source through the name forge, the template factory
and the topology, then validates the finished dungeon.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from templegen.config import Config
from templegen.names import NameForge, NameSet
from templegen.payload import PuzzleType, TemplateFactory
from templegen.topology import DungeonTopology
from templegen.validator import ValidationResult, validate_topology

logger = logging.getLogger(__name__)

MAX_SEED = 999999999


class GenerationError(Exception):
    """Error during dungeon generation."""

    pass


@dataclass
class GenerationResult:
    """Result of dungeon generation.

    Attributes:
        topology: The generated topology.
        seed: The actual seed used for generation.
        validation: Validation result (with any warnings).
        attempts: Number of generation attempts made.
    """

    topology: DungeonTopology
    seed: int
    validation: ValidationResult
    attempts: int


def validate_config(config: Config) -> list[str]:
    """Validate run options before generating.

    Args:
        config: Configuration to validate.

    Returns:
        List of error messages (empty if valid).
    """
    errors: list[str] = []
    if config.seed < 0:
        errors.append(f"seed must be >= 0, got {config.seed}")
    return errors


def generate_dungeon(
    config: Config,
    seed: int,
    namesets: dict[str, NameSet] | None = None,
) -> DungeonTopology:
    """Generate a finished dungeon topology for one seed.

    The entry room is drawn like any other room at the entry level, except
    that it is never a stones room.

    Args:
        config: Configuration.
        seed: Seed for the run's random source.
        namesets: Name tables (defaults to the bundled ones).

    Returns:
        The pruned, key-paired topology.
    """
    rng = random.Random(seed)
    names = NameForge(rng, namesets)
    factory = TemplateFactory(rng, names, config.dungeon.types)

    entry = factory.generate(config.dungeon.entry_level, exclude=PuzzleType.STONES)
    topology = DungeonTopology(
        entry.payload,
        rng,
        factory,
        entry_level=config.dungeon.entry_level,
        seed_type=entry.type,
    )
    if entry.on_place is not None:
        entry.on_place()

    logger.debug(
        "Seed %d: entry room is %s, growing %d rooms",
        seed,
        entry.type.value,
        config.dungeon.rooms,
    )
    topology.generate_finite(config.dungeon.rooms)
    logger.debug("Seed %d: %d rooms kept", seed, len(topology.rooms))
    return topology


def generate_with_retry(
    config: Config,
    max_attempts: int = 100,
    namesets: dict[str, NameSet] | None = None,
) -> GenerationResult:
    """Generate a dungeon with automatic retry on failure.

    If config.seed is 0, tries random seeds until success (generation + validation).
    If config.seed is non-zero, uses that seed (fails if validation fails).

    Args:
        config: Configuration
        max_attempts: Maximum retry attempts (only for seed=0)
        namesets: Name tables (defaults to the bundled ones)

    Returns:
        GenerationResult with topology, seed, validation, and attempt count.

    Raises:
        GenerationError: If generation fails after max_attempts
    """
    config_errors = validate_config(config)
    if config_errors:
        raise GenerationError(f"Invalid configuration: {'; '.join(config_errors)}")

    if config.seed != 0:
        topology = generate_dungeon(config, config.seed, namesets)
        validation = validate_topology(topology, config)
        if not validation.is_valid:
            errors = "; ".join(validation.errors)
            raise GenerationError(f"Validation failed: {errors}")
        return GenerationResult(
            topology=topology,
            seed=config.seed,
            validation=validation,
            attempts=1,
        )

    # Auto-reroll mode
    base_rng = random.Random()

    for attempt in range(max_attempts):
        seed = base_rng.randint(1, MAX_SEED)
        try:
            topology = generate_dungeon(config, seed, namesets)
            validation = validate_topology(topology, config)
            if not validation.is_valid:
                errors = "; ".join(validation.errors)
                raise GenerationError(f"Validation failed: {errors}")
            return GenerationResult(
                topology=topology,
                seed=seed,
                validation=validation,
                attempts=attempt + 1,
            )
        except GenerationError as e:
            logger.warning("Attempt %d: seed %d failed - %s", attempt + 1, seed, e)
            continue

    raise GenerationError(f"Failed to generate dungeon after {max_attempts} attempts")
