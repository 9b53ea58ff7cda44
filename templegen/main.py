"""templegen CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from templegen.config import Config, load_config
from templegen.generator import GenerationError, generate_with_retry
from templegen.output import export_json, export_spoiler_log


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the templegen command."""
    parser = argparse.ArgumentParser(
        description="templegen - Generate procedural puzzle dungeons",
    )
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Path to config.toml (optional, uses defaults if not provided)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output directory (default: config's output_dir or ./output). "
        "Files are written to <output>/<seed>/",
    )
    parser.add_argument(
        "--spoiler",
        action="store_true",
        help="Generate spoiler log file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (overrides config, 0 = auto-reroll)",
    )
    parser.add_argument(
        "--rooms",
        type=int,
        help="Number of room extensions (overrides config)",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=100,
        help="Max generation attempts for auto-reroll (default: 100)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # Load or create config
    if args.config:
        try:
            config = load_config(args.config)
            if args.verbose:
                print(f"Loaded config from {args.config}")
        except FileNotFoundError:
            print(f"Error: Config file not found: {args.config}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"Error: Invalid config: {e}", file=sys.stderr)
            return 1
    else:
        config = Config()
        if args.verbose:
            print("Using default configuration")

    # Override seed and size if provided
    if args.seed is not None:
        config.seed = args.seed
    if args.rooms is not None:
        if args.rooms < 0:
            print(f"Error: --rooms must be >= 0, got {args.rooms}", file=sys.stderr)
            return 1
        config.dungeon.rooms = args.rooms

    # Determine output directory: CLI > config > default
    if args.output is not None:
        output_dir = args.output
    else:
        output_dir = Path(config.output.output_dir)

    if args.verbose:
        mode = "fixed seed" if config.seed != 0 else "auto-reroll"
        print(f"Generating dungeon ({mode})...")

    try:
        result = generate_with_retry(config, max_attempts=args.max_attempts)
    except GenerationError as e:
        print(f"Error: Generation failed: {e}", file=sys.stderr)
        return 1

    topology = result.topology
    actual_seed = result.seed

    if args.verbose and result.validation.warnings:
        print("Validation warnings:")
        for warning in result.validation.warnings:
            print(f"  - {warning}")

    # Print summary
    if args.verbose or config.seed == 0:
        print(f"Generated dungeon with seed {actual_seed}")
        print(f"  Rooms: {len(topology.rooms)}")
        print(f"  Deepest level: {max(room.level for room in topology.rooms)}")
        print(f"  Key pairs: {len(topology.key_pairs())}")
        if result.attempts > 1:
            print(f"  Attempts: {result.attempts}")

    # Create output directory: <output>/<seed>/
    seed_dir = output_dir / str(actual_seed)
    seed_dir.mkdir(parents=True, exist_ok=True)

    json_path = seed_dir / "temple.json"
    export_json(topology, actual_seed, json_path)
    print(f"Written: {json_path}")

    if args.spoiler or config.output.spoiler:
        spoiler_path = seed_dir / "spoiler.txt"
        export_spoiler_log(topology, actual_seed, spoiler_path)
        print(f"Written: {spoiler_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
