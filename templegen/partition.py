"""Bead partitions for altar puzzles.

Each altar bucket holds three piles of beads that must sum to the same
target. Piles are drawn with a stars-and-bars split: two distinct divider
positions are chosen among ``target + 2`` slots and the gaps between them
become the pile sizes.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass
class BeadPartition:
    """Result of a partition draw.

    Attributes:
        bucket_count: Number of buckets requested.
        target: Sum every bucket adds up to (``3 * bucket_count``).
        buckets: One ``(pile0, pile1, pile2)`` triple per bucket.
    """

    bucket_count: int
    target: int
    buckets: list[tuple[int, int, int]]

    @property
    def piles(self) -> list[int]:
        """All piles, bucket by bucket."""
        return [pile for bucket in self.buckets for pile in bucket]


def split_bucket(total: int, rng: random.Random) -> tuple[int, int, int]:
    """Split ``total`` into three non-negative piles."""
    first = rng.randrange(total + 2)
    second = rng.randrange(total + 1)
    if first == second:
        second += 1
    low, high = sorted((first, second))
    return (low, high - low - 1, total + 1 - high)


def generate_partition(bucket_count: int, rng: random.Random) -> BeadPartition:
    """Draw three piles per bucket, each bucket summing to ``3 * bucket_count``.

    Args:
        bucket_count: Number of buckets (altars) to fill.
        rng: Random source for the run.

    Returns:
        BeadPartition with ``bucket_count`` triples.

    Raises:
        ValueError: If ``bucket_count`` is less than 1.
    """
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be >= 1, got {bucket_count}")

    target = bucket_count * 3
    buckets = [split_bucket(target, rng) for _ in range(bucket_count)]
    return BeadPartition(bucket_count=bucket_count, target=target, buckets=buckets)
