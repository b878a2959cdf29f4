"""Weighted random choice over room types.

All randomness in the engine flows through a ``random.Random`` instance so
callers can pass a seeded generator for reproducible maps.
"""

from __future__ import annotations

__all__ = [
    "ROOM_TYPE_WEIGHTS",
    "WeightedSampler",
    "get_rng",
    "random_floor_size",
    "random_room_type",
]

import random
from bisect import bisect_right
from itertools import accumulate
from typing import Sequence

# Weighted pool for ordinary floors (weights sum to 100)
ROOM_TYPE_WEIGHTS: list[tuple[str, int]] = [
    ("normal", 45),
    ("elite", 10),
    ("event", 20),
    ("shop", 15),
    ("treasure", 10),
]

_DEFAULT_RNG = random.Random()


def get_rng(rng: random.Random | None) -> random.Random:
    """Use the supplied generator, or the module-level one."""
    return rng if rng is not None else _DEFAULT_RNG


class WeightedSampler:
    """Draw keys with probability proportional to their weight."""

    def __init__(self, weights: Sequence[tuple[str, float]]) -> None:
        if not weights:
            raise ValueError("WeightedSampler needs at least one entry")
        if any(w < 0 for _, w in weights):
            raise ValueError("Weights must be non-negative")
        self.keys = [key for key, _ in weights]
        self._cumulative = list(accumulate(w for _, w in weights))
        if self._cumulative[-1] <= 0:
            raise ValueError("Weights must not all be zero")

    def sample(self, rng: random.Random | None = None) -> str:
        total = self._cumulative[-1]
        u = get_rng(rng).random() * total
        idx = bisect_right(self._cumulative, u)
        # u == total can only happen through float rounding
        return self.keys[min(idx, len(self.keys) - 1)]


_ROOM_SAMPLER = WeightedSampler(ROOM_TYPE_WEIGHTS)


def random_room_type(rng: random.Random | None = None) -> str:
    """Weighted pick among the ordinary (non-fixed) room types."""
    return _ROOM_SAMPLER.sample(rng)


def random_floor_size(
    min_nodes: int, max_nodes: int, rng: random.Random | None = None
) -> int:
    """Uniform node count for an ordinary floor, inclusive on both ends."""
    return get_rng(rng).randint(min_nodes, max_nodes)
