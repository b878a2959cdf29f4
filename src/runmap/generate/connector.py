"""Edge assignment between two adjacent floors.

Targets are chosen by positional ratio: a node a third of the way across
its floor links to nodes about a third of the way across the next floor.
This keeps edges local and avoids long diagonal crossings, while a random
edge count per node keeps the result from looking like a rigid grid.
"""

from __future__ import annotations

__all__ = ["adopt_orphans", "connect_layers", "position_ratio"]

import math
import random

from runmap.generate.sampling import get_rng
from runmap.layout.constants import (
    CONNECTION_REACH,
    THREE_LINK_THRESHOLD,
    TWO_LINK_THRESHOLD,
)
from runmap.parser.model import MapNode


def position_ratio(index: int, count: int) -> float:
    """Relative position (0.0 to 1.0) of a slot within its floor."""
    return index / (count - 1) if count > 1 else 0.5


def connect_layers(
    current: list[MapNode],
    next_floor: list[MapNode],
    rng: random.Random | None = None,
) -> None:
    """Recompute the outgoing edges of every node in ``current``.

    Existing connections on ``current`` are discarded first, so the call can
    be repeated on the same pair. Nothing happens when ``next_floor`` is
    empty.

    Policy, in priority order:

    1. A single next node receives an edge from every current node.
    2. A single current node links to every next node.
    3. Otherwise each node picks one to three targets from a window around
       its ratio-mapped index, then orphaned next nodes are adopted by the
       current node whose ratio is closest.
    """
    if not next_floor:
        return

    for node in current:
        node.connections = []

    if len(next_floor) == 1:
        for node in current:
            node.connections = [next_floor[0].id]
        return

    if len(current) == 1:
        current[0].connections = [n.id for n in next_floor]
        return

    rng = get_rng(rng)
    n, m = len(current), len(next_floor)

    for idx, node in enumerate(current):
        # Half-up rounding so midpoints map to the later slot
        center = math.floor(position_ratio(idx, n) * (m - 1) + 0.5)
        lo = max(0, center - CONNECTION_REACH)
        hi = min(m - 1, center + CONNECTION_REACH)

        candidates = [next_floor[k].id for k in range(lo, hi + 1)]
        rng.shuffle(candidates)

        count = 1
        u = rng.random()
        if len(candidates) >= 2 and u > TWO_LINK_THRESHOLD:
            count = 2
        if len(candidates) >= 3 and u > THREE_LINK_THRESHOLD:
            count = 3

        node.connections = candidates[:count]
        if not node.connections:
            node.connections = [next_floor[center].id]

    adopt_orphans(current, next_floor)


def adopt_orphans(current: list[MapNode], next_floor: list[MapNode]) -> None:
    """Give every parentless next node an edge from its nearest current node."""
    n, m = len(current), len(next_floor)
    for next_idx, child in enumerate(next_floor):
        if any(child.id in parent.connections for parent in current):
            continue

        target_ratio = position_ratio(next_idx, m)
        best_parent = current[0]
        best_dist = float("inf")
        for parent_idx, parent in enumerate(current):
            dist = abs(position_ratio(parent_idx, n) - target_ratio)
            if dist < best_dist:
                best_dist = dist
                best_parent = parent

        best_parent.connect(child.id)
