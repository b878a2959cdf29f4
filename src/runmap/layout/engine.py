"""Position solver: map floors and slots to canvas coordinates.

Three passes, always in this order:

1. Grid placement, with optional jitter on every node past the start.
2. Collision sweep along each floor (only when jitter is enabled).
3. Manual offsets from author drags, added last so they sit on top of
   whatever the first two passes computed.
"""

from __future__ import annotations

__all__ = ["apply_drag", "regenerate_node_positions"]

import math
import random

from runmap.generate.sampling import get_rng
from runmap.layout.constants import (
    DEFAULT_JITTER_INTENSITY,
    MAIN_AXIS_JITTER_FACTOR,
    MAX_OFFSET_RADIUS,
    MIN_NODE_GAP,
)
from runmap.parser.model import MapConfig, MapNode, Orientation, RunMap


def regenerate_node_positions(
    run_map: RunMap,
    config: MapConfig,
    rng: random.Random | None = None,
) -> RunMap:
    """Return a copy of ``run_map`` with coordinates computed for every node.

    In vertical orientation floors advance down the y axis and nodes spread
    along x; horizontal orientation swaps the two. Structure is untouched.
    """
    result = run_map.copy()
    jitter = config.randomize_node_positions
    rng = get_rng(rng)

    for floor_idx, floor in enumerate(result.floors):
        _place_floor(floor, floor_idx, config, rng if jitter else None)

    if jitter:
        for floor in result.floors:
            _separate_floor(floor, config.orientation)

    for node in result.all_nodes():
        node.x += node.manual_offset_x
        node.y += node.manual_offset_y

    return result


def _place_floor(
    floor: list[MapNode],
    floor_idx: int,
    config: MapConfig,
    rng: random.Random | None,
) -> None:
    """Grid placement for one floor, centered on the cross axis."""
    start = -(len(floor) - 1) * config.spacing_x / 2
    main = floor_idx * config.spacing_y

    intensity = (
        config.jitter_intensity
        if config.jitter_intensity is not None
        else DEFAULT_JITTER_INTENSITY
    ) / 100

    for slot, node in enumerate(floor):
        cross = start + slot * config.spacing_x
        main_pos = main

        if rng is not None and floor_idx != 0:
            cross += (rng.random() - 0.5) * config.spacing_x * intensity
            main_pos += (
                (rng.random() - 0.5)
                * config.spacing_y
                * intensity
                * MAIN_AXIS_JITTER_FACTOR
            )

        if config.orientation is Orientation.VERTICAL:
            node.x, node.y = cross, main_pos
        else:
            node.x, node.y = main_pos, cross


def _separate_floor(floor: list[MapNode], orientation: Orientation) -> None:
    """Push nodes apart along the cross axis until neighbors clear MIN_NODE_GAP.

    One left-to-right sweep over a sorted view; nodes are only ever pushed
    forward, never pulled closer. Floor order itself is not changed.
    """
    attr = "x" if orientation is Orientation.VERTICAL else "y"
    ordered = sorted(floor, key=lambda n: getattr(n, attr))

    for prev, curr in zip(ordered, ordered[1:]):
        dist = getattr(curr, attr) - getattr(prev, attr)
        if dist < MIN_NODE_GAP:
            setattr(curr, attr, getattr(curr, attr) + (MIN_NODE_GAP - dist))


def apply_drag(
    run_map: RunMap,
    node_id: int,
    dx: float,
    dy: float,
    max_radius: float = MAX_OFFSET_RADIUS,
) -> RunMap:
    """Accumulate a drag on one node, clamped to a circle around its origin.

    The stored manual offset never exceeds ``max_radius`` in length, so
    repeated drags cannot move a node further than that from the position
    the solver computed for it. Coordinates shift by the offset change that
    was actually applied.

    Raises:
        KeyError: No node with ``node_id`` exists.
    """
    result = run_map.copy()
    found = result.find_node(node_id)
    if found is None:
        raise KeyError(f"No node with id {node_id}")
    node = found[2]

    new_x = node.manual_offset_x + dx
    new_y = node.manual_offset_y + dy
    dist = math.hypot(new_x, new_y)
    if dist > max_radius:
        ratio = max_radius / dist
        new_x *= ratio
        new_y *= ratio

    node.x += new_x - node.manual_offset_x
    node.y += new_y - node.manual_offset_y
    node.manual_offset_x = new_x
    node.manual_offset_y = new_y
    return result
