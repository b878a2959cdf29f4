"""Boss floor topology maintenance.

Moving or toggling the intermediate boss floor should not reshuffle the
whole map. This pass collapses the configured boss floor to a single
mini-boss, expands any stale boss floor back into an ordinary one, and
reconnects only the boundaries it touched.
"""

from __future__ import annotations

__all__ = ["enforce_boss_row_topology"]

import logging
import random
from typing import Mapping

from runmap.generate.connector import connect_layers
from runmap.generate.generator import new_node
from runmap.generate.sampling import get_rng, random_floor_size, random_room_type
from runmap.layout.constants import MINI_BOSS_GLOW, MINI_BOSS_SIZE
from runmap.parser.model import MapConfig, MapNode, RunMap
from runmap.registry import (
    DEFAULT_NODE_TYPES,
    MINI_BOSS,
    MINI_BOSS_ICON,
    NodeTypeConfig,
    resolve_icon,
)

logger = logging.getLogger(__name__)


def enforce_boss_row_topology(
    run_map: RunMap,
    config: MapConfig,
    node_types: Mapping[str, NodeTypeConfig] = DEFAULT_NODE_TYPES,
    rng: random.Random | None = None,
) -> RunMap:
    """Return a copy of ``run_map`` whose boss floor matches ``config``.

    Interior floors are visited in order:

    * The configured boss floor (when enabled) is collapsed to a single
      ``mini_boss_editable`` node. A locked node on that floor is preferred
      as the survivor, otherwise the first node is kept.
    * A floor that is not the configured one but holds a single unlocked
      mini-boss is demoted: the node gets a random room type and the floor
      is refilled with fresh siblings up to a random ordinary size.
    * Every other floor, including one holding a locked mini-boss, is left
      alone.

    Both boundaries of each changed floor are reconnected. Coordinates are
    not recomputed; run the position solver afterwards.
    """
    result = run_map.copy()
    result.sync_next_id()
    rng = get_rng(rng)
    floors = result.floors
    boss_row = config.active_boss_row

    for r in range(1, len(floors) - 1):
        floor = floors[r]
        if r == boss_row:
            _promote_floor(floors, r, node_types, rng)
        elif (
            len(floor) == 1
            and floor[0].type == MINI_BOSS
            and not floor[0].is_locked
        ):
            _demote_floor(result, r, config, node_types, rng)

    logger.info(
        "Boss floor topology enforced (boss floor: %s)",
        boss_row if boss_row is not None else "disabled",
    )
    return result


def _apply_boss_visuals(node: MapNode) -> None:
    if not node.is_locked:
        node.custom_size = MINI_BOSS_SIZE
        node.custom_glow = MINI_BOSS_GLOW


def _reconnect(floors: list[list[MapNode]], r: int, rng: random.Random) -> None:
    """Rerun the connector on both boundaries of floor ``r``."""
    if r > 0:
        connect_layers(floors[r - 1], floors[r], rng)
    if r < len(floors) - 1:
        connect_layers(floors[r], floors[r + 1], rng)


def _promote_floor(
    floors: list[list[MapNode]],
    r: int,
    node_types: Mapping[str, NodeTypeConfig],
    rng: random.Random,
) -> None:
    floor = floors[r]

    if len(floor) == 1 and floor[0].type == MINI_BOSS:
        _apply_boss_visuals(floor[0])
        _reconnect(floors, r, rng)
        return

    survivor = next((n for n in floor if n.is_locked), floor[0])
    logger.debug(
        "Floor %d: collapsing %d node(s) into mini-boss %d",
        r,
        len(floor),
        survivor.id,
    )
    survivor.type = MINI_BOSS
    survivor.icon_class = resolve_icon(node_types, MINI_BOSS, MINI_BOSS_ICON)
    survivor.connections = []
    _apply_boss_visuals(survivor)

    floors[r] = [survivor]
    _reconnect(floors, r, rng)


def _demote_floor(
    run_map: RunMap,
    r: int,
    config: MapConfig,
    node_types: Mapping[str, NodeTypeConfig],
    rng: random.Random,
) -> None:
    floor = run_map.floors[r]
    node = floor[0]

    node.type = random_room_type(rng)
    node.icon_class = resolve_icon(node_types, node.type)
    node.connections = []
    node.custom_size = None
    node.custom_glow = None

    target = random_floor_size(config.min_nodes_per_row, config.max_nodes_per_row, rng)
    for _ in range(max(0, target - 1)):
        floor.append(new_node(run_map, r, random_room_type(rng), node_types))

    logger.debug(
        "Floor %d: demoted mini-boss %d to %s, floor now has %d node(s)",
        r,
        node.id,
        node.type,
        len(floor),
    )
    _reconnect(run_map.floors, r, rng)
