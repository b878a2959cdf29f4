"""Author edits on an existing map: promote, delete, and replace nodes."""

from __future__ import annotations

__all__ = ["delete_node", "promote_node", "update_node"]

import logging
import random
from dataclasses import replace
from typing import Mapping

from runmap.generate.connector import adopt_orphans, position_ratio
from runmap.layout.constants import MINI_BOSS_GLOW, MINI_BOSS_SIZE
from runmap.layout.engine import regenerate_node_positions
from runmap.parser.model import MapConfig, MapNode, RunMap
from runmap.registry import (
    BOSS,
    DEFAULT_NODE_TYPES,
    MINI_BOSS,
    MINI_BOSS_ICON,
    START,
    NodeTypeConfig,
    resolve_icon,
)

logger = logging.getLogger(__name__)


def _locate(run_map: RunMap, node_id: int) -> tuple[int, int, MapNode]:
    found = run_map.find_node(node_id)
    if found is None:
        raise KeyError(f"No node with id {node_id}")
    return found


def _is_fixed(node: MapNode, node_types: Mapping[str, NodeTypeConfig]) -> bool:
    if node.type in (START, BOSS):
        return True
    type_config = node_types.get(node.type)
    return type_config is not None and type_config.is_fixed


def promote_node(
    run_map: RunMap,
    node_id: int,
    config: MapConfig,
    node_types: Mapping[str, NodeTypeConfig] = DEFAULT_NODE_TYPES,
    rng: random.Random | None = None,
) -> RunMap:
    """Turn a node into a mini-boss that is the only room on its floor.

    Its siblings are removed, it fans out to every node of the next floor,
    and every node of the previous floor converges on it.

    Raises:
        KeyError: No node with ``node_id`` exists.
        ValueError: The node is locked or has a fixed type such as start or
            boss.
    """
    result = run_map.copy()
    r, _, node = _locate(result, node_id)
    floors = result.floors

    if node.is_locked or _is_fixed(node, node_types):
        raise ValueError(
            f"Node {node_id} cannot be promoted: it is locked or a fixed room"
        )

    node.type = MINI_BOSS
    node.icon_class = resolve_icon(node_types, MINI_BOSS, MINI_BOSS_ICON)
    node.custom_size = MINI_BOSS_SIZE
    node.custom_glow = MINI_BOSS_GLOW
    node.connections = (
        [n.id for n in floors[r + 1]] if r < len(floors) - 1 else []
    )

    dropped = len(floors[r]) - 1
    floors[r] = [node]
    if r > 0:
        for parent in floors[r - 1]:
            parent.connections = [node.id]

    logger.debug(
        "Promoted node %d on floor %d, dropped %d sibling(s)", node_id, r, dropped
    )
    return regenerate_node_positions(result, config, rng)


def delete_node(
    run_map: RunMap,
    node_id: int,
    config: MapConfig,
    rng: random.Random | None = None,
) -> RunMap:
    """Remove a node and every edge pointing at it.

    Children left without a parent are adopted by the remaining node of the
    previous floor whose position ratio is closest. Parents left without a
    child link to the nearest remaining node on the deleted node's floor.

    Raises:
        KeyError: No node with ``node_id`` exists.
        ValueError: The node is locked, the start, the boss, or alone on its
            floor.
    """
    result = run_map.copy()
    r, _, node = _locate(result, node_id)
    floors = result.floors

    if node.is_locked:
        raise ValueError(f"Node {node_id} cannot be deleted: it is locked")
    if node.type in (START, BOSS) or len(floors[r]) == 1:
        raise ValueError(
            f"Node {node_id} cannot be deleted: floor {r} would be left empty "
            "or lose its fixed room"
        )

    floors[r] = [n for n in floors[r] if n.id != node_id]
    if r > 0:
        for parent in floors[r - 1]:
            parent.connections = [c for c in parent.connections if c != node_id]
        _reattach_parents(floors[r - 1], floors[r])
        adopt_orphans(floors[r - 1], floors[r])
    if r < len(floors) - 1:
        adopt_orphans(floors[r], floors[r + 1])

    logger.debug("Deleted node %d from floor %d", node_id, r)
    return regenerate_node_positions(result, config, rng)


def update_node(run_map: RunMap, node: MapNode) -> RunMap:
    """Replace the editable fields of the node sharing ``node.id``.

    Floor membership and connections stay as they are in the map.

    Raises:
        KeyError: No node with that id exists.
    """
    result = run_map.copy()
    r, i, current = _locate(result, node.id)
    result.floors[r][i] = replace(
        node, row=current.row, connections=list(current.connections)
    )
    return result


def _reattach_parents(parents: list[MapNode], floor: list[MapNode]) -> None:
    n, m = len(parents), len(floor)
    for idx, parent in enumerate(parents):
        if parent.connections:
            continue
        ratio = position_ratio(idx, n)
        nearest = min(
            range(m), key=lambda k: abs(position_ratio(k, m) - ratio)
        )
        parent.connect(floor[nearest].id)
