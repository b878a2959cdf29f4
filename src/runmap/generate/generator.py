"""Map generation: floors, room types, and connections from configuration.

A fresh map is built floor by floor. When a previous map is supplied its
locked nodes are carried over by id onto the floor they occupied before;
everything else is rolled again.
"""

from __future__ import annotations

__all__ = ["generate_map", "new_node"]

import logging
import random
from collections import defaultdict
from dataclasses import replace
from typing import Mapping

from runmap.errors import LockConflictError
from runmap.generate.connector import connect_layers
from runmap.generate.sampling import get_rng, random_floor_size, random_room_type
from runmap.layout.constants import MINI_BOSS_GLOW, MINI_BOSS_SIZE
from runmap.layout.engine import regenerate_node_positions
from runmap.parser.model import MapConfig, MapNode, RunMap
from runmap.registry import (
    BOSS,
    DEFAULT_ICON,
    DEFAULT_NODE_TYPES,
    MINI_BOSS,
    MINI_BOSS_ICON,
    START,
    NodeTypeConfig,
    resolve_icon,
)

logger = logging.getLogger(__name__)

# floor index -> [(slot index in the previous map, node)]
LockedFloors = dict[int, list[tuple[int, MapNode]]]


def new_node(
    run_map: RunMap,
    row: int,
    type_key: str,
    node_types: Mapping[str, NodeTypeConfig],
) -> MapNode:
    """Create a node with a freshly allocated id and the registry icon."""
    node = MapNode(
        id=run_map.allocate_id(),
        row=row,
        type=type_key,
        icon_class=resolve_icon(node_types, type_key, _fallback_icon(type_key)),
    )
    if type_key == MINI_BOSS:
        node.custom_size = MINI_BOSS_SIZE
        node.custom_glow = MINI_BOSS_GLOW
    return node


def _fallback_icon(type_key: str) -> str:
    return MINI_BOSS_ICON if type_key == MINI_BOSS else DEFAULT_ICON


def generate_map(
    config: MapConfig,
    node_types: Mapping[str, NodeTypeConfig] = DEFAULT_NODE_TYPES,
    existing: RunMap | None = None,
    rng: random.Random | None = None,
) -> RunMap:
    """Build a complete, positioned run map.

    Floors 1..``num_rows`` are generated and the start floor is placed in
    front of them, so the result has ``num_rows + 1`` floors. The final floor
    holds a single ``boss`` node and, when enabled, ``boss_row`` holds a
    single ``mini_boss_editable`` node.

    Args:
        config: Generation and layout options, already clamped.
        node_types: Registry used to resolve icons for new nodes.
        existing: Previous map. Its locked nodes keep their id, type and icon
            and stay on their floor; its id counter is continued so new ids
            never collide with old ones.
        rng: Random source; the module default is used when omitted.

    Raises:
        LockConflictError: Locked nodes contend for a single-node floor or
            sit on a fixed floor their type does not match.
    """
    rng = get_rng(rng)
    run_map = RunMap()
    locked: LockedFloors = defaultdict(list)
    if existing is not None:
        run_map.next_id = max(existing.next_id, existing.max_id() + 1)
        locked.update(_locked_by_floor(existing, config.num_rows))

    def fresh(row: int, type_key: str) -> MapNode:
        return new_node(run_map, row, type_key, node_types)

    floors: list[list[MapNode]] = [
        _fixed_floor(0, locked[0], START, lambda: fresh(0, START))
    ]

    boss_row = config.active_boss_row
    for r in range(1, config.num_rows + 1):
        row_locks = locked[r]
        is_final = r == config.num_rows
        holds_locked_boss = any(n.type == MINI_BOSS for _, n in row_locks)

        if is_final:
            floor = _fixed_floor(r, row_locks, BOSS, lambda r=r: fresh(r, BOSS))
        elif r == boss_row or holds_locked_boss:
            floor = _fixed_floor(
                r, row_locks, MINI_BOSS, lambda r=r: fresh(r, MINI_BOSS)
            )
        else:
            floor = _ordinary_floor(r, row_locks, config, rng, fresh)

        logger.debug(
            "Floor %d: %d node(s), %d carried", r, len(floor), len(row_locks)
        )
        floors.append(floor)

    run_map.floors = floors
    for upper, lower in zip(floors, floors[1:]):
        connect_layers(upper, lower, rng)

    logger.info(
        "Generated map with %d floors and %d nodes",
        len(floors),
        sum(len(f) for f in floors),
    )
    return regenerate_node_positions(run_map, config, rng)


def _locked_by_floor(existing: RunMap, num_rows: int) -> LockedFloors:
    """Collect locked nodes of a previous map keyed by their floor index."""
    locked: LockedFloors = defaultdict(list)
    for r, floor in enumerate(existing.floors):
        for i, node in enumerate(floor):
            if not node.is_locked:
                continue
            if r > num_rows:
                logger.warning(
                    "Dropping locked node %d: floor %d no longer exists", node.id, r
                )
                continue
            locked[r].append((i, node))
    return locked


def _carry(node: MapNode, row: int) -> MapNode:
    return replace(node, row=row, connections=[])


def _fixed_floor(row, row_locks, required_type, make_fresh) -> list[MapNode]:
    """A single-node floor whose only slot requires ``required_type``."""
    if not row_locks:
        return [make_fresh()]

    ids = [n.id for _, n in row_locks]
    if len(row_locks) > 1:
        raise LockConflictError(row, ids, "contend for a single-node floor")
    node = row_locks[0][1]
    if node.type != required_type:
        raise LockConflictError(
            row, ids, f"cannot occupy the '{required_type}' slot"
        )
    logger.debug("Floor %d: keeping locked %s node %d", row, node.type, node.id)
    return [_carry(node, row)]


def _ordinary_floor(row, row_locks, config, rng, make_fresh) -> list[MapNode]:
    """A floor of random size; locked nodes take the slots nearest their old ones."""
    fixed = [n for _, n in row_locks if n.type in (START, BOSS)]
    if fixed:
        raise LockConflictError(
            row,
            [n.id for n in fixed],
            f"of type '{fixed[0].type}' cannot occupy an ordinary floor",
        )

    count =random_floor_size(config.min_nodes_per_row, config.max_nodes_per_row, rng)
    if count < len(row_locks):
        logger.warning(
            "Floor %d: growing from %d to %d nodes to fit locked nodes",
            row,
            count,
            len(row_locks),
        )
        count = len(row_locks)

    slots: list[MapNode | None] = [None] * count
    for old_idx, node in sorted(row_locks, key=lambda item: item[0]):
        slot = _nearest_free(slots, min(old_idx, count - 1))
        slots[slot] = _carry(node, row)

    return [
        node if node is not None else make_fresh(row, random_room_type(rng))
        for node in slots
    ]


def _nearest_free(slots: list[MapNode | None], wanted: int) -> int:
    """Index of the empty slot closest to ``wanted`` (lower index wins ties)."""
    free = [i for i, node in enumerate(slots) if node is None]
    return min(free, key=lambda i: (abs(i - wanted), i))
