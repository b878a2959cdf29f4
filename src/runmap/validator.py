"""Map validator: programmatic checks for structural defects.

Runs a suite of checks against a run map and returns a list of Violation
objects describing any problems found.
"""

from __future__ import annotations

__all__ = [
    "Severity",
    "Violation",
    "build_digraph",
    "check_edges",
    "check_fixed_floors",
    "check_floor_sizes",
    "check_ids",
    "check_reachability",
    "validate_map",
]

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

import networkx as nx

from runmap.parser.model import MapConfig, RunMap
from runmap.registry import BOSS, MINI_BOSS, START


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Violation:
    check: str
    severity: Severity
    message: str
    context: dict = field(default_factory=dict)


def validate_map(run_map: RunMap, config: MapConfig | None = None) -> list[Violation]:
    """Run all structural checks and return violations."""
    violations: list[Violation] = []
    violations.extend(check_ids(run_map))
    violations.extend(check_fixed_floors(run_map, config))
    violations.extend(check_edges(run_map))
    violations.extend(check_reachability(run_map))
    if config is not None:
        violations.extend(check_floor_sizes(run_map, config))
    return violations


def build_digraph(run_map: RunMap) -> nx.DiGraph:
    """Directed graph of node ids, with ``row`` and ``type`` node attributes."""
    G = nx.DiGraph()
    for node in run_map.all_nodes():
        G.add_node(node.id, row=node.row, type=node.type)
    for node in run_map.all_nodes():
        for target in node.connections:
            G.add_edge(node.id, target)
    return G


def check_ids(run_map: RunMap) -> list[Violation]:
    """Ids are non-negative, unique, and below the map's id counter."""
    violations: list[Violation] = []
    counts = Counter(n.id for n in run_map.all_nodes())

    for node_id, count in counts.items():
        if count > 1:
            violations.append(
                Violation(
                    check="ids",
                    severity=Severity.ERROR,
                    message=f"Node id {node_id} is used {count} times",
                    context={"node": node_id},
                )
            )
        if node_id < 0:
            violations.append(
                Violation(
                    check="ids",
                    severity=Severity.ERROR,
                    message=f"Node id {node_id} is negative",
                    context={"node": node_id},
                )
            )

    if counts and run_map.next_id <= max(counts):
        violations.append(
            Violation(
                check="ids",
                severity=Severity.ERROR,
                message=(
                    f"Id counter {run_map.next_id} does not exceed "
                    f"the largest id {max(counts)}"
                ),
            )
        )
    return violations


def _single_node_violation(run_map, row, expected_type, label) -> Violation | None:
    floor = run_map.floors[row]
    if len(floor) == 1 and floor[0].type == expected_type:
        return None
    found = ", ".join(f"{n.id}:{n.type}" for n in floor) or "nothing"
    return Violation(
        check="fixed_floors",
        severity=Severity.ERROR,
        message=(
            f"{label} floor {row} must hold exactly one '{expected_type}' "
            f"node, found {found}"
        ),
        context={"row": row},
    )


def check_fixed_floors(
    run_map: RunMap, config: MapConfig | None = None
) -> list[Violation]:
    """Start, boss, and (when configured) mini-boss floors hold one node each.

    Start and boss nodes are also flagged anywhere between the two ends.
    """
    if len(run_map.floors) < 2:
        return [
            Violation(
                check="fixed_floors",
                severity=Severity.ERROR,
                message=(
                    f"Map has {len(run_map.floors)} floor(s), expected at least 2"
                ),
            )
        ]

    checks = [(0, START, "Start"), (len(run_map.floors) - 1, BOSS, "Final")]
    if config is not None:
        boss_row = config.active_boss_row
        if boss_row is not None and boss_row < len(run_map.floors) - 1:
            checks.append((boss_row, MINI_BOSS, "Boss"))

    violations = []
    for row, expected_type, label in checks:
        v = _single_node_violation(run_map, row, expected_type, label)
        if v is not None:
            violations.append(v)

    for r in range(1, len(run_map.floors) - 1):
        for node in run_map.floors[r]:
            if node.type in (START, BOSS):
                violations.append(
                    Violation(
                        check="fixed_floors",
                        severity=Severity.ERROR,
                        message=(
                            f"Node {node.id} of type '{node.type}' "
                            f"sits on interior floor {r}"
                        ),
                        context={"node": node.id, "row": r},
                    )
                )
    return violations


def check_edges(run_map: RunMap) -> list[Violation]:
    """Every connection targets the next floor exactly once."""
    violations: list[Violation] = []
    floors = run_map.floors

    for r, floor in enumerate(floors):
        next_ids = {n.id for n in floors[r + 1]} if r + 1 < len(floors) else set()
        for node in floor:
            dupes = [t for t, c in Counter(node.connections).items() if c > 1]
            if dupes:
                violations.append(
                    Violation(
                        check="edges",
                        severity=Severity.ERROR,
                        message=f"Node {node.id} repeats connection(s) {dupes}",
                        context={"node": node.id},
                    )
                )
            bad = [t for t in node.connections if t not in next_ids]
            if bad:
                violations.append(
                    Violation(
                        check="edges",
                        severity=Severity.ERROR,
                        message=(
                            f"Node {node.id} on floor {r} connects to {bad}, "
                            f"which are not on floor {r + 1}"
                        ),
                        context={"node": node.id, "targets": bad},
                    )
                )
            if node.row != r:
                violations.append(
                    Violation(
                        check="edges",
                        severity=Severity.WARNING,
                        message=(
                            f"Node {node.id} records row {node.row} "
                            f"but sits on floor {r}"
                        ),
                        context={"node": node.id},
                    )
                )
    return violations


def check_reachability(run_map: RunMap) -> list[Violation]:
    """Every node past floor 0 has a parent and is reachable from the start."""
    violations: list[Violation] = []
    floors = run_map.floors

    for r in range(1, len(floors)):
        parent_targets = {t for p in floors[r - 1] for t in p.connections}
        for node in floors[r]:
            if node.id not in parent_targets:
                violations.append(
                    Violation(
                        check="reachability",
                        severity=Severity.ERROR,
                        message=f"Node {node.id} on floor {r} has no parent",
                        context={"node": node.id, "row": r},
                    )
                )

    if not floors or not floors[0]:
        return violations

    G = build_digraph(run_map)
    if not nx.is_directed_acyclic_graph(G):
        violations.append(
            Violation(
                check="reachability",
                severity=Severity.ERROR,
                message="Map contains a cycle",
            )
        )

    start = floors[0][0].id
    reachable = nx.descendants(G, start) | {start}
    unreachable = sorted(set(G.nodes) - reachable)
    if unreachable:
        violations.append(
            Violation(
                check="reachability",
                severity=Severity.ERROR,
                message=f"Nodes {unreachable} cannot be reached from the start",
                context={"nodes": unreachable},
            )
        )
    return violations


def check_floor_sizes(run_map: RunMap, config: MapConfig) -> list[Violation]:
    """Ordinary floors stay within the configured size range.

    Locked nodes and manual edits can legitimately push a floor outside the
    range, so this only warns.
    """
    violations: list[Violation] = []
    boss_row = config.active_boss_row
    lo, hi = config.min_nodes_per_row, config.max_nodes_per_row

    for r in range(1, len(run_map.floors) - 1):
        floor = run_map.floors[r]
        if r == boss_row or (len(floor) == 1 and floor[0].type == MINI_BOSS):
            continue
        if not lo <= len(floor) <= hi:
            violations.append(
                Violation(
                    check="floor_sizes",
                    severity=Severity.WARNING,
                    message=(
                        f"Floor {r} has {len(floor)} node(s), "
                        f"configured range is {lo}-{hi}"
                    ),
                    context={"row": r},
                )
            )
    return violations
