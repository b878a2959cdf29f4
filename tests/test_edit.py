"""Tests for author edits: promote, delete, update."""

import random
from dataclasses import replace

import pytest

from runmap.edit import delete_node, promote_node, update_node
from runmap.generate.generator import generate_map
from runmap.parser.model import MapConfig
from runmap.registry import DEFAULT_NODE_TYPES
from runmap.validator import Severity, validate_map

CONFIG = MapConfig(num_rows=6, min_nodes_per_row=3, max_nodes_per_row=3,
                   has_intermediate_boss=False)


def _errors(run_map):
    return [v.message for v in validate_map(run_map) if v.severity is Severity.ERROR]


def _dead_ends(run_map):
    return [n.id for floor in run_map.floors[:-1] for n in floor if not n.connections]


@pytest.fixture
def run_map():
    return generate_map(CONFIG, rng=random.Random(21))


def test_promote_collapses_floor(run_map):
    target = run_map.floors[3][1]
    result = promote_node(run_map, target.id, CONFIG)

    (boss,) = result.floors[3]
    assert boss.id == target.id
    assert boss.type == "mini_boss_editable"
    assert boss.custom_size == 1.5
    assert boss.custom_glow == 20
    assert boss.connections == [n.id for n in result.floors[4]]
    for parent in result.floors[2]:
        assert parent.connections == [boss.id]
    assert not _errors(result)


def test_promote_does_not_mutate_input(run_map):
    snapshot = run_map.to_list()
    promote_node(run_map, run_map.floors[2][0].id, CONFIG)
    assert run_map.to_list() == snapshot


def test_promote_unknown_node(run_map):
    with pytest.raises(KeyError):
        promote_node(run_map, 10_000, CONFIG)


@pytest.mark.parametrize("floor", [0, -1], ids=["start", "boss"])
def test_promote_fixed_rooms_refused(run_map, floor):
    """Start and boss rooms can never become a mini-boss."""
    node_id = run_map.floors[floor][0].id
    with pytest.raises(ValueError, match="cannot be promoted"):
        promote_node(run_map, node_id, CONFIG)


def test_promote_locked_node_refused(run_map):
    run_map.floors[2][1].is_locked = True
    with pytest.raises(ValueError, match="locked"):
        promote_node(run_map, run_map.floors[2][1].id, CONFIG)


def test_promote_custom_fixed_type_refused(run_map):
    node_types = dict(DEFAULT_NODE_TYPES)
    node_types["shop"] = replace(node_types["shop"], is_fixed=True)
    run_map.floors[2][0].type = "shop"
    with pytest.raises(ValueError):
        promote_node(run_map, run_map.floors[2][0].id, CONFIG, node_types)


def test_delete_removes_node_and_edges(run_map):
    victim = run_map.floors[2][2]
    result = delete_node(run_map, victim.id, CONFIG)

    assert result.find_node(victim.id) is None
    assert len(result.floors[2]) == 2
    assert all(victim.id not in n.connections for n in result.all_nodes())
    assert not _dead_ends(result)
    assert not _errors(result)


@pytest.mark.parametrize("seed", range(10))
def test_delete_reattaches_stranded_children(seed):
    run_map = generate_map(CONFIG, rng=random.Random(seed))
    for node in list(run_map.floors[3]):
        if len(run_map.floors[3]) == 1:
            break
        run_map = delete_node(run_map, node.id, CONFIG)
        assert not _errors(run_map)
        assert not _dead_ends(run_map)


def test_delete_fixed_rooms_refused(run_map):
    with pytest.raises(ValueError):
        delete_node(run_map, run_map.floors[0][0].id, CONFIG)
    with pytest.raises(ValueError):
        delete_node(run_map, run_map.floors[-1][0].id, CONFIG)


def test_delete_locked_node_refused(run_map):
    victim = run_map.floors[3][0]
    victim.is_locked = True
    with pytest.raises(ValueError, match="locked"):
        delete_node(run_map, victim.id, CONFIG)


def test_delete_last_node_on_floor_refused(run_map):
    single = promote_node(run_map, run_map.floors[2][0].id, CONFIG)
    with pytest.raises(ValueError):
        delete_node(single, single.floors[2][0].id, CONFIG)


def test_update_keeps_structure(run_map):
    before = run_map.floors[1][0]
    edited = replace(
        before,
        border_color="#ff00ff",
        is_locked=True,
        connections=[12345],
        row=9,
    )
    result = update_node(run_map, edited)
    node = result.floors[1][0]
    assert node.border_color == "#ff00ff"
    assert node.is_locked
    assert node.connections == before.connections
    assert node.row == 1
    assert run_map.floors[1][0].border_color is None
