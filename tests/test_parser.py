"""Tests for the data model and JSON documents."""

import json

import pytest

from runmap.errors import DocumentError
from runmap.parser import MapDocument, dump_document, load_document, parse_document
from runmap.parser.model import MapConfig, MapNode, Orientation, RunMap
from runmap.registry import DEFAULT_NODE_TYPES, NodeTypeConfig


def _doc_data(**extra):
    data = {
        "mapNodes": [
            [{"id": 5, "row": 0, "type": "start", "iconClass": "fas fa-play",
              "connections": [6], "x": 0, "y": 0}],
            [{"id": 6, "row": 1, "type": "boss", "iconClass": "fas fa-crown",
              "connections": [], "x": 0, "y": 100, "isLocked": True,
              "manualOffsetX": 4}],
        ],
        "mapConfig": {"numRows": 1, "orientation": "horizontal", "bossRow": 1},
    }
    data.update(extra)
    return data


def test_node_dict_uses_editor_keys():
    node = MapNode(id=3, row=1, type="elite", icon_class="fas fa-dragon",
                   connections=[7, 8], custom_size=1.2, is_locked=True)
    data = node.to_dict()
    assert data["iconClass"] == "fas fa-dragon"
    assert data["customSize"] == 1.2
    assert data["isLocked"] is True
    assert "customGlow" not in data
    assert "manualOffsetX" not in data
    assert "isCustomHighlighted" not in data
    assert MapNode.from_dict(data) == node


def test_config_from_editor_keys():
    config = MapConfig.from_dict(
        {"numRows": 7, "minNodesPerRow": 1, "hasIntermediateBoss": False,
         "orientation": "horizontal", "unknownKey": 1}
    )
    assert config.num_rows == 7
    assert config.min_nodes_per_row == 1
    assert config.has_intermediate_boss is False
    assert config.orientation is Orientation.HORIZONTAL
    assert config.max_nodes_per_row == MapConfig().max_nodes_per_row
    assert config.to_dict()["orientation"] == "horizontal"


def test_config_rejects_unknown_orientation():
    with pytest.raises(ValueError, match="orientation"):
        MapConfig(orientation="diagonal")


def test_config_clamping():
    config = MapConfig(
        num_rows=99, min_nodes_per_row=8, max_nodes_per_row=4, boss_row=50,
        spacing_x=1, spacing_y=9999, max_connection_reach=0, jitter_intensity=500,
    ).clamped()
    assert config.num_rows == 30
    assert config.max_nodes_per_row == 4
    assert config.min_nodes_per_row == 4
    assert config.boss_row == 29
    assert config.spacing_x == 30
    assert config.spacing_y == 500
    assert config.max_connection_reach == 1
    assert config.jitter_intensity == 200


def test_active_boss_row():
    assert MapConfig(num_rows=6, boss_row=3).active_boss_row == 3
    assert MapConfig(num_rows=6, boss_row=3,
                     has_intermediate_boss=False).active_boss_row is None
    assert MapConfig(num_rows=6, boss_row=6).active_boss_row is None


def test_run_map_id_counter():
    run_map = RunMap(floors=[[MapNode(id=4, row=0, type="start")]])
    assert run_map.next_id == 5
    assert run_map.allocate_id() == 5
    assert run_map.allocate_id() == 6
    assert RunMap().next_id == 0


def test_parse_document():
    doc = parse_document(_doc_data())
    assert [n.id for n in doc.run_map.all_nodes()] == [5, 6]
    assert doc.run_map.next_id == 7
    assert doc.config.orientation is Orientation.HORIZONTAL
    assert doc.run_map.floors[1][0].is_locked
    assert doc.run_map.floors[1][0].manual_offset_x == 4
    assert doc.node_types == DEFAULT_NODE_TYPES


def test_parse_document_keeps_explicit_counter():
    doc = parse_document(_doc_data(nextId=40))
    assert doc.run_map.next_id == 40


def test_parse_document_node_types_override():
    doc = parse_document(_doc_data(nodeTypes={
        "shop": {"name": "Store", "color": "#000000", "icon": "fas fa-store",
                 "editable": True, "isFixed": False, "iconColor": "#ffffff"},
    }))
    assert doc.node_types["shop"] == NodeTypeConfig(
        "Store", "#000000", "fas fa-store", True, False, "#ffffff"
    )
    assert doc.node_types["boss"] == DEFAULT_NODE_TYPES["boss"]


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"mapNodes": []},
        {"mapConfig": {}},
        {"mapNodes": [{"id": 1}], "mapConfig": {}},
        {"mapNodes": [[{"row": 0}]], "mapConfig": {}},
        {"mapNodes": [], "mapConfig": {"orientation": "sideways"}},
        {"mapNodes": [], "mapConfig": {}, "nodeTypes": {"shop": "gold"}},
        {"mapNodes": [], "mapConfig": {}, "nodeTypes": ["shop"]},
    ],
    ids=["not-object", "no-config", "no-nodes", "flat-nodes", "no-id",
         "bad-orientation", "node-type-not-object", "node-types-not-object"],
)
def test_parse_document_rejects_malformed(data):
    with pytest.raises(DocumentError):
        parse_document(data)


def test_load_document_bad_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(DocumentError, match="parsing JSON"):
        load_document(path)


def test_dump_and_load(tmp_path):
    doc = parse_document(_doc_data(nextId=12, visualConfig={"theme": "dark"},
                                   availableIcons=["fas fa-star"]))
    path = tmp_path / "map.json"
    dump_document(doc, path)

    text = path.read_text()
    assert text.endswith("\n")
    raw = json.loads(text)
    assert raw["nextId"] == 12
    assert raw["mapConfig"]["numRows"] == 1
    assert raw["nodeTypes"]["boss"]["isFixed"] is True

    loaded = load_document(path)
    assert isinstance(loaded, MapDocument)
    assert loaded.run_map == doc.run_map
    assert loaded.config == doc.config
    assert loaded.visual_config == {"theme": "dark"}
    assert loaded.available_icons == ["fas fa-star"]
