"""Tests for the CLI entry points."""

import json

import pytest
from click.testing import CliRunner

from runmap.cli import cli


@pytest.fixture
def map_file(tmp_path):
    """A generated 6-floor map with its intermediate boss on floor 3."""
    path = tmp_path / "run.json"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "generate", "-o", str(path), "--seed", "7", "--rows", "5",
        "--min-nodes", "2", "--max-nodes", "3", "--boss-row", "3",
    ])
    assert result.exit_code == 0, result.output
    return path


def _load(path):
    return json.loads(path.read_text())


def test_generate_writes_document(map_file):
    """generate writes a document with nodes, config and id counter."""
    data = _load(map_file)
    assert len(data["mapNodes"]) == 6
    assert data["mapConfig"]["numRows"] == 5
    assert data["mapConfig"]["bossRow"] == 3
    assert [n["type"] for n in data["mapNodes"][3]] == ["mini_boss_editable"]
    ids = [n["id"] for floor in data["mapNodes"] for n in floor]
    assert data["nextId"] > max(ids)


def test_generate_seed_is_reproducible(tmp_path):
    """Same seed and options give the same map."""
    runner = CliRunner()
    outputs = []
    for name in ("a.json", "b.json"):
        out = tmp_path / name
        result = runner.invoke(cli, ["generate", "-o", str(out), "--seed", "11"])
        assert result.exit_code == 0, result.output
        outputs.append(out.read_text())
    assert outputs[0] == outputs[1]


def test_generate_clamps_options(tmp_path):
    """Out-of-range options are clamped rather than rejected."""
    out = tmp_path / "big.json"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["generate", "-o", str(out), "--rows", "100", "--seed", "1"]
    )
    assert result.exit_code == 0, result.output
    assert _load(out)["mapConfig"]["numRows"] == 30
    assert len(_load(out)["mapNodes"]) == 31


def test_generate_from_existing_keeps_locks(map_file, tmp_path):
    """--from regenerates around locked nodes."""
    data = _load(map_file)
    locked = data["mapNodes"][2][0]
    locked["isLocked"] = True
    locked["type"] = "treasure"
    map_file.write_text(json.dumps(data))

    out = tmp_path / "regen.json"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["generate", "--from", str(map_file), "-o", str(out), "--seed", "3"]
    )
    assert result.exit_code == 0, result.output
    floor = _load(out)["mapNodes"][2]
    kept = [n for n in floor if n["id"] == locked["id"]]
    assert kept and kept[0]["type"] == "treasure" and kept[0]["isLocked"]


def test_validate_success(map_file):
    """validate command succeeds on a generated map."""
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(map_file)])
    assert result.exit_code == 0, result.output
    assert "Valid:" in result.output


def test_validate_reports_errors(map_file):
    """validate exits 1 and lists structural errors."""
    data = _load(map_file)
    data["mapNodes"][1][0]["connections"].append(999)
    map_file.write_text(json.dumps(data))

    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(map_file)])
    assert result.exit_code == 1
    assert "Validation errors:" in result.output


def test_bad_json(tmp_path):
    """Malformed documents are reported without a traceback."""
    bad = tmp_path / "bad.json"
    bad.write_text("{oops")
    runner = CliRunner()
    result = runner.invoke(cli, ["info", str(bad)])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_info_output(map_file):
    """info command prints map metadata."""
    runner = CliRunner()
    result = runner.invoke(cli, ["info", str(map_file)])
    assert result.exit_code == 0, result.output
    assert "Orientation: vertical" in result.output
    assert "Floors: 6" in result.output
    assert "Boss floor: 3" in result.output
    assert "Next id:" in result.output


def test_update_moves_boss_floor(map_file):
    """update relocates the intermediate boss without regenerating."""
    before = _load(map_file)
    runner = CliRunner()
    result = runner.invoke(
        cli, ["update", str(map_file), "--boss-row", "2", "--seed", "5"]
    )
    assert result.exit_code == 0, result.output

    after = _load(map_file)
    assert after["mapConfig"]["bossRow"] == 2
    assert [n["type"] for n in after["mapNodes"][2]] == ["mini_boss_editable"]
    assert "mini_boss_editable" not in [n["type"] for n in after["mapNodes"][3]]
    assert after["mapNodes"][0][0]["id"] == before["mapNodes"][0][0]["id"]

    result = runner.invoke(cli, ["validate", str(map_file)])
    assert result.exit_code == 0, result.output


def test_drag_clamps(map_file):
    """drag stores a clamped manual offset."""
    node_id = _load(map_file)["mapNodes"][1][0]["id"]
    runner = CliRunner()
    result = runner.invoke(
        cli, ["drag", str(map_file), str(node_id), "--dx", "300", "--dy", "-400"]
    )
    assert result.exit_code == 0, result.output
    node = _load(map_file)["mapNodes"][1][0]
    assert node["manualOffsetX"] == pytest.approx(90)
    assert node["manualOffsetY"] == pytest.approx(-120)


def test_drag_unknown_node(map_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["drag", str(map_file), "9999", "--dx", "5"])
    assert result.exit_code == 1
    assert "No node with id 9999" in result.output


def test_promote_and_delete(map_file, tmp_path):
    """promote collapses a floor; delete refuses the start room."""
    data = _load(map_file)
    node_id = data["mapNodes"][1][-1]["id"]
    out = tmp_path / "promoted.json"

    runner = CliRunner()
    result = runner.invoke(
        cli, ["promote", str(map_file), str(node_id), "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert [n["id"] for n in _load(out)["mapNodes"][1]] == [node_id]

    start_id = data["mapNodes"][0][0]["id"]
    result = runner.invoke(cli, ["delete", str(out), str(start_id)])
    assert result.exit_code == 1
    assert "cannot be deleted" in result.output


def test_promote_start_refused(map_file):
    """promote exits 1 on the start room and leaves the document alone."""
    before = map_file.read_text()
    start_id = _load(map_file)["mapNodes"][0][0]["id"]

    runner = CliRunner()
    result = runner.invoke(cli, ["promote", str(map_file), str(start_id)])
    assert result.exit_code == 1
    assert "cannot be promoted" in result.output
    assert map_file.read_text() == before


def test_render_produces_svg(map_file, tmp_path):
    """render command produces an SVG file."""
    out = tmp_path / "output.svg"
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(map_file), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "<svg" in out.read_text()


def test_render_default_output(map_file):
    """render command uses input stem + .svg when no -o given."""
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(map_file), "--theme", "light"])
    assert result.exit_code == 0, result.output
    assert map_file.with_suffix(".svg").exists()


def test_version():
    """--version flag prints version string."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output.lower()


def test_malformed_node_types(tmp_path):
    """A nodeTypes entry that is not an object is reported, not raised."""
    bad = tmp_path / "types.json"
    bad.write_text(json.dumps(
        {"mapNodes": [], "mapConfig": {}, "nodeTypes": {"shop": 3}}
    ))
    runner = CliRunner()
    result = runner.invoke(cli, ["info", str(bad)])
    assert result.exit_code == 1
    assert "Error: Invalid map document" in result.output
