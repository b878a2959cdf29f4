"""CLI for runmap."""

from __future__ import annotations

import functools
import logging
import random
from dataclasses import replace
from pathlib import Path

import click

from runmap import __version__
from runmap.edit import delete_node, promote_node
from runmap.errors import RunMapError
from runmap.generate.generator import generate_map
from runmap.generate.topology import enforce_boss_row_topology
from runmap.layout import apply_drag, regenerate_node_positions
from runmap.layout.constants import MAX_OFFSET_RADIUS
from runmap.parser import MapDocument, dump_document, load_document
from runmap.parser.model import MapConfig, Orientation
from runmap.registry import DEFAULT_NODE_TYPES
from runmap.render import render_svg
from runmap.themes import THEMES
from runmap.validator import Severity, validate_map

# CLI option name -> MapConfig attribute
_CONFIG_OPTIONS = {
    "rows": "num_rows",
    "min_nodes": "min_nodes_per_row",
    "max_nodes": "max_nodes_per_row",
    "boss_row": "boss_row",
    "intermediate_boss": "has_intermediate_boss",
    "orientation": "orientation",
    "spacing_x": "spacing_x",
    "spacing_y": "spacing_y",
    "jitter": "randomize_node_positions",
    "jitter_intensity": "jitter_intensity",
}


def config_options(func):
    """Options that override the map configuration."""
    options = [
        click.option("--rows", type=int, default=None,
                     help="Number of floors after the start (3-30)"),
        click.option("--min-nodes", type=int, default=None,
                     help="Minimum rooms on an ordinary floor (1-10)"),
        click.option("--max-nodes", type=int, default=None,
                     help="Maximum rooms on an ordinary floor (1-10)"),
        click.option("--boss-row", type=int, default=None,
                     help="Floor holding the intermediate boss"),
        click.option("--intermediate-boss/--no-intermediate-boss", default=None,
                     help="Enable or disable the intermediate boss floor"),
        click.option("--orientation",
                     type=click.Choice([o.value for o in Orientation]),
                     default=None, help="Direction in which floors advance"),
        click.option("--spacing-x", type=float, default=None,
                     help="Spacing between rooms on a floor (30-250)"),
        click.option("--spacing-y", type=float, default=None,
                     help="Spacing between floors (30-500)"),
        click.option("--jitter/--no-jitter", default=None,
                     help="Randomize room positions"),
        click.option("--jitter-intensity", type=float, default=None,
                     help="Jitter strength in percent (0-200)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _apply_overrides(config: MapConfig, overrides: dict) -> MapConfig:
    changes = {
        attr: overrides[name]
        for name, attr in _CONFIG_OPTIONS.items()
        if overrides.get(name) is not None
    }
    if "orientation" in changes:
        changes["orientation"] = Orientation(changes["orientation"])
    return replace(config, **changes).clamped()


def _rng(seed: int | None) -> random.Random:
    return random.Random(seed)


def handle_errors(func):
    """Report engine errors on stderr and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (RunMapError, KeyError, ValueError) as e:
            message = e.args[0] if isinstance(e, KeyError) and e.args else e
            click.echo(f"Error: {message}", err=True)
            raise SystemExit(1)

    return wrapper


def _summary(doc: MapDocument) -> str:
    nodes = sum(len(f) for f in doc.run_map.floors)
    edges = sum(len(n.connections) for n in doc.run_map.all_nodes())
    return f"{len(doc.run_map.floors)} floors, {nodes} nodes, {edges} edges"


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log engine decisions")
def cli(verbose: bool) -> None:
    """runmap: Generate and edit layered roguelike run maps."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("-o", "--output", type=click.Path(path_type=Path),
              default=Path("runmap.json"), show_default=True,
              help="Output JSON document")
@click.option("--from", "existing", type=click.Path(exists=True, path_type=Path),
              default=None,
              help="Regenerate from this document, keeping its locked nodes")
@click.option("--seed", type=int, default=None, help="Random seed")
@config_options
@handle_errors
def generate(output: Path, existing: Path | None, seed: int | None,
             **overrides) -> None:
    """Generate a new map, or reshuffle an existing one around its locks."""
    previous = load_document(existing) if existing is not None else None
    config = _apply_overrides(previous.config if previous else MapConfig(), overrides)
    node_types = previous.node_types if previous else dict(DEFAULT_NODE_TYPES)

    run_map = generate_map(
        config,
        node_types,
        existing=previous.run_map if previous else None,
        rng=_rng(seed),
    )
    doc = MapDocument(run_map=run_map, config=config, node_types=node_types)
    if previous is not None:
        doc.visual_config = previous.visual_config
        doc.available_icons = previous.available_icons

    dump_document(doc, output)
    click.echo(f"Generated {_summary(doc)} -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON document. Defaults to overwriting the input")
@click.option("--seed", type=int, default=None, help="Random seed")
@config_options
@handle_errors
def update(input_file: Path, output: Path | None, seed: int | None,
           **overrides) -> None:
    """Apply configuration changes without regenerating the whole map.

    Moves the boss floor if needed, then recomputes positions.
    """
    doc = load_document(input_file)
    doc.config = _apply_overrides(doc.config, overrides)
    rng = _rng(seed)

    run_map = enforce_boss_row_topology(doc.run_map, doc.config, doc.node_types, rng)
    doc.run_map = regenerate_node_positions(run_map, doc.config, rng)

    output = output or input_file
    dump_document(doc, output)
    click.echo(f"Updated {_summary(doc)} -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.argument("node_id", type=int)
@click.option("--dx", type=float, default=0.0, help="Horizontal drag distance")
@click.option("--dy", type=float, default=0.0, help="Vertical drag distance")
@click.option("--max-radius", type=float, default=MAX_OFFSET_RADIUS,
              show_default=True, help="Furthest a node may move from its origin")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON document. Defaults to overwriting the input")
@handle_errors
def drag(input_file: Path, node_id: int, dx: float, dy: float,
         max_radius: float, output: Path | None) -> None:
    """Move a node by (DX, DY), clamped to a radius around its origin."""
    doc = load_document(input_file)
    doc.run_map = apply_drag(doc.run_map, node_id, dx, dy, max_radius)
    node = doc.run_map.find_node(node_id)[2]

    output = output or input_file
    dump_document(doc, output)
    click.echo(f"Node {node_id} offset ({node.manual_offset_x:.1f}, "
               f"{node.manual_offset_y:.1f}) -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.argument("node_id", type=int)
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON document. Defaults to overwriting the input")
@click.option("--seed", type=int, default=None, help="Random seed")
@handle_errors
def promote(input_file: Path, node_id: int, output: Path | None,
            seed: int | None) -> None:
    """Make a node the sole mini-boss of its floor."""
    doc = load_document(input_file)
    doc.run_map = promote_node(
        doc.run_map, node_id, doc.config, doc.node_types, _rng(seed)
    )

    output = output or input_file
    dump_document(doc, output)
    click.echo(f"Promoted node {node_id} -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.argument("node_id", type=int)
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON document. Defaults to overwriting the input")
@click.option("--seed", type=int, default=None, help="Random seed")
@handle_errors
def delete(input_file: Path, node_id: int, output: Path | None,
           seed: int | None) -> None:
    """Remove a node and reattach any rooms it stranded."""
    doc = load_document(input_file)
    doc.run_map = delete_node(doc.run_map, node_id, doc.config, _rng(seed))

    output = output or input_file
    dump_document(doc, output)
    click.echo(f"Deleted node {node_id} -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@handle_errors
def validate(input_file: Path) -> None:
    """Check a map document for structural defects."""
    doc = load_document(input_file)
    violations = validate_map(doc.run_map, doc.config)

    for v in violations:
        if v.severity is Severity.WARNING:
            click.echo(f"Warning: {v.message}", err=True)

    errors = [v for v in violations if v.severity is Severity.ERROR]
    if errors:
        click.echo("Validation errors:", err=True)
        for err in errors:
            click.echo(f"  - {err.message}", err=True)
        raise SystemExit(1)

    click.echo(f"Valid: {_summary(doc)}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@handle_errors
def info(input_file: Path) -> None:
    """Show information about a map document."""
    doc = load_document(input_file)
    config = doc.config

    click.echo(f"Orientation: {config.orientation.value}")
    click.echo(f"Floors: {len(doc.run_map.floors)}")
    boss_row = config.active_boss_row
    click.echo(f"Boss floor: {boss_row if boss_row is not None else '(none)'}")
    click.echo(f"Next id: {doc.run_map.next_id}")
    for idx, floor in enumerate(doc.run_map.floors):
        rooms = ", ".join(
            f"{n.id}:{n.type}{'*' if n.is_locked else ''}" for n in floor
        )
        click.echo(f"  [{idx}] {rooms}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="dark",
              help="Visual theme (default: dark)")
@handle_errors
def render(input_file: Path, output: Path | None, theme: str) -> None:
    """Render a map document to SVG."""
    doc = load_document(input_file)
    svg = render_svg(
        doc.run_map,
        THEMES[theme],
        doc.node_types,
        orientation=doc.config.orientation,
    )

    if output is None:
        output = input_file.with_suffix(".svg")

    output.write_text(svg)
    click.echo(f"Rendered {_summary(doc)} -> {output}")
