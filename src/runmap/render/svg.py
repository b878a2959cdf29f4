"""SVG generation for run maps using drawsvg."""

from __future__ import annotations

from typing import Mapping

import drawsvg as draw

from runmap.parser.model import MapNode, Orientation, RunMap
from runmap.registry import DEFAULT_NODE_TYPES, NodeTypeConfig
from runmap.render.style import Theme


def render_svg(
    run_map: RunMap,
    theme: Theme,
    node_types: Mapping[str, NodeTypeConfig] = DEFAULT_NODE_TYPES,
    orientation: Orientation = Orientation.VERTICAL,
    padding: float = 60.0,
) -> str:
    """Render a positioned run map to an SVG string.

    Map coordinates are centered on the cross axis, so everything is shifted
    by the bounding box minimum before drawing.
    """
    nodes = list(run_map.all_nodes())
    if not nodes:
        return '<svg xmlns="http://www.w3.org/2000/svg"></svg>\n'

    reach = max(_node_radius(n, theme) for n in nodes)
    min_x = min(n.x for n in nodes) - reach
    min_y = min(n.y for n in nodes) - reach
    max_x = max(n.x for n in nodes) + reach
    max_y = max(n.y for n in nodes) + reach

    width = int(max_x - min_x + padding * 2)
    height = int(max_y - min_y + padding * 2)
    dx = padding - min_x
    dy = padding - min_y

    d = draw.Drawing(width, height)
    d.append(draw.Rectangle(0, 0, width, height, fill=theme.background_color))

    if theme.show_floor_numbers:
        _render_floor_numbers(d, run_map, theme, orientation, dx, dy)

    _render_edges(d, run_map, theme, dx, dy)
    _render_nodes(d, run_map, theme, node_types, dx, dy)

    svg = d.as_svg()
    return svg if svg.endswith("\n") else svg + "\n"


def _node_radius(node: MapNode, theme: Theme) -> float:
    return theme.node_radius * (node.custom_size or 1.0)


def _render_edges(
    d: draw.Drawing,
    run_map: RunMap,
    theme: Theme,
    dx: float,
    dy: float,
) -> None:
    """Straight lines from each node to its targets on the next floor."""
    positions = {n.id: (n.x + dx, n.y + dy) for n in run_map.all_nodes()}
    for node in run_map.all_nodes():
        x1, y1 = positions[node.id]
        for target in node.connections:
            if target not in positions:
                continue
            x2, y2 = positions[target]
            d.append(draw.Line(
                x1, y1, x2, y2,
                stroke=theme.line_color,
                stroke_width=theme.line_width,
                stroke_linecap="round",
            ))


def _render_nodes(
    d: draw.Drawing,
    run_map: RunMap,
    theme: Theme,
    node_types: Mapping[str, NodeTypeConfig],
    dx: float,
    dy: float,
) -> None:
    """Render rooms filled with their type color, labelled by type initial.

    Locked nodes get the theme's locked stroke; ``border_color`` overrides
    both. ``custom_glow`` draws a translucent halo behind the node.
    """
    for node in run_map.all_nodes():
        cx, cy = node.x + dx, node.y + dy
        r = _node_radius(node, theme)
        type_config = node_types.get(node.type)
        fill = type_config.color if type_config else "#888888"
        stroke = node.border_color or (
            theme.locked_stroke if node.is_locked else theme.node_stroke
        )

        if node.custom_glow:
            d.append(draw.Circle(
                cx, cy, r + node.custom_glow / 2,
                fill=fill,
                fill_opacity=theme.glow_opacity,
            ))

        if theme.node_shape == "square":
            d.append(draw.Rectangle(
                cx - r, cy - r, r * 2, r * 2,
                rx=r / 4, ry=r / 4,
                fill=fill,
                stroke=stroke,
                stroke_width=theme.node_stroke_width,
            ))
        else:
            d.append(draw.Circle(
                cx, cy, r,
                fill=fill,
                stroke=stroke,
                stroke_width=theme.node_stroke_width,
            ))

        name = type_config.name if type_config else node.type
        d.append(draw.Text(
            name[:1].upper(),
            theme.label_font_size * (node.custom_size or 1.0),
            cx, cy,
            fill=theme.label_color,
            font_family=theme.label_font_family,
            font_weight="bold",
            text_anchor="middle",
            dominant_baseline="central",
        ))


def _render_floor_numbers(
    d: draw.Drawing,
    run_map: RunMap,
    theme: Theme,
    orientation: Orientation,
    dx: float,
    dy: float,
) -> None:
    """Floor index beside the first node of each floor."""
    for idx, floor in enumerate(run_map.floors):
        if not floor:
            continue
        if orientation is Orientation.VERTICAL:
            x = min(n.x for n in floor) + dx - theme.node_radius * 2
            y = sum(n.y for n in floor) / len(floor) + dy
        else:
            x = sum(n.x for n in floor) / len(floor) + dx
            y = min(n.y for n in floor) + dy - theme.node_radius * 2
        d.append(draw.Text(
            str(idx),
            theme.floor_label_font_size,
            x, y,
            fill=theme.floor_label_color,
            font_family=theme.label_font_family,
            text_anchor="middle",
            dominant_baseline="central",
        ))
