"""Theme and style constants for run map rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Theme:
    """Visual theme for a run map."""

    name: str
    background_color: str
    line_color: str
    line_width: float
    node_radius: float
    node_stroke: str
    node_stroke_width: float
    label_color: str
    label_font_family: str
    label_font_size: float
    floor_label_color: str
    floor_label_font_size: float
    # "circle" or "square"
    node_shape: str = "circle"
    show_floor_numbers: bool = True
    locked_stroke: str = "#facc15"
    glow_opacity: float = 0.35
