"""Light theme."""

from runmap.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="#f8fafc",
    line_color="#94a3b8",
    line_width=3.0,
    node_radius=22.0,
    node_stroke="#ffffff",
    node_stroke_width=3.0,
    label_color="#ffffff",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=14.0,
    floor_label_color="#475569",
    floor_label_font_size=12.0,
    node_shape="square",
    locked_stroke="#ca8a04",
)
