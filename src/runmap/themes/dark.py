"""Dark slate theme (matching the editor's default canvas)."""

from runmap.render.style import Theme

DARK_THEME = Theme(
    name="dark",
    background_color="#0b1120",
    line_color="#475569",
    line_width=3.0,
    node_radius=22.0,
    node_stroke="#1e293b",
    node_stroke_width=3.0,
    label_color="#f8fafc",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=14.0,
    floor_label_color="#64748b",
    floor_label_font_size=12.0,
)
