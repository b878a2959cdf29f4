"""SVG export for positioned run maps."""

from runmap.render.svg import render_svg

__all__ = ["render_svg"]
