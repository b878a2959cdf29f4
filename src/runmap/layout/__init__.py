"""Coordinate assignment for run maps."""

from runmap.layout.engine import apply_drag, regenerate_node_positions

__all__ = ["apply_drag", "regenerate_node_positions"]
