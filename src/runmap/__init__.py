"""runmap: generate and maintain layered roguelike run maps."""

__version__ = "0.1.0"
