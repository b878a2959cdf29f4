"""JSON documents holding a map together with its configuration.

The layout matches the editor's export format::

    {
      "mapNodes": [[{...node...}, ...], ...],
      "mapConfig": {...},
      "nodeTypes": {...},
      "visualConfig": {...},
      "availableIcons": [...],
      "nextId": 42
    }

``mapNodes`` and ``mapConfig`` are required; the rest are optional and are
passed through untouched when the engine has no use for them.
"""

from __future__ import annotations

__all__ = ["MapDocument", "dump_document", "load_document", "parse_document"]

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from runmap.errors import DocumentError
from runmap.parser.model import MapConfig, RunMap
from runmap.registry import DEFAULT_NODE_TYPES, NodeTypeConfig


@dataclass
class MapDocument:
    """A run map plus everything needed to regenerate or render it."""

    run_map: RunMap
    config: MapConfig = field(default_factory=MapConfig)
    node_types: dict[str, NodeTypeConfig] = field(
        default_factory=lambda: dict(DEFAULT_NODE_TYPES)
    )
    visual_config: dict[str, Any] | None = None
    available_icons: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "mapNodes": self.run_map.to_list(),
            "mapConfig": self.config.to_dict(),
            "nodeTypes": {k: v.to_dict() for k, v in self.node_types.items()},
            "nextId": self.run_map.next_id,
        }
        if self.visual_config is not None:
            data["visualConfig"] = self.visual_config
        if self.available_icons is not None:
            data["availableIcons"] = self.available_icons
        return data


def parse_document(data: Any) -> MapDocument:
    """Build a MapDocument from decoded JSON.

    Raises:
        DocumentError: Required keys are missing or hold the wrong shape.
    """
    if not isinstance(data, dict) or "mapNodes" not in data or "mapConfig" not in data:
        raise DocumentError(
            "Invalid map document: expected an object with 'mapNodes' "
            "and 'mapConfig'"
        )

    floors = data["mapNodes"]
    if not isinstance(floors, list) or not all(isinstance(f, list) for f in floors):
        raise DocumentError("Invalid map document: 'mapNodes' must be a list of floors")

    node_types = dict(DEFAULT_NODE_TYPES)
    try:
        run_map = RunMap.from_list(floors, next_id=int(data.get("nextId", 0)))
        config = MapConfig.from_dict(data["mapConfig"])
        for key, value in (data.get("nodeTypes") or {}).items():
            node_types[key] = NodeTypeConfig.from_dict(value)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise DocumentError(f"Invalid map document: {e}") from e

    return MapDocument(
        run_map=run_map,
        config=config,
        node_types=node_types,
        visual_config=data.get("visualConfig"),
        available_icons=data.get("availableIcons"),
    )


def load_document(path: Path) -> MapDocument:
    """Read and parse a JSON map document."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise DocumentError(f"Error parsing JSON in {path}: {e}") from e
    return parse_document(data)


def dump_document(doc: MapDocument, path: Path) -> None:
    """Write a map document as indented JSON with a trailing newline."""
    Path(path).write_text(json.dumps(doc.to_dict(), indent=2) + "\n")
