"""Data model for run maps."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator


class Orientation(Enum):
    """Direction in which floors advance on the canvas."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass
class MapNode:
    """A room on one floor of the run map."""

    id: int
    row: int
    type: str
    icon_class: str = ""
    connections: list[int] = field(default_factory=list)
    # Populated by layout engine
    x: float = 0.0
    y: float = 0.0
    # Visual overrides
    custom_size: float | None = None
    custom_glow: float | None = None
    border_color: str | None = None
    is_custom_highlighted: bool = False
    # Author state
    manual_offset_x: float = 0.0
    manual_offset_y: float = 0.0
    is_locked: bool = False

    def connect(self, target_id: int) -> None:
        if target_id not in self.connections:
            self.connections.append(target_id)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "row": self.row,
            "type": self.type,
            "iconClass": self.icon_class,
            "connections": list(self.connections),
            "x": self.x,
            "y": self.y,
        }
        optional = {
            "customSize": self.custom_size,
            "customGlow": self.custom_glow,
            "borderColor": self.border_color,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.manual_offset_x:
            data["manualOffsetX"] = self.manual_offset_x
        if self.manual_offset_y:
            data["manualOffsetY"] = self.manual_offset_y
        if self.is_locked:
            data["isLocked"] = True
        if self.is_custom_highlighted:
            data["isCustomHighlighted"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapNode:
        return cls(
            id=int(data["id"]),
            row=int(data.get("row", 0)),
            type=str(data["type"]),
            icon_class=data.get("iconClass", ""),
            connections=[int(c) for c in data.get("connections", [])],
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            custom_size=data.get("customSize"),
            custom_glow=data.get("customGlow"),
            border_color=data.get("borderColor"),
            is_custom_highlighted=bool(data.get("isCustomHighlighted", False)),
            manual_offset_x=float(data.get("manualOffsetX") or 0.0),
            manual_offset_y=float(data.get("manualOffsetY") or 0.0),
            is_locked=bool(data.get("isLocked", False)),
        )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# camelCase document key -> MapConfig attribute
_CONFIG_KEYS = {
    "orientation": "orientation",
    "numRows": "num_rows",
    "minNodesPerRow": "min_nodes_per_row",
    "maxNodesPerRow": "max_nodes_per_row",
    "bossRow": "boss_row",
    "hasIntermediateBoss": "has_intermediate_boss",
    "spacingX": "spacing_x",
    "spacingY": "spacing_y",
    "maxConnectionReach": "max_connection_reach",
    "randomizeNodePositions": "randomize_node_positions",
    "jitterIntensity": "jitter_intensity",
}


@dataclass
class MapConfig:
    """Generation and layout options for a run map.

    ``max_connection_reach`` is carried for round-tripping but the connector
    always uses a window of one neighbor on each side.
    """

    orientation: Orientation = Orientation.VERTICAL
    num_rows: int = 15
    min_nodes_per_row: int = 2
    max_nodes_per_row: int = 4
    boss_row: int = 8
    has_intermediate_boss: bool = True
    spacing_x: float = 120.0
    spacing_y: float = 100.0
    max_connection_reach: int = 1
    randomize_node_positions: bool = False
    jitter_intensity: float = 40.0

    def __post_init__(self) -> None:
        if not isinstance(self.orientation, Orientation):
            try:
                self.orientation = Orientation(self.orientation)
            except ValueError:
                raise ValueError(
                    f"Unknown orientation '{self.orientation}'; "
                    "expected 'vertical' or 'horizontal'"
                ) from None

    def clamped(self) -> MapConfig:
        """Return a copy with every option forced into its supported range."""
        num_rows = int(_clamp(self.num_rows, 3, 30))
        max_nodes = int(_clamp(self.max_nodes_per_row, 1, 10))
        min_nodes = int(_clamp(self.min_nodes_per_row, 1, max_nodes))
        return replace(
            self,
            num_rows=num_rows,
            min_nodes_per_row=min_nodes,
            max_nodes_per_row=max_nodes,
            boss_row=int(_clamp(self.boss_row, 1, num_rows - 1)),
            spacing_x=_clamp(self.spacing_x, 30, 250),
            spacing_y=_clamp(self.spacing_y, 30, 500),
            max_connection_reach=int(_clamp(self.max_connection_reach, 1, 5)),
            jitter_intensity=_clamp(self.jitter_intensity, 0, 200),
        )

    @property
    def active_boss_row(self) -> int | None:
        """Interior floor forced to a single mini-boss, or None when disabled."""
        if self.has_intermediate_boss and 0 < self.boss_row < self.num_rows:
            return self.boss_row
        return None

    def to_dict(self) -> dict[str, Any]:
        data = {key: getattr(self, attr) for key, attr in _CONFIG_KEYS.items()}
        data["orientation"] = self.orientation.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapConfig:
        kwargs = {
            attr: data[key] for key, attr in _CONFIG_KEYS.items() if key in data
        }
        return cls(**kwargs)


@dataclass
class RunMap:
    """Ordered floors of nodes plus the id counter that owns allocation.

    Floor 0 holds the start node and the last floor holds the boss. Every
    connection on a node in floor ``r`` targets a node in floor ``r + 1``.
    """

    floors: list[list[MapNode]] = field(default_factory=list)
    next_id: int = 0

    def __post_init__(self) -> None:
        self.sync_next_id()

    def max_id(self) -> int:
        return max((n.id for n in self.all_nodes()), default=-1)

    def sync_next_id(self) -> None:
        """Raise the counter above every id present in the map."""
        self.next_id = max(self.next_id, self.max_id() + 1)

    def allocate_id(self) -> int:
        node_id = self.next_id
        self.next_id += 1
        return node_id

    def all_nodes(self) -> Iterator[MapNode]:
        for floor in self.floors:
            yield from floor

    def find_node(self, node_id: int) -> tuple[int, int, MapNode] | None:
        """Return (floor index, slot index, node) for an id, or None."""
        for r, floor in enumerate(self.floors):
            for i, node in enumerate(floor):
                if node.id == node_id:
                    return r, i, node
        return None

    def copy(self) -> RunMap:
        return copy.deepcopy(self)

    def to_list(self) -> list[list[dict[str, Any]]]:
        return [[node.to_dict() for node in floor] for floor in self.floors]

    @classmethod
    def from_list(
        cls, floors: list[list[dict[str, Any]]], next_id: int = 0
    ) -> RunMap:
        return cls(
            floors=[[MapNode.from_dict(n) for n in floor] for floor in floors],
            next_id=next_id,
        )
