"""Node type registry: display metadata for each room type."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

START = "start"
BOSS = "boss"
MINI_BOSS = "mini_boss_editable"

DEFAULT_ICON = "fas fa-question"
MINI_BOSS_ICON = "fas fa-mask"


@dataclass(frozen=True)
class NodeTypeConfig:
    """Display and behavior metadata for a room type."""

    name: str
    color: str
    icon: str
    editable: bool = True
    is_fixed: bool = False
    icon_color: str = "#ffffff"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["isFixed"] = data.pop("is_fixed")
        data["iconColor"] = data.pop("icon_color")
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NodeTypeConfig:
        return cls(
            name=data.get("name", ""),
            color=data.get("color", "#888888"),
            icon=data.get("icon", DEFAULT_ICON),
            editable=bool(data.get("editable", True)),
            is_fixed=bool(data.get("isFixed", False)),
            icon_color=data.get("iconColor", "#ffffff"),
        )


DEFAULT_NODE_TYPES: dict[str, NodeTypeConfig] = {
    START: NodeTypeConfig("Start", "#22c55e", "fas fa-play", False, True),
    "normal": NodeTypeConfig("Enemy", "#64748b", "fas fa-skull"),
    "elite": NodeTypeConfig("Elite", "#dc2626", "fas fa-dragon"),
    "event": NodeTypeConfig("Event", "#8b5cf6", "fas fa-question"),
    "shop": NodeTypeConfig("Shop", "#eab308", "fas fa-coins"),
    "treasure": NodeTypeConfig("Treasure", "#f59e0b", "fas fa-gem"),
    MINI_BOSS: NodeTypeConfig("Mini-Boss", "#f97316", MINI_BOSS_ICON),
    BOSS: NodeTypeConfig("Boss", "#7f1d1d", "fas fa-crown", False, True),
}


def resolve_icon(
    node_types: Mapping[str, NodeTypeConfig],
    type_key: str,
    fallback: str = DEFAULT_ICON,
) -> str:
    """Icon for a room type, or ``fallback`` when the type is unregistered."""
    config = node_types.get(type_key)
    if config is None or not config.icon:
        return fallback
    return config.icon
