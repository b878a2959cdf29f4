"""Exceptions raised at the edges of the run map engine."""

from __future__ import annotations


class RunMapError(Exception):
    """Base class for run map errors."""


class LockConflictError(RunMapError, ValueError):
    """Locked nodes from a previous map cannot all be placed.

    Raised when two locked nodes contend for the same single-node floor, or
    when a locked node's type does not fit the fixed type that floor requires,
    including a locked start or boss node landing on an ordinary floor.
    """

    def __init__(self, row: int, node_ids: list[int], reason: str) -> None:
        self.row = row
        self.node_ids = node_ids
        ids = ", ".join(str(i) for i in node_ids)
        super().__init__(f"Floor {row}: locked node(s) {ids} {reason}")


class DocumentError(RunMapError, ValueError):
    """A run map document is missing required keys or is malformed."""
