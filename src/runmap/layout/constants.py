"""Layout and generation constants.

Centralizes the magic numbers used by the connector, the generator, the
topology enforcer and the position solver.
"""

# ---------------------------------------------------------------------------
# Node geometry
# ---------------------------------------------------------------------------
NODE_VISUAL_SIZE: float = 70.0
"""Approximate rendered diameter of a node, including border and padding."""

COLLISION_BUFFER: float = 30.0
"""Extra clearance added to NODE_VISUAL_SIZE when separating jittered nodes."""

MIN_NODE_GAP: float = NODE_VISUAL_SIZE + COLLISION_BUFFER
"""Minimum center-to-center distance along a floor after jitter."""

# ---------------------------------------------------------------------------
# Jitter
# ---------------------------------------------------------------------------
MAIN_AXIS_JITTER_FACTOR: float = 0.7
"""Main-axis jitter is damped relative to cross-axis jitter."""

DEFAULT_JITTER_INTENSITY: float = 40.0
"""Jitter percentage used when the configuration leaves it unset."""

# ---------------------------------------------------------------------------
# Manual offsets
# ---------------------------------------------------------------------------
MAX_OFFSET_RADIUS: float = 150.0
"""Maximum distance a node may be dragged from its computed position."""

# ---------------------------------------------------------------------------
# Connector
# ---------------------------------------------------------------------------
CONNECTION_REACH: int = 1
"""Half-width of the candidate window around a node's mapped target."""

TWO_LINK_THRESHOLD: float = 0.65
"""Uniform draws above this give a node two outgoing edges."""

THREE_LINK_THRESHOLD: float = 0.90
"""Uniform draws above this give a node three outgoing edges."""

# ---------------------------------------------------------------------------
# Mini-boss visuals
# ---------------------------------------------------------------------------
MINI_BOSS_SIZE: float = 1.5
"""Scale applied to generated mini-boss nodes."""

MINI_BOSS_GLOW: float = 20.0
"""Glow radius applied to generated mini-boss nodes."""
