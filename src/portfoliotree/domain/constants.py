from __future__ import annotations

"""
Domain Constants.

Centralizes the routing geometry used by the connector router and the
default box grid used by the reference measurement provider.
"""

from typing import Dict

from portfoliotree.domain.tree_models import NodeType

CURRENT_CONFIG_VERSION = "1.0.0"
APP_NAME = "PortfolioTree"

# -----------------------------------------------------------------------------
# CONNECTOR ROUTING GEOMETRY
# -----------------------------------------------------------------------------
TRUNK_LENGTHS: Dict[NodeType, float] = {
    NodeType.PROGRAM: 20,
    NodeType.PRODUCT: 18,
    NodeType.PROJECT: 15,
}
DEFAULT_TRUNK_LENGTH: float = 15

CORNER_RADIUS: float = 5
TRUNK_LEFT_INSET: float = 20  # Horizontal offset of left-aligned trunks
BRANCH_ELBOW_OFFSET: float = 20  # Vertical run sits this far left of the child
CURVE_BIAS: float = 0.7  # Control point position along the horizontal span

# -----------------------------------------------------------------------------
# REFERENCE GRID (HEADLESS MEASUREMENT)
# -----------------------------------------------------------------------------
GRID_COLUMN_WIDTH: float = 380
GRID_COLUMN_GAP: float = 80
GRID_INDENT: float = 40
GRID_BOX_WIDTH: float = 280
GRID_BOX_HEIGHT: float = 56
GRID_ROW_MARGIN: float = 32
GRID_TOPIC_INDENT: float = 320
GRID_TOPIC_GAP: float = 8
