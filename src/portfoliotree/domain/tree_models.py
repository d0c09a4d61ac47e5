from __future__ import annotations

"""
Portfolio Tree Data Models.

Provides the typed node forest, the measured box geometry reported by the
host, the projected column rows and the connector path descriptions shared
by the projection and routing subsystems.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

class NodeType(str, Enum):
    """Portfolio hierarchy stage of a node."""
    PROGRAM = "program"
    PRODUCT = "product"
    PROJECT = "project"
    TOPIC = "topic"


# Child type that continues a parent's own column (depth within the column)
SAME_TYPE_CONTINUATION = {
    NodeType.PROGRAM: NodeType.PROGRAM,
    NodeType.PRODUCT: NodeType.PRODUCT,
    NodeType.PROJECT: NodeType.TOPIC,
}


@dataclass(frozen=True)
class TreeNode:
    """
    Immutable entry of the portfolio forest.

    Attributes:
        id: Unique identifier across the whole forest.
        name: Display label.
        type: Hierarchy stage of the node.
        children: Ordered child nodes owned exclusively by this node.
    """
    id: str
    name: str
    type: NodeType
    children: Tuple["TreeNode", ...] = ()

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def is_expandable(self) -> bool:
        """Only nodes with children present a toggle control."""
        return self.has_children


Forest = Tuple[TreeNode, ...]


def is_same_type_child(parent: TreeNode, child: TreeNode) -> bool:
    """Check whether the child continues the parent's column."""
    return SAME_TYPE_CONTINUATION.get(parent.type) == child.type


def partition_children(node: TreeNode) -> Tuple[List[TreeNode], List[TreeNode]]:
    """
    Split the children of a node into same-type and cross-type groups.

    Args:
        node: Parent node.

    Returns:
        Tuple[List[TreeNode], List[TreeNode]]: Same-type continuation
                                               children and cross-type
                                               children, in original order.
    """
    same: List[TreeNode] = []
    cross: List[TreeNode] = []
    for child in node.children:
        if is_same_type_child(node, child):
            same.append(child)
        else:
            cross.append(child)
    return same, cross


def node_prefix(node: TreeNode) -> str:
    """
    Build the short display identifier shown above a node name.

    Programs and projects show 'Pr-<number>', products show their upper-cased
    id and topics show nothing.
    """
    numeric_id = re.sub(r"^[a-z]+-", "", node.id)
    if node.type in (NodeType.PROGRAM, NodeType.PROJECT):
        return f"Pr-{numeric_id}"
    if node.type == NodeType.PRODUCT:
        return node.id.upper()
    return ""

# -----------------------------------------------------------------------------
# MEASURED GEOMETRY
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodePosition:
    """
    Bounding box of a rendered node, relative to the diagram container.

    Attributes:
        id: Node identifier.
        x: Left edge.
        y: Top edge.
        width: Box width.
        height: Box height.
    """
    id: str
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

# -----------------------------------------------------------------------------
# COLUMN PROJECTION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Row:
    """A visible node inside a column, with its indentation level."""
    node: TreeNode
    level: int = 0
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class ProjectRow(Row):
    """A project row together with the topic group shown beneath it."""
    topics: Tuple[TreeNode, ...] = ()


@dataclass(frozen=True)
class ColumnLayout:
    """
    Visible rows of the three diagram columns.

    Attributes:
        programs: Programs column in depth-first order.
        products: Products column, de-duplicated by node id.
        projects: Projects column with their visible topic groups.
    """
    programs: Tuple[Row, ...] = ()
    products: Tuple[Row, ...] = ()
    projects: Tuple[ProjectRow, ...] = ()

    def visible_ids(self) -> List[str]:
        """List every node id the host has to render and measure."""
        ids: List[str] = [r.node.id for r in self.programs]
        ids.extend(r.node.id for r in self.products)
        for row in self.projects:
            ids.append(row.node.id)
            ids.extend(t.id for t in row.topics)
        return ids

# -----------------------------------------------------------------------------
# CONNECTOR PATHS
# -----------------------------------------------------------------------------

class ConnectorKind(str, Enum):
    """Routing family of a connector path."""
    TRUNK = "trunk"
    BRANCH = "branch"
    CROSS_DIRECT = "cross-direct"
    CROSS_CURVED = "cross-curved"


Point = Tuple[float, float]


@dataclass(frozen=True)
class PathCommand:
    """
    Single drawing instruction of a connector.

    'M' and 'L' carry one point, 'Q' carries the control point followed by
    the end point.
    """
    op: str
    points: Tuple[Point, ...]


@dataclass(frozen=True)
class ConnectorPath:
    """
    Fully resolved connector ready for the overlay renderer.

    Attributes:
        key: Stable identifier ('<parent>-<child>' or '<parent>-trunk').
        kind: Routing family.
        source_id: Parent node id.
        target_id: Child node id, None for trunks.
        commands: Ordered drawing instructions.
    """
    key: str
    kind: ConnectorKind
    source_id: str
    target_id: Optional[str]
    commands: Tuple[PathCommand, ...] = field(default_factory=tuple)

    def endpoints(self) -> Tuple[str, ...]:
        if self.target_id is None:
            return (self.source_id,)
        return (self.source_id, self.target_id)

    def to_svg(self) -> str:
        """Render the commands as an SVG path 'd' attribute."""
        parts: List[str] = []
        for cmd in self.commands:
            coords = " ".join(f"{_fmt(x)} {_fmt(y)}" for x, y in cmd.points)
            parts.append(f"{cmd.op} {coords}")
        return " ".join(parts)

    def flatten(self, curve_steps: int = 8) -> List[Point]:
        """
        Approximate the path as a polyline.

        Quadratic segments are sampled with 'curve_steps' intervals, which
        lets canvases without Bezier support draw the connector.
        """
        points: List[Point] = []
        for cmd in self.commands:
            if cmd.op in ("M", "L"):
                points.append(cmd.points[0])
            elif cmd.op == "Q" and points:
                (x0, y0) = points[-1]
                (cx, cy), (x1, y1) = cmd.points
                for step in range(1, curve_steps + 1):
                    t = step / curve_steps
                    u = 1 - t
                    points.append((
                        u * u * x0 + 2 * u * t * cx + t * t * x1,
                        u * u * y0 + 2 * u * t * cy + t * t * y1,
                    ))
        return points


def _fmt(value: float) -> str:
    """Print integral coordinates without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")
