from __future__ import annotations

"""
Connector Router.

Computes the connector overlay of the portfolio diagram from the forest,
the expansion set and the measured node boxes. Same-type children hang off
a shared trunk dropped from their parent; cross-type children are linked
from the parent's right edge into the next column. Output is a pure
function of its inputs and is fully recomputed on every generation.
"""

import logging
from typing import AbstractSet, Callable, List, Mapping, Optional, Union

from portfoliotree.core.layout.position_registry import PositionRegistry
from portfoliotree.domain.constants import (
    BRANCH_ELBOW_OFFSET,
    CORNER_RADIUS,
    CURVE_BIAS,
    DEFAULT_TRUNK_LENGTH,
    TRUNK_LENGTHS,
    TRUNK_LEFT_INSET,
)
from portfoliotree.domain.tree_models import (
    ConnectorKind,
    ConnectorPath,
    Forest,
    NodePosition,
    NodeType,
    PathCommand,
    Point,
    TreeNode,
    partition_children,
)

logger = logging.getLogger(__name__)

PositionSource = Union[PositionRegistry, Mapping[str, NodePosition]]
_Lookup = Callable[[str], Optional[NodePosition]]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def route(
        forest: Forest,
        expanded: AbstractSet[str],
        positions: PositionSource,
        generation: int,
) -> List[ConnectorPath]:
    """
    Compute every connector path of the current diagram state.

    Paths are emitted in forest pre-order. For each expanded parent the
    trunk comes first, then its branches, then its cross-column links, each
    in child order.

    Args:
        forest: Root nodes of the portfolio.
        expanded: Ids of the expanded nodes.
        positions: A PositionRegistry (queried for 'generation') or a plain
                   mapping of id to box, taken as already current.
        generation: Generation the caller is routing for.

    Returns:
        List[ConnectorPath]: Resolved connector paths. Connectors touching a
                             node without a current position are omitted.
    """
    lookup = _make_lookup(positions, generation)
    paths: List[ConnectorPath] = []
    for root in forest:
        _route_node(root, expanded, lookup, paths)
    logger.debug(f"Routed {len(paths)} connectors for generation {generation}")
    return paths

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (TRAVERSAL)
# -----------------------------------------------------------------------------

def _make_lookup(positions: PositionSource, generation: int) -> _Lookup:
    if isinstance(positions, PositionRegistry):
        return lambda node_id: positions.get_position(node_id, generation)
    return positions.get


def _route_node(
        node: TreeNode,
        expanded: AbstractSet[str],
        lookup: _Lookup,
        out: List[ConnectorPath],
) -> None:
    """Emit the outgoing connectors of a node, then descend into its children."""
    if node.id not in expanded or not node.has_children:
        return

    parent_pos = lookup(node.id)
    if parent_pos is None:
        logger.debug(f"No current position for '{node.id}'; skipping its connectors")
    else:
        same_type, cross_type = partition_children(node)
        _route_same_type(node, parent_pos, same_type, lookup, out)
        for child in cross_type:
            child_pos = _child_position(node, child, lookup)
            if child_pos is not None:
                out.append(_cross_connector(node, child, parent_pos, child_pos))

    for child in node.children:
        _route_node(child, expanded, lookup, out)


def _child_position(parent: TreeNode, child: TreeNode, lookup: _Lookup) -> Optional[NodePosition]:
    pos = lookup(child.id)
    if pos is None:
        logger.debug(f"No current position for '{child.id}'; skipping {parent.id} -> {child.id}")
    return pos

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (SAME-TYPE ROUTING)
# -----------------------------------------------------------------------------

def _route_same_type(
        node: TreeNode,
        parent_pos: NodePosition,
        children: List[TreeNode],
        lookup: _Lookup,
        out: List[ConnectorPath],
) -> None:
    """
    Route the children that continue the parent's own column.

    Two or more children share one trunk with a branch each. A single child
    gets one direct connector: the project -> topic curve, or a branch that
    carries its own drop from the parent.
    """
    if not children:
        return

    anchor_x = _trunk_anchor_x(node, parent_pos)
    top_y = parent_pos.bottom
    trunk_y = top_y + TRUNK_LENGTHS.get(node.type, DEFAULT_TRUNK_LENGTH)

    if len(children) == 1:
        child = children[0]
        child_pos = _child_position(node, child, lookup)
        if child_pos is None:
            return
        if node.type == NodeType.PROJECT:
            out.append(_curved_connector(node, child, parent_pos, child_pos))
            return
        # Same shape as trunk + branch, drawn as one path
        drop = (
            PathCommand("M", ((anchor_x, top_y),)),
            PathCommand("L", ((anchor_x, trunk_y),)),
        )
        commands = drop + _branch_commands((anchor_x, trunk_y), child_pos)[1:]
        out.append(ConnectorPath(
            key=f"{node.id}-{child.id}",
            kind=ConnectorKind.BRANCH,
            source_id=node.id,
            target_id=child.id,
            commands=commands,
        ))
        return

    out.append(ConnectorPath(
        key=f"{node.id}-trunk",
        kind=ConnectorKind.TRUNK,
        source_id=node.id,
        target_id=None,
        commands=(
            PathCommand("M", ((anchor_x, top_y),)),
            PathCommand("L", ((anchor_x, trunk_y),)),
        ),
    ))
    for child in children:
        child_pos = _child_position(node, child, lookup)
        if child_pos is None:
            continue
        out.append(ConnectorPath(
            key=f"{node.id}-{child.id}",
            kind=ConnectorKind.BRANCH,
            source_id=node.id,
            target_id=child.id,
            commands=_branch_commands((anchor_x, trunk_y), child_pos),
        ))


def _trunk_anchor_x(node: TreeNode, pos: NodePosition) -> float:
    """Project -> topic trunks drop from the center, the rest from the left."""
    if node.type == NodeType.PROJECT:
        return pos.center_x
    return pos.x + TRUNK_LEFT_INSET


def _branch_commands(start: Point, child_pos: NodePosition) -> tuple:
    """
    Horizontal run from the trunk foot, vertical drop beside the child and
    a rounded turn into the child's left-edge center.
    """
    start_x, start_y = start
    elbow_x = child_pos.x - BRANCH_ELBOW_OFFSET
    end_y = child_pos.center_y
    r = CORNER_RADIUS if end_y >= start_y else -CORNER_RADIUS
    return (
        PathCommand("M", ((start_x, start_y),)),
        PathCommand("L", ((elbow_x, start_y),)),
        PathCommand("L", ((elbow_x, end_y - r),)),
        PathCommand("Q", ((elbow_x, end_y), (elbow_x + CORNER_RADIUS, end_y))),
        PathCommand("L", ((child_pos.x, end_y),)),
    )

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (CROSS-TYPE ROUTING)
# -----------------------------------------------------------------------------

def _cross_connector(
        node: TreeNode,
        child: TreeNode,
        parent_pos: NodePosition,
        child_pos: NodePosition,
) -> ConnectorPath:
    if node.type == NodeType.PROJECT and child.type == NodeType.TOPIC:
        return _curved_connector(node, child, parent_pos, child_pos)
    return _orthogonal_connector(node, child, parent_pos, child_pos)


def _curved_connector(
        node: TreeNode,
        child: TreeNode,
        parent_pos: NodePosition,
        child_pos: NodePosition,
) -> ConnectorPath:
    """Shallow quadratic fan-out from the parent's right edge."""
    start_x, start_y = parent_pos.right, parent_pos.center_y
    end_x, end_y = child_pos.x, child_pos.center_y
    control_x = start_x + (end_x - start_x) * CURVE_BIAS
    return ConnectorPath(
        key=f"{node.id}-{child.id}",
        kind=ConnectorKind.CROSS_CURVED,
        source_id=node.id,
        target_id=child.id,
        commands=(
            PathCommand("M", ((start_x, start_y),)),
            PathCommand("Q", ((control_x, start_y), (end_x, end_y))),
        ),
    )


def _orthogonal_connector(
        node: TreeNode,
        child: TreeNode,
        parent_pos: NodePosition,
        child_pos: NodePosition,
) -> ConnectorPath:
    """
    Right-edge center -> column midpoint -> rounded vertical transition ->
    child left-edge center. The rounding flips when the child sits above.
    """
    start_x, start_y = parent_pos.right, parent_pos.center_y
    end_x, end_y = child_pos.x, child_pos.center_y
    mid_x = start_x + (end_x - start_x) / 2

    commands = [PathCommand("M", ((start_x, start_y),))]
    if end_y == start_y:
        commands.append(PathCommand("L", ((end_x, end_y),)))
    else:
        r = CORNER_RADIUS if end_y > start_y else -CORNER_RADIUS
        commands.extend([
            PathCommand("L", ((mid_x - CORNER_RADIUS, start_y),)),
            PathCommand("Q", ((mid_x, start_y), (mid_x, start_y + r))),
            PathCommand("L", ((mid_x, end_y - r),)),
            PathCommand("Q", ((mid_x, end_y), (mid_x + CORNER_RADIUS, end_y))),
            PathCommand("L", ((end_x, end_y),)),
        ])

    return ConnectorPath(
        key=f"{node.id}-{child.id}",
        kind=ConnectorKind.CROSS_DIRECT,
        source_id=node.id,
        target_id=child.id,
        commands=tuple(commands),
    )
