from __future__ import annotations

"""
Portfolio Forest Loader.

Builds the immutable TreeNode forest from the JSON document supplied by the
data source. Rejects structurally invalid input at load time so that the
projection and routing stages can rely on a finite, single-parent forest.
"""

import json
import logging
from typing import Any, Iterator, List, Set

from portfoliotree.domain.tree_models import Forest, NodeType, TreeNode

logger = logging.getLogger(__name__)


class TreeValidationError(ValueError):
    """Raised when the portfolio document violates the forest invariants."""

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_forest(path: str) -> Forest:
    """
    Read and validate a portfolio forest from a JSON file.

    Args:
        path: Location of the JSON document (a list of root nodes).

    Returns:
        Forest: Tuple of validated root nodes.

    Raises:
        TreeValidationError: If the document is malformed or breaks the
                             single-parent / acyclic invariants.
        OSError: If the file cannot be read.
    """
    logger.info(f"Loading portfolio data from: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TreeValidationError(f"Invalid JSON in '{path}': {e}") from e

    forest = parse_forest(data)
    logger.debug(f"Loaded {sum(1 for _ in iter_nodes(forest))} nodes from {path}")
    return forest


def parse_forest(data: Any) -> Forest:
    """
    Convert decoded JSON data into a validated forest.

    Args:
        data: List of node dictionaries with 'id', 'name', 'type' and an
              optional 'children' list.

    Returns:
        Forest: Tuple of root nodes.
    """
    if not isinstance(data, list):
        raise TreeValidationError(
            f"Portfolio data must be a list of nodes, received {type(data).__name__}."
        )

    seen: Set[str] = set()
    return tuple(_parse_node(item, seen, path="$") for item in data)


def iter_nodes(forest: Forest) -> Iterator[TreeNode]:
    """Yield every node of the forest in depth-first pre-order."""
    stack: List[TreeNode] = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def expandable_ids(forest: Forest) -> List[str]:
    """
    Collect the ids of every node that has at least one child.

    Walks the whole forest, not only the visible part, so expand-all reveals
    nodes at any depth in a single step.
    """
    return [node.id for node in iter_nodes(forest) if node.has_children]

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _parse_node(item: Any, seen: Set[str], path: str) -> TreeNode:
    """Recursively validate and build a single node."""
    if not isinstance(item, dict):
        raise TreeValidationError(f"{path}: node must be an object.")

    node_id = item.get("id")
    name = item.get("name")
    if not isinstance(node_id, str) or not node_id:
        raise TreeValidationError(f"{path}: missing or invalid 'id'.")
    if not isinstance(name, str):
        raise TreeValidationError(f"{path}: node '{node_id}' has no valid 'name'.")

    # A repeated id means a shared child or a cycle in the source data
    if node_id in seen:
        raise TreeValidationError(f"{path}: duplicate node id '{node_id}'.")
    seen.add(node_id)

    try:
        node_type = NodeType(item.get("type"))
    except ValueError:
        raise TreeValidationError(
            f"{path}: node '{node_id}' has unknown type {item.get('type')!r}."
        ) from None

    raw_children = item.get("children") or []
    if not isinstance(raw_children, list):
        raise TreeValidationError(f"{path}: 'children' of '{node_id}' must be a list.")
    if node_type == NodeType.TOPIC and raw_children:
        raise TreeValidationError(f"{path}: topic '{node_id}' cannot have children.")

    children = tuple(
        _parse_node(child, seen, path=f"{path}.{node_id}")
        for child in raw_children
    )
    return TreeNode(id=node_id, name=name, type=node_type, children=children)
