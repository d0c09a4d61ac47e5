from __future__ import annotations

"""
Column Projector.

Derives, from the portfolio forest and the set of expanded node ids, which
nodes are visible in each of the three diagram columns (Programs, Products,
Projects with their Topics) and at what indentation level.
"""

import logging
from typing import AbstractSet, Dict, List, Optional, Sequence, Set, Tuple

from portfoliotree.domain.tree_models import (
    ColumnLayout,
    Forest,
    NodeType,
    ProjectRow,
    Row,
    TreeNode,
    node_prefix,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def project_columns(forest: Forest, expanded: AbstractSet[str]) -> ColumnLayout:
    """
    Project the forest into the visible rows of each column.

    Args:
        forest: Root nodes of the portfolio.
        expanded: Ids of the nodes whose children are shown.

    Returns:
        ColumnLayout: Ordered rows for the three columns.
    """
    programs: List[Row] = []
    for root in forest:
        _collect_programs(root, expanded, programs, level=0, parent_id=None)

    products = _ProductCollector()
    projects = _ProjectCollector(expanded)
    for root in forest:
        _walk_expanded(root, expanded, products, projects)

    layout = ColumnLayout(
        programs=tuple(programs),
        products=tuple(products.rows),
        projects=tuple(projects.rows),
    )
    logger.debug(
        f"Projected columns: {len(layout.programs)} programs, "
        f"{len(layout.products)} products, {len(layout.projects)} projects"
    )
    return layout


def render_columns(layout: ColumnLayout, expanded: AbstractSet[str]) -> List[str]:
    """
    Render a text preview of the projected columns.

    Uses the standard ASCII connectors (├──, └──). Indentation follows the
    row level; topics hang beneath their project. Expandable nodes carry a
    '[+]' or '[-]' marker matching their toggle state.

    Args:
        layout: Projected columns.
        expanded: Current expansion set, used for the toggle markers.

    Returns:
        List[str]: Preview lines.
    """
    lines: List[str] = []
    sections = (
        ("Programs", list(layout.programs)),
        ("Products", list(layout.products)),
        ("Projects", list(layout.projects)),
    )
    for title, rows in sections:
        lines.append(title)
        # open_levels[k]: the current ancestor at level k has siblings below it
        open_levels: List[bool] = []
        for i, row in enumerate(rows):
            is_last = _is_last_sibling(rows, i)
            connector = "└── " if is_last else "├── "
            indent = "".join(
                "│   " if k < len(open_levels) and open_levels[k] else "    "
                for k in range(row.level)
            )
            del open_levels[row.level:]
            open_levels.extend([False] * (row.level - len(open_levels)))
            open_levels.append(not is_last)
            lines.append(f"{indent}{connector}{_label(row.node, expanded)}")

            if isinstance(row, ProjectRow) and row.topics:
                child_prefix = indent + ("    " if is_last else "│   ")
                for j, topic in enumerate(row.topics):
                    topic_connector = "└── " if j == len(row.topics) - 1 else "├── "
                    lines.append(f"{child_prefix}{topic_connector}{_label(topic, expanded)}")
    return lines

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (COLLECTION)
# -----------------------------------------------------------------------------

def _collect_programs(
        node: TreeNode,
        expanded: AbstractSet[str],
        out: List[Row],
        level: int,
        parent_id: Optional[str],
) -> None:
    """Depth-first traversal of programs; only program children nest here."""
    if node.type != NodeType.PROGRAM:
        return

    out.append(Row(node=node, level=level, parent_id=parent_id))
    if node.id not in expanded:
        return
    for child in node.children:
        if child.type == NodeType.PROGRAM:
            _collect_programs(child, expanded, out, level + 1, node.id)


def _walk_expanded(
        node: TreeNode,
        expanded: AbstractSet[str],
        products: "_ProductCollector",
        projects: "_ProjectCollector",
        product_level: int = -1,
) -> None:
    """
    Visit every reachable expanded node and feed its children to the collectors.

    'product_level' is the level of the node itself when it is a product,
    -1 otherwise.
    """
    if node.id not in expanded:
        return

    for child in node.children:
        child_level = -1
        if child.type == NodeType.PRODUCT:
            child_level = product_level + 1 if node.type == NodeType.PRODUCT else 0
            products.add(child, child_level, node.id)
        elif child.type == NodeType.PROJECT:
            projects.add(child, node.id)
        _walk_expanded(child, expanded, products, projects, child_level)


class _ProductCollector:
    """Ordered, id de-duplicated accumulator for the products column."""

    def __init__(self) -> None:
        self.rows: List[Row] = []
        self._index: Dict[str, int] = {}

    def add(self, node: TreeNode, level: int, parent_id: str) -> None:
        pos = self._index.get(node.id)
        if pos is None:
            self._index[node.id] = len(self.rows)
            self.rows.append(Row(node=node, level=level, parent_id=parent_id))
            return
        # Reached twice: keep the first slot at the shallowest level
        if level < self.rows[pos].level:
            self.rows[pos] = Row(node=node, level=level, parent_id=parent_id)


class _ProjectCollector:
    """Flat accumulator for the projects column and their topic groups."""

    def __init__(self, expanded: AbstractSet[str]) -> None:
        self.expanded = expanded
        self.rows: List[ProjectRow] = []
        self._seen: Set[str] = set()

    def add(self, node: TreeNode, parent_id: str) -> None:
        if node.id in self._seen:
            return
        self._seen.add(node.id)

        topics: Tuple[TreeNode, ...] = ()
        if node.id in self.expanded:
            topics = tuple(c for c in node.children if c.type == NodeType.TOPIC)
        self.rows.append(ProjectRow(node=node, level=0, parent_id=parent_id, topics=topics))

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (RENDERING)
# -----------------------------------------------------------------------------

def _is_last_sibling(rows: Sequence[Row], index: int) -> bool:
    """True when no later row shares this row's level before the parent level closes."""
    level = rows[index].level
    for row in rows[index + 1:]:
        if row.level < level:
            return True
        if row.level == level:
            return False
    return True


def _label(node: TreeNode, expanded: AbstractSet[str]) -> str:
    prefix = node_prefix(node)
    text = f"{prefix} {node.name}" if prefix else node.name
    if not node.is_expandable:
        return text
    marker = "[-]" if node.id in expanded else "[+]"
    return f"{marker} {text}"
