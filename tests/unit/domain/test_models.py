from __future__ import annotations

"""
Unit tests for Domain Models.

Verifies:
1. Same-type / cross-type partition of children.
2. Display prefixes and box anchors.
3. Connector path serialization and flattening.
"""

import dataclasses

import pytest

from portfoliotree.domain.tree_models import (
    ColumnLayout,
    ConnectorKind,
    ConnectorPath,
    NodePosition,
    NodeType,
    PathCommand,
    ProjectRow,
    Row,
    TreeNode,
    node_prefix,
    partition_children,
)


def _node(node_id: str, node_type: NodeType, *children: TreeNode) -> TreeNode:
    return TreeNode(id=node_id, name=node_id.upper(), type=node_type, children=tuple(children))


def test_partition_children_by_column_continuation() -> None:
    """Program children split into program (same column) and the rest."""
    parent = _node(
        "pr-01", NodeType.PROGRAM,
        _node("pr-02", NodeType.PROGRAM),
        _node("dw01", NodeType.PRODUCT),
        _node("pr-03", NodeType.PROGRAM),
    )
    same, cross = partition_children(parent)

    assert [c.id for c in same] == ["pr-02", "pr-03"]
    assert [c.id for c in cross] == ["dw01"]


def test_partition_project_topics_are_same_type() -> None:
    project = _node("pj-01", NodeType.PROJECT, _node("tp-01", NodeType.TOPIC))
    same, cross = partition_children(project)

    assert [c.id for c in same] == ["tp-01"]
    assert cross == []


def test_leaf_node_is_not_expandable() -> None:
    leaf = _node("pr-09", NodeType.PROGRAM)
    assert leaf.has_children is False
    assert leaf.is_expandable is False


@pytest.mark.parametrize("node_id, node_type, expected", [
    ("pr-01", NodeType.PROGRAM, "Pr-01"),
    ("pj-07", NodeType.PROJECT, "Pr-07"),
    ("dw01", NodeType.PRODUCT, "DW01"),
    ("tp-01", NodeType.TOPIC, ""),
])
def test_node_prefix(node_id: str, node_type: NodeType, expected: str) -> None:
    assert node_prefix(_node(node_id, node_type)) == expected


def test_node_position_anchors() -> None:
    pos = NodePosition(id="a", x=10, y=20, width=100, height=40)
    assert pos.right == 110
    assert pos.bottom == 60
    assert pos.center_x == 60
    assert pos.center_y == 40


def test_models_are_frozen() -> None:
    pos = NodePosition(id="a", x=0, y=0, width=1, height=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        pos.x = 5  # type: ignore[misc]


def test_visible_ids_include_topics_in_order() -> None:
    topic = _node("tp-01", NodeType.TOPIC)
    project = _node("pj-01", NodeType.PROJECT, topic)
    layout = ColumnLayout(
        programs=(Row(_node("pr-01", NodeType.PROGRAM)),),
        products=(Row(_node("dw01", NodeType.PRODUCT), 0, "pr-01"),),
        projects=(ProjectRow(project, 0, "dw01", topics=(topic,)),),
    )
    assert layout.visible_ids() == ["pr-01", "dw01", "pj-01", "tp-01"]


def test_connector_to_svg_formats_coordinates() -> None:
    path = ConnectorPath(
        key="a-b",
        kind=ConnectorKind.CROSS_CURVED,
        source_id="a",
        target_id="b",
        commands=(
            PathCommand("M", ((100.0, 20.0),)),
            PathCommand("Q", ((240.5, 20.0), (300.0, 120.25))),
        ),
    )
    assert path.to_svg() == "M 100 20 Q 240.5 20 300 120.25"
    assert path.endpoints() == ("a", "b")


def test_trunk_endpoints_only_contain_parent() -> None:
    trunk = ConnectorPath(key="a-trunk", kind=ConnectorKind.TRUNK, source_id="a", target_id=None)
    assert trunk.endpoints() == ("a",)


def test_flatten_samples_quadratic_segments() -> None:
    path = ConnectorPath(
        key="a-b",
        kind=ConnectorKind.CROSS_CURVED,
        source_id="a",
        target_id="b",
        commands=(
            PathCommand("M", ((0.0, 0.0),)),
            PathCommand("Q", ((10.0, 0.0), (10.0, 10.0))),
            PathCommand("L", ((20.0, 10.0),)),
        ),
    )
    points = path.flatten(curve_steps=4)

    assert points[0] == (0.0, 0.0)
    assert points[4] == (10.0, 10.0)
    assert points[-1] == (20.0, 10.0)
    assert len(points) == 6
    # Midpoint of the quadratic: 0.25*P0 + 0.5*C + 0.25*P1
    assert points[2] == pytest.approx((7.5, 2.5))
