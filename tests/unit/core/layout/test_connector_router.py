from __future__ import annotations

"""
Unit tests for the Connector Router.

Verifies trunk sharing, cross-column routing geometry, omission of
connectors with missing or stale positions, and determinism.
"""

from typing import Dict

import pytest

from portfoliotree.core.analysis.column_projector import project_columns
from portfoliotree.core.analysis.tree_loader import parse_forest
from portfoliotree.core.layout.connector_router import route
from portfoliotree.core.layout.position_registry import PositionRegistry
from portfoliotree.domain.tree_models import ConnectorKind, NodePosition
from portfoliotree.infra.measurement import GridMeasurementProvider


def _grid_positions(forest, expanded) -> Dict[str, NodePosition]:
    layout = project_columns(forest, expanded)
    return {p.id: p for p in GridMeasurementProvider().measure(layout)}


def _box(node_id: str, x: float, y: float, width: float = 100, height: float = 40) -> NodePosition:
    return NodePosition(id=node_id, x=x, y=y, width=width, height=height)


# -----------------------------------------------------------------------------
# End-to-end scenarios
# -----------------------------------------------------------------------------

def test_chain_program_product_project_topic() -> None:
    """Four nodes, three connectors, no trunk."""
    forest = parse_forest([{
        "id": "pr-a", "name": "Alpha", "type": "program",
        "children": [{
            "id": "dw-x", "name": "X", "type": "product",
            "children": [{
                "id": "pj-y", "name": "Y", "type": "project",
                "children": [{"id": "tp-z", "name": "Z", "type": "topic"}],
            }],
        }],
    }])
    expanded = frozenset({"pr-a", "dw-x", "pj-y"})
    registry = PositionRegistry(generation=1)
    registry.record_many(_grid_positions(forest, expanded).values(), 1)

    paths = route(forest, expanded, registry, 1)

    assert [(p.key, p.kind) for p in paths] == [
        ("pr-a-dw-x", ConnectorKind.CROSS_DIRECT),
        ("dw-x-pj-y", ConnectorKind.CROSS_DIRECT),
        ("pj-y-tp-z", ConnectorKind.CROSS_CURVED),
    ]
    # Project right edge (920 + 280) to topic left edge, control at 70% of the span
    assert paths[2].to_svg() == "M 1200 28 Q 1228 28 1240 116"


def test_program_with_two_program_children_shares_trunk() -> None:
    forest = parse_forest([{
        "id": "A", "name": "A", "type": "program",
        "children": [
            {"id": "B", "name": "B", "type": "program"},
            {"id": "C", "name": "C", "type": "program"},
        ],
    }])
    expanded = frozenset({"A"})

    paths = route(forest, expanded, _grid_positions(forest, expanded), 0)

    assert [(p.key, p.kind) for p in paths] == [
        ("A-trunk", ConnectorKind.TRUNK),
        ("A-B", ConnectorKind.BRANCH),
        ("A-C", ConnectorKind.BRANCH),
    ]
    # Left-aligned trunk, 20 px long for programs
    assert paths[0].to_svg() == "M 20 56 L 20 76"
    assert paths[1].to_svg() == "M 20 76 L 20 76 L 20 111 Q 20 116 25 116 L 40 116"
    assert paths[2].to_svg() == "M 20 76 L 20 76 L 20 199 Q 20 204 25 204 L 40 204"


# -----------------------------------------------------------------------------
# Same-type routing
# -----------------------------------------------------------------------------

def test_trunk_sharing_for_k_children() -> None:
    children = [{"id": f"dw-{i}", "name": str(i), "type": "product"} for i in range(4)]
    forest = parse_forest([{
        "id": "pr", "name": "P", "type": "program",
        "children": [{"id": "dw", "name": "D", "type": "product", "children": children}],
    }])
    expanded = frozenset({"pr", "dw"})

    paths = route(forest, expanded, _grid_positions(forest, expanded), 0)
    from_dw = [p for p in paths if p.source_id == "dw"]

    assert [p.kind for p in from_dw].count(ConnectorKind.TRUNK) == 1
    assert [p.kind for p in from_dw].count(ConnectorKind.BRANCH) == 4
    # Every branch starts at the trunk foot (product trunks are 18 px)
    trunk_foot = from_dw[0].commands[-1].points[0]
    assert trunk_foot == (460 + 20, 56 + 18)
    assert all(p.commands[0].points[0] == trunk_foot for p in from_dw[1:])


def test_single_same_type_child_gets_one_branch() -> None:
    forest = parse_forest([{
        "id": "A", "name": "A", "type": "program",
        "children": [{"id": "B", "name": "B", "type": "program"}],
    }])
    expanded = frozenset({"A"})

    paths = route(forest, expanded, _grid_positions(forest, expanded), 0)

    assert len(paths) == 1
    assert paths[0].kind == ConnectorKind.BRANCH
    assert paths[0].to_svg() == "M 20 56 L 20 76 L 20 76 L 20 111 Q 20 116 25 116 L 40 116"


def test_project_topic_trunk_anchors_at_center() -> None:
    forest = parse_forest([{
        "id": "pj", "name": "P", "type": "project",
        "children": [
            {"id": "t1", "name": "1", "type": "topic"},
            {"id": "t2", "name": "2", "type": "topic"},
        ],
    }])
    positions = {
        "pj": _box("pj", 0, 0),
        "t1": _box("t1", 320, 60),
        "t2": _box("t2", 320, 110),
    }

    paths = route(forest, {"pj"}, positions, 0)

    assert paths[0].kind == ConnectorKind.TRUNK
    assert paths[0].to_svg() == "M 50 40 L 50 55"
    assert paths[1].to_svg() == "M 50 55 L 300 55 L 300 75 Q 300 80 305 80 L 320 80"


def test_branch_rounding_flips_for_child_above_trunk() -> None:
    forest = parse_forest([{
        "id": "A", "name": "A", "type": "program",
        "children": [
            {"id": "B", "name": "B", "type": "program"},
            {"id": "C", "name": "C", "type": "program"},
        ],
    }])
    positions = {
        "A": _box("A", 0, 100),
        "B": _box("B", 40, 0),
        "C": _box("C", 40, 200),
    }

    paths = route(forest, {"A"}, positions, 0)

    # Trunk foot at y=160; B's center at y=20 lies above it
    assert paths[1].to_svg() == "M 20 160 L 20 160 L 20 25 Q 20 20 25 20 L 40 20"


# -----------------------------------------------------------------------------
# Cross-type routing
# -----------------------------------------------------------------------------

@pytest.fixture
def program_product_forest():
    return parse_forest([{
        "id": "pr", "name": "P", "type": "program",
        "children": [{"id": "dw", "name": "D", "type": "product"}],
    }])


def test_orthogonal_path_child_below(program_product_forest) -> None:
    positions = {"pr": _box("pr", 0, 0), "dw": _box("dw", 200, 100)}

    (path,) = route(program_product_forest, {"pr"}, positions, 0)

    assert path.kind == ConnectorKind.CROSS_DIRECT
    assert path.to_svg() == (
        "M 100 20 L 145 20 Q 150 20 150 25 L 150 115 Q 150 120 155 120 L 200 120"
    )


def test_orthogonal_path_child_above(program_product_forest) -> None:
    positions = {"pr": _box("pr", 0, 0), "dw": _box("dw", 200, -100)}

    (path,) = route(program_product_forest, {"pr"}, positions, 0)

    assert path.to_svg() == (
        "M 100 20 L 145 20 Q 150 20 150 15 L 150 -75 Q 150 -80 155 -80 L 200 -80"
    )
    # Always terminates flush against the child's left edge
    assert path.commands[-1].points[0] == (200, -80)


def test_orthogonal_path_same_height_is_straight(program_product_forest) -> None:
    positions = {"pr": _box("pr", 0, 0), "dw": _box("dw", 200, 0)}

    (path,) = route(program_product_forest, {"pr"}, positions, 0)

    assert path.to_svg() == "M 100 20 L 200 20"


# -----------------------------------------------------------------------------
# Omissions, staleness and determinism
# -----------------------------------------------------------------------------

def test_full_portfolio_route_order(all_expandable, forest) -> None:
    paths = route(forest, all_expandable, _grid_positions(forest, all_expandable), 0)

    assert [p.key for p in paths] == [
        "pr-01-trunk", "pr-01-pr-02", "pr-01-pr-03", "pr-01-dw01",
        "pr-02-dw02",
        "dw01-dw03", "dw01-pj-01",
        "dw03-pj-02",
        "pj-01-trunk", "pj-01-tp-01", "pj-01-tp-02",
    ]


def test_missing_position_omits_only_touching_paths(all_expandable, forest) -> None:
    positions = _grid_positions(forest, all_expandable)
    full = route(forest, all_expandable, positions, 0)

    for node_id in ("dw01", "pr-03", "tp-02", "pr-01"):
        reduced = {k: v for k, v in positions.items() if k != node_id}
        expected = [p for p in full if node_id not in p.endpoints()]
        assert route(forest, all_expandable, reduced, 0) == expected


def test_stale_registry_yields_no_paths(all_expandable, forest) -> None:
    registry = PositionRegistry(generation=1)
    registry.record_many(_grid_positions(forest, all_expandable).values(), 1)
    registry.advance(2)

    assert route(forest, all_expandable, registry, 2) == []
    assert route(forest, all_expandable, registry, 1) == []


def test_route_is_idempotent(all_expandable, forest) -> None:
    registry = PositionRegistry(generation=5)
    registry.record_many(_grid_positions(forest, all_expandable).values(), 5)

    first = route(forest, all_expandable, registry, 5)
    second = route(forest, all_expandable, registry, 5)
    assert first == second
    assert [p.to_svg() for p in first] == [p.to_svg() for p in second]


def test_no_expansion_or_empty_forest_routes_nothing(forest) -> None:
    assert route(forest, frozenset(), _grid_positions(forest, frozenset()), 0) == []
    assert route((), frozenset(), {}, 0) == []
