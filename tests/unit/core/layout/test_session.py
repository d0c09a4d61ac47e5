from __future__ import annotations

"""
Unit tests for the Diagram Session.

Verifies the toggle -> layout -> measurement -> routing cycle and that
measurement batches for superseded generations are dropped.
"""

from portfoliotree.core.layout.connector_router import route
from portfoliotree.core.layout.session import DiagramSession
from portfoliotree.infra.measurement import GridMeasurementProvider


def _render_pass(session: DiagramSession):
    """Simulate the host: render the layout and report settled boxes."""
    generation = session.generation
    boxes = GridMeasurementProvider().measure(session.layout())
    return boxes, generation


def test_full_cycle_routes_current_generation(forest) -> None:
    session = DiagramSession(forest, ["pr-01"])
    boxes, generation = _render_pass(session)

    assert session.ingest(boxes, generation) == len(boxes)
    paths = session.connectors()

    expected = route(forest, session.expansion.expanded, {b.id: b for b in boxes}, generation)
    assert paths == expected
    assert [p.key for p in paths] == ["pr-01-trunk", "pr-01-pr-02", "pr-01-pr-03", "pr-01-dw01"]


def test_toggle_invalidates_previous_measurements(forest) -> None:
    session = DiagramSession(forest, ["pr-01"])
    boxes, generation = _render_pass(session)
    session.ingest(boxes, generation)

    assert session.toggle("dw01") == generation + 1
    assert session.connectors() == []


def test_superseded_batch_is_discarded(forest) -> None:
    session = DiagramSession(forest)
    stale_boxes, stale_generation = _render_pass(session)

    # Rapid toggles: two new generations before the first measurement lands
    session.toggle("pr-01")
    session.toggle("dw01")
    assert session.ingest(stale_boxes, stale_generation) == 0

    boxes, generation = _render_pass(session)
    assert session.ingest(boxes, generation) == len(boxes)
    keys = [p.key for p in session.connectors()]
    assert "dw01-pj-01" in keys


def test_noop_toggle_keeps_measurements(forest) -> None:
    session = DiagramSession(forest, ["pr-01"])
    boxes, generation = _render_pass(session)
    session.ingest(boxes, generation)
    before = session.connectors()

    assert session.toggle("pr-03") == generation
    assert session.connectors() == before


def test_expand_and_collapse_all(all_expandable, forest) -> None:
    session = DiagramSession(forest)

    session.expand_all()
    assert session.expansion.expanded == all_expandable
    assert "tp-01" in session.layout().visible_ids()

    session.collapse_all()
    assert session.layout().visible_ids() == ["pr-01", "pr-04"]
    assert session.generation == 2
