from __future__ import annotations

"""
Diagram Session.

Binds the forest, the expansion state and the position registry of one
rendered tree view, and enforces the per-generation ordering:
toggle -> column projection -> host measurement -> connector routing.
"""

import logging
from typing import Iterable, List

from portfoliotree.core.analysis.column_projector import project_columns
from portfoliotree.core.layout.connector_router import route
from portfoliotree.core.layout.expansion import ExpansionState
from portfoliotree.core.layout.position_registry import PositionRegistry
from portfoliotree.domain.tree_models import (
    ColumnLayout,
    ConnectorPath,
    Forest,
    NodePosition,
)

logger = logging.getLogger(__name__)


class DiagramSession:
    """
    State of a single portfolio diagram view.

    Args:
        forest: Validated portfolio forest (read-only).
        initial_expanded: Ids expanded when the view opens.
    """

    def __init__(self, forest: Forest, initial_expanded: Iterable[str] = ()) -> None:
        self.forest = forest
        self.expansion = ExpansionState(forest, initial_expanded)
        self.registry = PositionRegistry(self.expansion.generation)

    @property
    def generation(self) -> int:
        return self.expansion.generation

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def toggle(self, node_id: str) -> int:
        return self._after_action(self.expansion.toggle(node_id))

    def expand_all(self) -> int:
        return self._after_action(self.expansion.expand_all())

    def collapse_all(self) -> int:
        return self._after_action(self.expansion.collapse_all())

    def _after_action(self, generation: int) -> int:
        self.registry.advance(generation)
        return generation

    # -------------------------------------------------------------------------
    # Render cycle
    # -------------------------------------------------------------------------

    def layout(self) -> ColumnLayout:
        """Visible rows for the current expansion state."""
        return project_columns(self.forest, self.expansion.expanded)

    def ingest(self, measurements: Iterable[NodePosition], generation: int) -> int:
        """
        Accept post-paint measurements from the host.

        Results for a superseded generation are discarded as a whole.

        Returns:
            int: Number of measurements kept.
        """
        if generation != self.generation:
            logger.debug(
                f"Dropping measurement batch for generation {generation} "
                f"(current {self.generation})"
            )
            return 0
        return self.registry.record_many(measurements, generation)

    def connectors(self) -> List[ConnectorPath]:
        """Route the overlay against positions of the current generation."""
        return route(self.forest, self.expansion.expanded, self.registry, self.generation)
