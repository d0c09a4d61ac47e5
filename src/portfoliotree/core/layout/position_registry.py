from __future__ import annotations

"""
Position Registry.

Stores the bounding boxes reported by the host after each render pass,
stamped with the generation that triggered the render. Lookups against any
other generation return nothing, so connectors are never routed against
outdated coordinates.
"""

import logging
from typing import Dict, Iterable, Optional

from portfoliotree.domain.tree_models import NodePosition

logger = logging.getLogger(__name__)


class PositionRegistry:
    """Generation-scoped mapping from node id to its last measured box."""

    def __init__(self, generation: int = 0) -> None:
        self._generation: int = generation
        self._boxes: Dict[str, NodePosition] = {}

    @property
    def generation(self) -> int:
        return self._generation

    def advance(self, generation: int) -> None:
        """
        Move the registry to a newer generation and drop every stored box.

        Older generations are ignored.
        """
        if generation <= self._generation:
            return
        self._generation = generation
        self._boxes.clear()

    def record_position(self, position: NodePosition, generation: int) -> bool:
        """
        Store a measurement taken for the given generation.

        A measurement newer than the registry moves it forward first; one
        for a superseded generation is discarded.

        Returns:
            bool: True if the measurement was kept.
        """
        if generation < self._generation:
            logger.debug(
                f"Discarding stale measurement of '{position.id}' "
                f"(gen {generation} < {self._generation})"
            )
            return False
        self.advance(generation)
        self._boxes[position.id] = position
        return True

    def record_many(self, positions: Iterable[NodePosition], generation: int) -> int:
        """Store a batch of measurements; returns how many were kept."""
        return sum(1 for p in positions if self.record_position(p, generation))

    def get_position(self, node_id: str, generation: int) -> Optional[NodePosition]:
        if generation != self._generation:
            return None
        return self._boxes.get(node_id)

    def snapshot(self, generation: int) -> Dict[str, NodePosition]:
        """Copy of the boxes for the given generation, empty when stale."""
        if generation != self._generation:
            return {}
        return dict(self._boxes)

    def __len__(self) -> int:
        return len(self._boxes)
