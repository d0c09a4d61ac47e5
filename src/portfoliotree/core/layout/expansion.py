from __future__ import annotations

"""
Expansion State.

Owns the set of expanded node ids of one diagram view together with the
recalculation generation. Every mutating action bumps the generation before
returning, invalidating box measurements taken for the previous layout.
"""

import logging
from typing import FrozenSet, Iterable, Set

from portfoliotree.core.analysis.tree_loader import expandable_ids
from portfoliotree.domain.tree_models import Forest

logger = logging.getLogger(__name__)


class ExpansionState:
    """
    Mutable set of expanded nodes with a monotonic generation counter.

    Args:
        forest: Portfolio forest the ids refer to.
        initial: Ids expanded on start-up. Unknown or childless ids are
                 dropped.
    """

    def __init__(self, forest: Forest, initial: Iterable[str] = ()) -> None:
        self._expandable: FrozenSet[str] = frozenset(expandable_ids(forest))
        self._expanded: Set[str] = set()
        self._generation: int = 0

        for node_id in initial:
            if node_id in self._expandable:
                self._expanded.add(node_id)
            else:
                logger.warning(f"Ignoring initial expansion of non-expandable node '{node_id}'")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def expanded(self) -> FrozenSet[str]:
        return frozenset(self._expanded)

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self._expanded

    def can_toggle(self, node_id: str) -> bool:
        """Whether the node presents a toggle control at all."""
        return node_id in self._expandable

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def toggle(self, node_id: str) -> int:
        """
        Flip the expansion of a node.

        Unknown ids and leaves are a full no-op: neither the expanded set nor
        the generation changes, so existing measurements stay valid.

        Returns:
            int: The current generation after the action.
        """
        if node_id not in self._expandable:
            logger.debug(f"Toggle ignored for non-expandable node '{node_id}'")
            return self._generation
        if node_id in self._expanded:
            self._expanded.discard(node_id)
        else:
            self._expanded.add(node_id)
        return self._bump()

    def expand_all(self) -> int:
        """Expand every node with children, at any depth."""
        self._expanded = set(self._expandable)
        return self._bump()

    def collapse_all(self) -> int:
        self._expanded.clear()
        return self._bump()

    def _bump(self) -> int:
        self._generation += 1
        logger.debug(f"Expansion generation -> {self._generation} ({len(self._expanded)} expanded)")
        return self._generation
