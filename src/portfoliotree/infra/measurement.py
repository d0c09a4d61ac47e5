from __future__ import annotations

"""
Headless Layout Measurement.

Reference implementation of the host measurement provider. Places the
projected rows on a fixed column grid instead of reading a rendered
toolkit, so the routing pipeline can run from the CLI and in tests.
"""

from dataclasses import dataclass
from typing import List, Sequence

from portfoliotree.domain import constants as const
from portfoliotree.domain.tree_models import ColumnLayout, NodePosition, Row


@dataclass(frozen=True)
class GridMeasurementProvider:
    """
    Column grid box placement.

    Attributes:
        column_width: Horizontal space reserved for each column.
        column_gap: Gap between two columns.
        indent: Left offset per row level.
        box_width: Width of every box.
        box_height: Height of every box.
        row_margin: Vertical space after each row.
        topic_indent: Left offset of topics relative to their column.
        topic_gap: Vertical space between stacked topics.
    """
    column_width: float = const.GRID_COLUMN_WIDTH
    column_gap: float = const.GRID_COLUMN_GAP
    indent: float = const.GRID_INDENT
    box_width: float = const.GRID_BOX_WIDTH
    box_height: float = const.GRID_BOX_HEIGHT
    row_margin: float = const.GRID_ROW_MARGIN
    topic_indent: float = const.GRID_TOPIC_INDENT
    topic_gap: float = const.GRID_TOPIC_GAP

    def column_x(self, index: int) -> float:
        return index * (self.column_width + self.column_gap)

    def measure(self, layout: ColumnLayout) -> List[NodePosition]:
        """
        Compute a box for every visible node of the layout.

        Args:
            layout: Projected columns.

        Returns:
            List[NodePosition]: Boxes in column order.
        """
        boxes: List[NodePosition] = []
        boxes.extend(self._stack(layout.programs, self.column_x(0)))
        boxes.extend(self._stack(layout.products, self.column_x(1)))

        col_x = self.column_x(2)
        y = 0.0
        for row in layout.projects:
            boxes.append(self._box(row.node.id, col_x, y))
            y += self.box_height + self.row_margin
            for topic in row.topics:
                boxes.append(self._box(topic.id, col_x + self.topic_indent, y))
                y += self.box_height + self.topic_gap
        return boxes

    def _stack(self, rows: Sequence[Row], col_x: float) -> List[NodePosition]:
        boxes: List[NodePosition] = []
        y = 0.0
        for row in rows:
            boxes.append(self._box(row.node.id, col_x + row.level * self.indent, y))
            y += self.box_height + self.row_margin
        return boxes

    def _box(self, node_id: str, x: float, y: float) -> NodePosition:
        return NodePosition(id=node_id, x=x, y=y, width=self.box_width, height=self.box_height)
