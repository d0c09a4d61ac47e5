from __future__ import annotations

"""
GUI Host for the Portfolio Diagram.

Places every visible node as its own CustomTkinter box on a canvas, at the
grid slot computed by GridMeasurementProvider. The canvas background stays
free between the boxes, so the connector lines drawn there remain visible.
After each render pass the settled boxes are measured and fed to the
DiagramSession stamped with the triggering generation, then the routed
connectors are redrawn.
"""

import logging
import sys
from typing import Any, Callable, Dict, Iterator, List, Mapping

import customtkinter as ctk

from portfoliotree.core.analysis.tree_loader import TreeValidationError, iter_nodes, load_forest
from portfoliotree.core.layout.session import DiagramSession
from portfoliotree.core.validator import validate_config
from portfoliotree.domain import config as cfg
from portfoliotree.domain import constants as const
from portfoliotree.domain.tree_models import (
    ColumnLayout,
    NodePosition,
    ProjectRow,
    TreeNode,
    node_prefix,
)
from portfoliotree.infra.logging import LoggingConfig, configure_logging
from portfoliotree.infra.measurement import GridMeasurementProvider

logger = logging.getLogger(__name__)

CONNECTOR_TAG = "connector"
BOX_TAG = "box"
CONNECTOR_COLOR = "#6b7280"


# -----------------------------------------------------------------------------
# NODE BOX WIDGET
# -----------------------------------------------------------------------------

class NodeBox(ctk.CTkFrame):
    """Single diagram box: optional +/- toggle, display id and name."""

    def __init__(
            self,
            master: Any,
            node: TreeNode,
            expanded: bool,
            can_toggle: bool,
            on_toggle: Callable[[str], None],
            **kwargs: Any
    ):
        super().__init__(master, border_width=1, **kwargs)
        self.node = node

        if can_toggle:
            self.btn_toggle = ctk.CTkButton(
                self,
                text="-" if expanded else "+",
                width=24,
                height=24,
                command=lambda: on_toggle(node.id),
            )
            self.btn_toggle.pack(side="left", padx=(8, 4), pady=8)
        else:
            ctk.CTkLabel(self, text="", width=24).pack(side="left", padx=(8, 4), pady=8)

        prefix = node_prefix(node)
        text = f"{prefix}\n{node.name}" if prefix else node.name
        ctk.CTkLabel(self, text=text, justify="left", anchor="w").pack(
            side="left", padx=(4, 12), pady=8
        )


# -----------------------------------------------------------------------------
# DIAGRAM VIEW
# -----------------------------------------------------------------------------

class PortfolioView(ctk.CTkFrame):
    """
    Three-column diagram with a connector overlay.

    Each user action bumps the session generation and re-renders. Measurement
    is scheduled after the toolkit has settled the new layout, and results
    for a superseded generation are dropped by the session.
    """

    def __init__(self, master: Any, session: DiagramSession, **kwargs: Any):
        super().__init__(master, **kwargs)
        self.session = session
        self.grid_provider = GridMeasurementProvider()
        self.boxes: Dict[str, NodeBox] = {}

        toolbar = ctk.CTkFrame(self, fg_color="transparent")
        toolbar.pack(fill="x", padx=10, pady=(10, 0))
        ctk.CTkButton(toolbar, text="Expand All", width=100, command=self.on_expand_all).pack(
            side="right", padx=4
        )
        ctk.CTkButton(toolbar, text="Collapse All", width=100, command=self.on_collapse_all).pack(
            side="right", padx=4
        )

        self.canvas = ctk.CTkCanvas(self, highlightthickness=0, background="white")
        self.canvas.pack(fill="both", expand=True, padx=10, pady=10)

        self.render()

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def on_toggle(self, node_id: str) -> None:
        self.session.toggle(node_id)
        self.render()

    def on_expand_all(self) -> None:
        self.session.expand_all()
        self.render()

    def on_collapse_all(self) -> None:
        self.session.collapse_all()
        self.render()

    # -------------------------------------------------------------------------
    # Render cycle
    # -------------------------------------------------------------------------

    def render(self) -> None:
        """Rebuild the boxes for the current layout and schedule measurement."""
        layout = self.session.layout()
        generation = self.session.generation

        self.canvas.delete(CONNECTOR_TAG)
        self.canvas.delete(BOX_TAG)
        for box in self.boxes.values():
            box.destroy()
        self.boxes.clear()

        nodes = {node.id: node for node in visible_nodes(layout)}
        expansion = self.session.expansion
        for slot in self.grid_provider.measure(layout):
            node = nodes[slot.id]
            box = NodeBox(
                self.canvas,
                node,
                expanded=expansion.is_expanded(node.id),
                can_toggle=expansion.can_toggle(node.id),
                on_toggle=self.on_toggle,
            )
            self.canvas.create_window(
                slot.x, slot.y,
                window=box,
                anchor="nw",
                width=int(slot.width),
                height=int(slot.height),
                tags=BOX_TAG,
            )
            self.boxes[node.id] = box

        self.after_idle(lambda: self._measure_and_route(generation))

    def _measure_and_route(self, generation: int) -> None:
        """Post-paint phase: read settled geometry, then draw the overlay."""
        self.update_idletasks()
        positions = measure_boxes(self.canvas, self.boxes)
        if not self.session.ingest(positions, generation):
            return

        self.canvas.delete(CONNECTOR_TAG)
        for path in self.session.connectors():
            points = path.flatten()
            if len(points) < 2:
                continue
            self.canvas.create_line(
                *[coord for point in points for coord in point],
                fill=CONNECTOR_COLOR,
                arrow="none" if path.target_id is None else "last",
                tags=CONNECTOR_TAG,
            )

        region = self.canvas.bbox("all")
        if region:
            self.canvas.configure(scrollregion=region)


# -----------------------------------------------------------------------------
# GEOMETRY HELPERS
# -----------------------------------------------------------------------------

def visible_nodes(layout: ColumnLayout) -> Iterator[TreeNode]:
    """Every node with a box in the layout, topics included."""
    for row in (*layout.programs, *layout.products, *layout.projects):
        yield row.node
        if isinstance(row, ProjectRow):
            yield from row.topics


def measure_boxes(canvas: Any, boxes: Mapping[str, Any]) -> List[NodePosition]:
    """
    Read the settled box geometry in canvas coordinates.

    Boxes are children of the canvas, so winfo_x/winfo_y are window offsets
    that canvasx/canvasy translate into the coordinate space of the lines.
    """
    return [
        NodePosition(
            id=node_id,
            x=float(canvas.canvasx(box.winfo_x())),
            y=float(canvas.canvasy(box.winfo_y())),
            width=float(box.winfo_width()),
            height=float(box.winfo_height()),
        )
        for node_id, box in boxes.items()
        if box.winfo_exists()
    ]


def persist_expansion(config: Dict[str, Any], session: DiagramSession) -> Dict[str, Any]:
    """Store the current expansion as the start-up set, in forest order."""
    expanded = session.expansion.expanded
    updated = dict(config)
    updated["initial_expanded"] = [n.id for n in iter_nodes(session.forest) if n.id in expanded]
    cfg.save_config(updated)
    return updated


# -----------------------------------------------------------------------------
# MAIN APPLICATION LOOP
# -----------------------------------------------------------------------------

def main() -> None:
    """Load settings and data, then launch the diagram window."""
    config, warnings = validate_config(cfg.load_config())
    configure_logging(LoggingConfig.from_settings(config))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    data_path = sys.argv[1] if len(sys.argv) > 1 else config["data_path"]
    try:
        forest = load_forest(data_path)
    except (OSError, TreeValidationError) as e:
        logger.error(f"Cannot load portfolio data: {e}")
        sys.exit(2)

    app = ctk.CTk()
    app.title(f"{const.APP_NAME} v{const.CURRENT_CONFIG_VERSION}")
    app.geometry("1400x800")

    session = DiagramSession(forest, config["initial_expanded"])
    PortfolioView(app, session).pack(fill="both", expand=True)

    def on_close() -> None:
        persist_expansion(config, session)
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)

    logger.info(f"GUI Lifecycle: showing {len(forest)} root nodes from {data_path}")
    app.mainloop()


if __name__ == "__main__":
    main()
