from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(defaults, persisted settings, CLI overrides), forest loading, expansion
actions and output rendering. Box geometry comes from the headless grid
measurement provider.
"""

import json
import sys
from typing import Any, Dict, List, Optional

from portfoliotree.core.analysis.column_projector import render_columns
from portfoliotree.core.analysis.tree_loader import TreeValidationError, load_forest
from portfoliotree.core.layout.session import DiagramSession
from portfoliotree.core.validator import validate_config
from portfoliotree.domain.config import get_default_config, load_config, save_config
from portfoliotree.domain.tree_models import ColumnLayout, ConnectorPath, Row
from portfoliotree.infra.logging import LoggingConfig, configure_logging, get_logger
from portfoliotree.infra.measurement import GridMeasurementProvider
from portfoliotree.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Exit code (0 success, 1 unexpected failure, 2 invalid input).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Configuration hierarchy
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = dict(base_conf)
    raw_conf.update(cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    # 2. Logging bootstrap
    configure_logging(LoggingConfig.from_settings(clean_conf))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.save_config:
        save_config(clean_conf)
        logger.info("Resolved configuration saved")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 3. Forest loading (fail fast on invalid structure)
    data_path = clean_conf["data_path"]
    try:
        forest = load_forest(data_path)
    except (OSError, TreeValidationError) as e:
        logger.error(f"Cannot load portfolio data: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    # 4. Expansion actions and render cycle
    try:
        session = DiagramSession(forest, clean_conf["initial_expanded"])
        if args.collapse_all:
            session.collapse_all()
        if args.expand_all:
            session.expand_all()
        for node_id in cli_args.toggle_ids(args):
            session.toggle(node_id)

        layout = session.layout()
        session.ingest(GridMeasurementProvider().measure(layout), session.generation)
        connectors = session.connectors()
    except Exception as e:
        logger.critical(f"Diagram computation failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 5. Output rendering
    if args.json_output:
        payload = build_payload(session.generation, layout, connectors)
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        for line in render_columns(layout, session.expansion.expanded):
            print(line)
        print(f"\nConnectors: {len(connectors)} (generation {session.generation})")

    return 0

# -----------------------------------------------------------------------------
# JSON VIEW
# -----------------------------------------------------------------------------

def build_payload(
        generation: int,
        layout: ColumnLayout,
        connectors: List[ConnectorPath],
) -> Dict[str, Any]:
    """Serialize a render cycle for the overlay renderer."""
    return {
        "generation": generation,
        "columns": {
            "programs": [_row_dict(r) for r in layout.programs],
            "products": [_row_dict(r) for r in layout.products],
            "projects": [
                dict(_row_dict(r), topics=[t.id for t in r.topics])
                for r in layout.projects
            ],
        },
        "connectors": [
            {
                "key": c.key,
                "type": c.kind.value,
                "source": c.source_id,
                "target": c.target_id,
                "d": c.to_svg(),
            }
            for c in connectors
        ],
    }


def _row_dict(row: Row) -> Dict[str, Any]:
    return {
        "id": row.node.id,
        "name": row.node.name,
        "type": row.node.type.value,
        "level": row.level,
        "parent_id": row.parent_id,
    }

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
