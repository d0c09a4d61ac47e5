from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the portfolio diagram tool and
translates parsed namespaces into configuration overrides and expansion
actions.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the portfoliotree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="portfoliotree",
        description="Project a portfolio tree into diagram columns and route its connectors.",
    )

    # --- Data Source ---
    p.add_argument(
        "-i", "--input",
        dest="data_path",
        default=None,
        help="Portfolio JSON document (list of program nodes).",
    )

    # --- Expansion Actions ---
    p.add_argument(
        "--expand",
        dest="initial_expanded",
        default=None,
        help="Comma-separated ids expanded on start-up (replaces the configured set).",
    )
    p.add_argument(
        "--collapse-all",
        action="store_true",
        help="Collapse every node before applying toggles.",
    )
    p.add_argument(
        "--expand-all",
        action="store_true",
        help="Expand every node with children before applying toggles.",
    )
    p.add_argument(
        "--toggle",
        dest="toggles",
        default=None,
        help="Comma-separated ids toggled in order, after the bulk actions.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the resolved configuration and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the resolved configuration (data file, start-up expansion, log level).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit columns and routed connectors as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.data_path:
        overrides["data_path"] = args.data_path
    if args.initial_expanded is not None:
        overrides["initial_expanded"] = _split_csv(args.initial_expanded)
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides


def toggle_ids(args: argparse.Namespace) -> List[str]:
    return _split_csv(args.toggles) or []

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
