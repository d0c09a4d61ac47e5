from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared portfolio documents and forests used across unit tests.
"""

import json
import os
import sys
from typing import Any, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from portfoliotree.core.analysis.tree_loader import parse_forest  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "gui: view logic exercised against mocked widgets")


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def portfolio_data() -> List[Dict[str, Any]]:
    """
    Return a small portfolio document covering every relation type.

    Structure:
    pr-01 Alpha (program)
      pr-02 Beta (program)
        dw02 Delta (product)
      pr-03 Gamma (program)
      dw01 Xray (product)
        dw03 Sub (product)
          pj-02 Zeta (project)
        pj-01 Yankee (project)
          tp-01 Kickoff (topic)
          tp-02 Review (topic)
    pr-04 Omega (program)
    """
    return [
        {
            "id": "pr-01", "name": "Alpha", "type": "program",
            "children": [
                {
                    "id": "pr-02", "name": "Beta", "type": "program",
                    "children": [{"id": "dw02", "name": "Delta", "type": "product"}],
                },
                {"id": "pr-03", "name": "Gamma", "type": "program", "children": []},
                {
                    "id": "dw01", "name": "Xray", "type": "product",
                    "children": [
                        {
                            "id": "dw03", "name": "Sub", "type": "product",
                            "children": [{"id": "pj-02", "name": "Zeta", "type": "project"}],
                        },
                        {
                            "id": "pj-01", "name": "Yankee", "type": "project",
                            "children": [
                                {"id": "tp-01", "name": "Kickoff", "type": "topic"},
                                {"id": "tp-02", "name": "Review", "type": "topic"},
                            ],
                        },
                    ],
                },
            ],
        },
        {"id": "pr-04", "name": "Omega", "type": "program"},
    ]


@pytest.fixture
def forest(portfolio_data):
    return parse_forest(portfolio_data)


@pytest.fixture
def all_expandable() -> frozenset:
    return frozenset({"pr-01", "pr-02", "dw01", "dw03", "pj-01"})


@pytest.fixture
def portfolio_file(tmp_path, portfolio_data) -> str:
    path = tmp_path / "PortfolioData.json"
    path.write_text(json.dumps(portfolio_data), encoding="utf-8")
    return str(path)
