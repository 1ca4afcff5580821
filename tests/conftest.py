"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path

import pytest

from tablecalc.formulas import FormulaEngine, FormulaLimits


@pytest.fixture
def engine() -> FormulaEngine:
    """Engine with the default limits, independent of the environment."""
    return FormulaEngine(FormulaLimits(), error_marker="#ERR")


@pytest.fixture
def revenue_grid() -> list[list[str]]:
    """A small quarterly table with a header row."""
    return [
        ["Header", "Q1", "Q2"],
        ["Revenue", "100", "200"],
        ["Costs", "$1,200", "50.5"],
        ["Notes", "n/a", ""],
    ]


@pytest.fixture
def table_file(tmp_path: Path, revenue_grid) -> Path:
    """Write a table JSON file for CLI tests."""
    path = tmp_path / "table.json"
    rows = [row + [f"=SUM(B{i + 1}:C{i + 1})"] for i, row in enumerate(revenue_grid)]
    path.write_text(json.dumps({"header": "Quarterly", "rows": rows}))
    return path
