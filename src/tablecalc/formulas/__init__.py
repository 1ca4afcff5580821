"""Cell-formula evaluation for section tables."""

from .models import (
    CellAddress,
    ErrorKind,
    EvaluationResult,
    FormulaFunction,
    FormulaLimits,
    Grid,
)
from .errors import FormulaError
from .engine import FormulaEngine, evaluate, get_display_value, get_engine
from .references import (
    column_to_index,
    format_cell_ref,
    index_to_column,
    parse_cell_ref,
    parse_range,
)
from .values import format_number, format_plain, parse_number

__all__ = [
    "CellAddress",
    "ErrorKind",
    "EvaluationResult",
    "FormulaFunction",
    "FormulaLimits",
    "Grid",
    "FormulaError",
    "FormulaEngine",
    "evaluate",
    "get_display_value",
    "get_engine",
    "column_to_index",
    "format_cell_ref",
    "index_to_column",
    "parse_cell_ref",
    "parse_range",
    "format_number",
    "format_plain",
    "parse_number",
]
