"""Data models for table formula evaluation."""

from enum import Enum
from typing import NamedTuple, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings

# A grid is an ordered sequence of rows of raw cell strings; rows may be ragged.
Grid = Sequence[Sequence[str]]


class FormulaFunction(str, Enum):
    """Arithmetic functions a formula may call."""

    SUM = "SUM"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"

    @classmethod
    def from_name(cls, name: str) -> Optional["FormulaFunction"]:
        """Resolve a function name or alias, case-insensitively."""
        return FUNCTION_ALIASES.get(name.upper())


FUNCTION_ALIASES: dict[str, FormulaFunction] = {
    "SUM": FormulaFunction.SUM,
    "ADD": FormulaFunction.SUM,
    "SUB": FormulaFunction.SUB,
    "SUBTRACT": FormulaFunction.SUB,
    "MUL": FormulaFunction.MUL,
    "MULTIPLY": FormulaFunction.MUL,
    "DIV": FormulaFunction.DIV,
    "DIVIDE": FormulaFunction.DIV,
}


class ErrorKind(str, Enum):
    """Why a formula could not be evaluated."""

    TOO_LONG = "too_long"
    INVALID_SYNTAX = "invalid_syntax"
    NESTED_FORMULA = "nested_formula"
    MAX_DEPTH = "max_depth"
    INVALID_RESULT = "invalid_result"
    UNKNOWN_FUNCTION = "unknown_function"
    TOO_COMPLEX = "too_complex"


class CellAddress(NamedTuple):
    """Zero-based position of a cell in a grid."""

    row: int
    col: int


class FormulaLimits(BaseModel):
    """Static bounds on the work a single evaluation may do."""

    max_formula_length: int = Field(default=500, ge=1)
    max_argument_length: int = Field(default=50, ge=1)
    max_reference_length: int = Field(default=10, ge=2)
    max_row: int = Field(default=10000, ge=1)
    max_column_letters: int = Field(default=3, ge=1, le=3)
    max_range_cells: int = Field(default=1000, ge=1)
    max_depth: int = Field(default=50, ge=0)
    max_evaluation_steps: int = Field(default=500_000, ge=1)

    @classmethod
    def from_settings(cls) -> "FormulaLimits":
        """Build limits from the active application settings."""
        return cls(
            max_formula_length=settings.formula_max_length,
            max_argument_length=settings.formula_max_argument_length,
            max_reference_length=settings.formula_max_reference_length,
            max_row=settings.formula_max_row,
            max_range_cells=settings.formula_max_range_cells,
            max_depth=settings.formula_max_depth,
            max_evaluation_steps=settings.formula_max_evaluation_steps,
        )


class EvaluationResult(BaseModel):
    """Outcome of evaluating one cell's raw text."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    value: str
    is_formula: bool = Field(alias="isFormula")
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None
