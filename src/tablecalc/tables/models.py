"""Data models for section tables."""

from typing import Optional

from pydantic import BaseModel, Field

from ..formulas import (
    CellAddress,
    ErrorKind,
    EvaluationResult,
    FormulaEngine,
    format_cell_ref,
    get_engine,
    index_to_column,
)


class CellError(BaseModel):
    """A table cell whose formula could not be evaluated."""

    cell: str  # A1 notation
    formula: str
    error: ErrorKind


class TableData(BaseModel):
    """A table embedded in a document section.

    Rows hold raw cell text as typed by the user; formulas are evaluated
    against the table's own rows whenever a display value is needed.
    """

    header: Optional[str] = None
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    @property
    def cell_count(self) -> int:
        return sum(len(row) for row in self.rows)

    def column_labels(self) -> list[str]:
        """Column letters (A, B, ... AA) for the widest row."""
        return [index_to_column(i) for i in range(self.column_count)]

    def evaluate_cells(self, engine: Optional[FormulaEngine] = None) -> list[list[EvaluationResult]]:
        """Evaluate every cell, keeping the table's shape."""
        engine = engine or get_engine()
        return [[engine.evaluate(cell, self.rows) for cell in row] for row in self.rows]

    def display_rows(self, engine: Optional[FormulaEngine] = None) -> list[list[str]]:
        """Flatten the table to the strings shown in previews and exports."""
        return self.render(engine)[0]

    def formula_errors(self, engine: Optional[FormulaEngine] = None) -> list[CellError]:
        """List cells whose formulas fail, in reading order."""
        return self.render(engine)[1]

    def render(
        self, engine: Optional[FormulaEngine] = None
    ) -> tuple[list[list[str]], list[CellError]]:
        """Display rows and formula errors from a single evaluation of every cell."""
        engine = engine or get_engine()
        rows: list[list[str]] = []
        errors: list[CellError] = []
        for r, results in enumerate(self.evaluate_cells(engine)):
            rows.append([engine.display(result) for result in results])
            for c, result in enumerate(results):
                if result.error is not None:
                    errors.append(
                        CellError(
                            cell=format_cell_ref(CellAddress(r, c)),
                            formula=self.rows[r][c],
                            error=result.error,
                        )
                    )
        return rows, errors
