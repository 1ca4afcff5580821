"""API routes for tablecalc."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..formulas import EvaluationResult, get_engine
from ..tables import CellError, TableData

logger = logging.getLogger(__name__)

router = APIRouter()


class EvaluateRequest(BaseModel):
    """Request to evaluate one cell against its table."""

    cell_text: str
    grid: list[list[str]] = Field(default_factory=list)


class DisplayResponse(BaseModel):
    """Display string for a single cell."""

    value: str


class RenderedTable(BaseModel):
    """A table flattened to display strings."""

    header: Optional[str] = None
    columns: list[str]
    rows: list[list[str]]
    errors: list[CellError] = Field(default_factory=list)


def _check_grid_size(grid: list[list[str]]):
    """Reject grids larger than the configured cell limit."""
    from ..config import settings

    total = sum(len(row) for row in grid)
    if total > settings.max_grid_cells:
        logger.warning(f"Rejected grid of {total} cells (limit {settings.max_grid_cells})")
        raise HTTPException(
            status_code=413,
            detail=f"Grid has {total} cells, exceeding limit of {settings.max_grid_cells}",
        )


# Formula endpoints


@router.post("/evaluate", response_model=EvaluationResult)
def evaluate_cell(request: EvaluateRequest):
    """Evaluate a cell's raw text and return the structured result."""
    _check_grid_size(request.grid)
    return get_engine().evaluate(request.cell_text, request.grid)


@router.post("/display", response_model=DisplayResponse)
def display_cell(request: EvaluateRequest):
    """Return the string a table shows for a cell."""
    _check_grid_size(request.grid)
    return DisplayResponse(value=get_engine().display_value(request.cell_text, request.grid))


@router.post("/tables/render", response_model=RenderedTable)
def render_table(table: TableData):
    """Flatten a section table for preview or export."""
    _check_grid_size(table.rows)
    rows, errors = table.render(get_engine())
    rendered = RenderedTable(
        header=table.header,
        columns=table.column_labels(),
        rows=rows,
        errors=errors,
    )
    logger.info(
        f"Rendered table with {len(rendered.rows)} rows, {len(rendered.errors)} formula errors"
    )
    return rendered


@router.get("/health")
def health_check():
    """Health check endpoint with the active formula limits."""
    from ..config import settings

    limits = get_engine().limits
    config = {
        "max_formula_length": limits.max_formula_length,
        "max_argument_length": limits.max_argument_length,
        "max_range_cells": limits.max_range_cells,
        "max_depth": limits.max_depth,
        "max_evaluation_steps": limits.max_evaluation_steps,
        "max_grid_cells": settings.max_grid_cells,
        "error_marker": get_engine().error_marker,
    }

    return {"status": "ok", "service": "tablecalc", "config": config}
