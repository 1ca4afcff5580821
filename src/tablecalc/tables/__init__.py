"""Section table models."""

from .models import CellError, TableData

__all__ = [
    "CellError",
    "TableData",
]
