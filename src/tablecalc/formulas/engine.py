"""Formula evaluation engine for section tables.

Supports: =SUM(...), =SUB(...), =MUL(...), =DIV(...) and the aliases ADD,
SUBTRACT, MULTIPLY and DIVIDE. Arguments are numbers, cell refs (A1) or
ranges (A1:B3). Nested calls are rejected.

Problems with the formula itself (length, syntax, nesting, non-finite
result) make the whole cell an error. Problems with a single operand
(bad reference, empty or non-numeric cell, circular reference, another
cell's error) only drop that operand.

Each top-level evaluation caches the operands it resolves and stops with
a `too_complex` error once it has done more than `max_evaluation_steps`
steps of work.
"""

import logging
import math
import re
from typing import NamedTuple, Optional

from ..config import settings
from .errors import (
    EvaluationBudgetExceededError,
    FormulaError,
    FormulaSyntaxError,
    FormulaTooLongError,
    InvalidResultError,
    MaxDepthExceededError,
    NestedFormulaError,
    UnknownFunctionError,
)
from .functions import REDUCERS
from .models import CellAddress, EvaluationResult, FormulaFunction, FormulaLimits, Grid
from .references import expand_range, format_cell_ref, parse_cell_ref, parse_range, range_size
from .values import format_number, format_plain, parse_number

logger = logging.getLogger(__name__)

_FORMULA_RE = re.compile(r"^([A-Za-z]+)\((.*)\)$", re.DOTALL)

# "$1" followed by ",200" is one currency literal, not two arguments.
_CURRENCY_HEAD_RE = re.compile(r"^[+-]?\$[0-9]{1,3}(?:,[0-9]{3})*$")
_THOUSANDS_GROUP_RE = re.compile(r"^[0-9]{3}(?:\.[0-9]+)?$")

Visited = frozenset[CellAddress]


def split_arguments(args: str) -> list[str]:
    """Split an argument list on commas, keeping currency literals whole."""
    tokens: list[str] = []
    for piece in args.split(","):
        if tokens and _THOUSANDS_GROUP_RE.match(piece) and _CURRENCY_HEAD_RE.match(tokens[-1]):
            tokens[-1] = f"{tokens[-1]},{piece}"
        else:
            tokens.append(piece.strip())
    return tokens


class _Trace(NamedTuple):
    """What a sub-evaluation depended on besides the cell texts it read."""

    cyclic: bool = False  # met an address already on the visited path
    cut: bool = False  # met the depth limit
    reach: int = -1  # formula levels evaluated at and below this point, minus one

    def merge(self, other: "_Trace") -> "_Trace":
        return _Trace(
            self.cyclic or other.cyclic,
            self.cut or other.cut,
            max(self.reach, other.reach),
        )


_CachedOperand = tuple[Optional[float], _Trace]


class _EvaluationScope:
    """Operand cache and step budget for one top-level evaluation.

    A cell whose subtree never met the visited path is cached by address
    alone. One that did is cached under the exact visited set it was
    entered with. Subtrees that met the depth limit are never cached, and
    a cached operand is only reused where its subtree still fits under
    ``max_depth``.
    """

    def __init__(self, max_steps: int):
        self.max_steps = max_steps
        self.steps = 0
        self.operands: dict[CellAddress, _CachedOperand] = {}
        self.path_operands: dict[tuple[CellAddress, Visited], _CachedOperand] = {}

    def charge(self):
        self.steps += 1
        if self.steps > self.max_steps:
            raise EvaluationBudgetExceededError(
                f"Evaluation exceeded limit of {self.max_steps} steps"
            )

    def lookup(
        self, address: CellAddress, visited: Visited, depth: int, max_depth: int
    ) -> Optional[_CachedOperand]:
        for cached in (self.operands.get(address), self.path_operands.get((address, visited))):
            if cached is not None and depth + cached[1].reach <= max_depth:
                return cached
        return None

    def store(self, address: CellAddress, visited: Visited, value: Optional[float], trace: _Trace):
        if trace.cut:
            return
        if trace.cyclic:
            self.path_operands[(address, visited)] = (value, trace)
        else:
            self.operands[address] = (value, trace)


class FormulaEngine:
    """Evaluates cell formulas against a grid snapshot.

    The engine holds no state between calls. Each top-level evaluation
    starts from an empty visited set and an empty operand cache.
    """

    def __init__(
        self,
        limits: Optional[FormulaLimits] = None,
        error_marker: Optional[str] = None,
    ):
        self.limits = limits or FormulaLimits.from_settings()
        self.error_marker = error_marker or settings.error_marker

    def evaluate(self, cell_text: str, grid: Grid) -> EvaluationResult:
        """Evaluate one cell's raw text.

        Text that does not start with "=" (after trimming) is returned
        unchanged with ``is_formula=False``.
        """
        scope = _EvaluationScope(self.limits.max_evaluation_steps)
        try:
            result, _ = self._evaluate(cell_text, grid, frozenset(), 0, scope)
        except EvaluationBudgetExceededError as e:
            return self._failed(cell_text.strip(), 0, e)
        return result

    def display_value(self, cell_text: str, grid: Grid) -> str:
        """Evaluate and collapse any error into the error marker."""
        return self.display(self.evaluate(cell_text, grid))

    def display(self, result: EvaluationResult) -> str:
        """Display string for an already evaluated cell."""
        if result.error is not None:
            return self.error_marker
        return result.value

    def _failed(self, formula: str, depth: int, error: FormulaError) -> EvaluationResult:
        logger.debug(f"Formula {formula[:40]!r} failed at depth {depth}: {error.kind.value} ({error})")
        return EvaluationResult(value=self.error_marker, is_formula=True, error=error.kind)

    def _evaluate(
        self,
        cell_text: str,
        grid: Grid,
        visited: Visited,
        depth: int,
        scope: _EvaluationScope,
    ) -> tuple[EvaluationResult, _Trace]:
        trimmed = cell_text.strip()
        if not trimmed.startswith("="):
            return EvaluationResult(value=cell_text, is_formula=False), _Trace()

        scope.charge()
        try:
            function, tokens = self._parse(trimmed, depth)
        except MaxDepthExceededError as e:
            return self._failed(trimmed, depth, e), _Trace(cut=True, reach=0)
        except FormulaError as e:
            return self._failed(trimmed, depth, e), _Trace(reach=0)

        values, trace = self._collect_operands(tokens, grid, visited, depth, scope)
        trace = trace._replace(reach=trace.reach + 1)
        try:
            value = self._reduce(function, values)
        except FormulaError as e:
            return self._failed(trimmed, depth, e), trace
        return EvaluationResult(value=value, is_formula=True), trace

    def _parse(self, formula: str, depth: int) -> tuple[FormulaFunction, list[str]]:
        """Check a formula's shape and split it into function and argument tokens."""
        limits = self.limits
        if depth > limits.max_depth:
            raise MaxDepthExceededError(f"Reference chain deeper than {limits.max_depth}")
        if len(formula) > limits.max_formula_length:
            raise FormulaTooLongError(
                f"Formula length ({len(formula)}) exceeds limit of {limits.max_formula_length}"
            )

        m = _FORMULA_RE.match(formula[1:].strip())
        if not m:
            raise FormulaSyntaxError("Expected FUNCTION(arguments)")
        function = FormulaFunction.from_name(m.group(1))
        if function is None:
            raise FormulaSyntaxError(f"Unsupported function: {m.group(1)}")

        args = m.group(2)
        if "(" in args or ")" in args:
            raise NestedFormulaError("Nested formulas are not supported")

        tokens = split_arguments(args)
        for token in tokens:
            if len(token) > limits.max_argument_length:
                raise FormulaTooLongError(
                    f"Argument length ({len(token)}) exceeds limit of {limits.max_argument_length}"
                )
        return function, tokens

    def _reduce(self, function: FormulaFunction, values: list[float]) -> str:
        if not values:
            return "0"
        # A lone DIV operand is returned as written, not rounded.
        if function is FormulaFunction.DIV and len(values) == 1:
            return format_plain(values[0])

        reducer = REDUCERS.get(function)
        if reducer is None:
            raise UnknownFunctionError(f"No reducer for {function.value}")
        try:
            result = reducer(values)
        except OverflowError as e:
            raise InvalidResultError(str(e)) from e
        if not math.isfinite(result):
            raise InvalidResultError(f"{function.value} produced a non-finite result")
        return format_number(result)

    def _collect_operands(
        self,
        tokens: list[str],
        grid: Grid,
        visited: Visited,
        depth: int,
        scope: _EvaluationScope,
    ) -> tuple[list[float], _Trace]:
        """Resolve argument tokens to numbers, in the order written."""
        values: list[float] = []
        trace = _Trace()
        for token in tokens:
            if ":" in token:
                range_values, range_trace = self._resolve_range(token, grid, visited, depth, scope)
                values.extend(range_values)
                trace = trace.merge(range_trace)
                continue

            address = parse_cell_ref(token, self.limits)
            if address is not None:
                value, cell_trace = self._resolve_cell(address, grid, visited, depth, scope)
                trace = trace.merge(cell_trace)
            else:
                value = parse_number(token)
            if value is not None:
                values.append(value)
        return values, trace

    def _resolve_range(
        self,
        token: str,
        grid: Grid,
        visited: Visited,
        depth: int,
        scope: _EvaluationScope,
    ) -> tuple[list[float], _Trace]:
        corners = parse_range(token, self.limits)
        if corners is None:
            return [], _Trace()
        size = range_size(*corners)
        if size > self.limits.max_range_cells:
            logger.debug(
                f"Skipping range {token}: {size} cells exceeds limit of {self.limits.max_range_cells}"
            )
            return [], _Trace()

        values: list[float] = []
        trace = _Trace()
        for address in expand_range(*corners):
            value, cell_trace = self._resolve_cell(address, grid, visited, depth, scope)
            trace = trace.merge(cell_trace)
            if value is not None:
                values.append(value)
        return values, trace

    def _resolve_cell(
        self,
        address: CellAddress,
        grid: Grid,
        visited: Visited,
        depth: int,
        scope: _EvaluationScope,
    ) -> _CachedOperand:
        """Numeric value of a referenced cell, or None when it contributes nothing."""
        scope.charge()
        if address.row >= len(grid) or address.col >= len(grid[address.row]):
            return None, _Trace()
        if address in visited:
            logger.debug(f"Circular reference to {format_cell_ref(address)} ignored")
            return None, _Trace(cyclic=True)

        cached = scope.lookup(address, visited, depth + 1, self.limits.max_depth)
        if cached is not None:
            return cached

        result, trace = self._evaluate(
            grid[address.row][address.col], grid, visited | {address}, depth + 1, scope
        )
        value = None if result.error is not None else parse_number(result.value)
        scope.store(address, visited, value, trace)
        return value, trace


_engine: Optional[FormulaEngine] = None


def get_engine() -> FormulaEngine:
    """Get the shared engine built from the active settings."""
    global _engine
    if _engine is None:
        _engine = FormulaEngine()
    return _engine


def evaluate(cell_text: str, grid: Grid) -> EvaluationResult:
    """Evaluate a cell's raw text against the grid it belongs to."""
    return get_engine().evaluate(cell_text, grid)


def get_display_value(cell_text: str, grid: Grid) -> str:
    """Text to show for a cell: its value, the computed result, or the error marker."""
    return get_engine().display_value(cell_text, grid)
