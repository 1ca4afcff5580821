"""Formula error types.

These never escape the public evaluation functions: the engine converts
them into an ``EvaluationResult`` carrying the matching ``ErrorKind``.
"""

from typing import Optional

from .models import ErrorKind


class FormulaError(Exception):
    """Base for all formula errors. `kind` is the machine-readable reason."""

    kind: ErrorKind = ErrorKind.INVALID_SYNTAX

    def __init__(self, message: str = "", kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class FormulaTooLongError(FormulaError):
    kind = ErrorKind.TOO_LONG


class FormulaSyntaxError(FormulaError):
    kind = ErrorKind.INVALID_SYNTAX


class NestedFormulaError(FormulaError):
    kind = ErrorKind.NESTED_FORMULA


class MaxDepthExceededError(FormulaError):
    kind = ErrorKind.MAX_DEPTH


class InvalidResultError(FormulaError):
    kind = ErrorKind.INVALID_RESULT


class UnknownFunctionError(FormulaError):
    kind = ErrorKind.UNKNOWN_FUNCTION


class EvaluationBudgetExceededError(FormulaError):
    """The whole top-level evaluation did more work than allowed.

    Unlike the other errors this one is not absorbed by a referencing
    formula; it ends the top-level evaluation.
    """

    kind = ErrorKind.TOO_COMPLEX
