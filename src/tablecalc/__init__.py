"""tablecalc - formula evaluation for document-template tables."""

from .formulas import EvaluationResult, evaluate, get_display_value

__version__ = "0.1.0"

__all__ = ["EvaluationResult", "evaluate", "get_display_value", "__version__"]
