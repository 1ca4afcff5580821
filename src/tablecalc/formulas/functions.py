"""Arithmetic reducers behind each formula function."""

from typing import Callable, Sequence

from .models import FormulaFunction

Reducer = Callable[[Sequence[float]], float]


def reduce_sum(values: Sequence[float]) -> float:
    return sum(values, 0.0)


def reduce_sub(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    result = values[0]
    for value in values[1:]:
        result -= value
    return result


def reduce_mul(values: Sequence[float]) -> float:
    result = 1.0
    for value in values:
        result *= value
    return result


def reduce_div(values: Sequence[float]) -> float:
    """Left-fold division. A zero divisor leaves the running value unchanged."""
    if not values:
        return 0.0
    result = values[0]
    for value in values[1:]:
        if value == 0:
            continue
        result /= value
    return result


REDUCERS: dict[FormulaFunction, Reducer] = {
    FormulaFunction.SUM: reduce_sum,
    FormulaFunction.SUB: reduce_sub,
    FormulaFunction.MUL: reduce_mul,
    FormulaFunction.DIV: reduce_div,
}
