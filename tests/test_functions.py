"""Tests for formula function names and reducers."""

import pytest

from tablecalc.formulas import FormulaFunction
from tablecalc.formulas.functions import REDUCERS, reduce_div, reduce_mul, reduce_sub, reduce_sum


class TestFormulaFunction:
    """Test function name resolution."""

    @pytest.mark.parametrize(
        "name,function",
        [
            ("SUM", FormulaFunction.SUM),
            ("add", FormulaFunction.SUM),
            ("Sub", FormulaFunction.SUB),
            ("SUBTRACT", FormulaFunction.SUB),
            ("mul", FormulaFunction.MUL),
            ("Multiply", FormulaFunction.MUL),
            ("DIV", FormulaFunction.DIV),
            ("divide", FormulaFunction.DIV),
        ],
    )
    def test_aliases(self, name, function):
        assert FormulaFunction.from_name(name) is function

    @pytest.mark.parametrize("name", ["FOO", "AVERAGE", "SUMS", ""])
    def test_unknown_names(self, name):
        assert FormulaFunction.from_name(name) is None

    def test_every_function_has_a_reducer(self):
        assert set(REDUCERS) == set(FormulaFunction)


class TestReducers:
    """Test the arithmetic behind each function."""

    def test_sum(self):
        assert reduce_sum([1, 2, 3.5]) == 6.5

    def test_sub_folds_left(self):
        assert reduce_sub([10, 3, 2]) == 5
        assert reduce_sub([4]) == 4

    def test_mul(self):
        assert reduce_mul([2, 3, 4]) == 24

    def test_div_folds_left(self):
        assert reduce_div([100, 5, 2]) == 10
        assert reduce_div([7]) == 7

    def test_div_skips_zero_divisors(self):
        assert reduce_div([10, 0, 2]) == reduce_div([10, 2]) == 5
        assert reduce_div([10, 0]) == 10

    def test_div_zero_dividend(self):
        assert reduce_div([0, 5]) == 0

    def test_overflow_is_infinite(self):
        assert reduce_mul([1e308, 10]) == float("inf")
