"""Numeric parsing and formatting of cell values."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

# Plain decimal notation: optional sign, digits with optional fraction, optional exponent.
# ASCII digits only; float() would also accept other Unicode digits.
_NUMBER_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")

# Characters stripped from currency-formatted text before parsing ("$1,200").
_CURRENCY_CHARS = str.maketrans("", "", "$,")

_TWO_PLACES = Decimal("0.01")

# Integers at or above this magnitude print in exponent form ("1e+21").
_EXPONENT_THRESHOLD = 1e21


def parse_number(text: str) -> Optional[float]:
    """Parse a cell's text as a finite number, or None.

    "$" and "," are stripped first, so "$1,200.50" reads as 1200.5.
    """
    cleaned = text.strip().translate(_CURRENCY_CHARS)
    if not _NUMBER_RE.match(cleaned):
        return None
    value = float(cleaned)
    if not math.isfinite(value):
        return None
    return value


def format_plain(value: float) -> str:
    """Shortest text that reads back as the same number ("2.567", "7", "1e+300")."""
    if value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        return str(int(value))
    return repr(value)


def format_number(value: float) -> str:
    """Render a result: integers without decimals, anything else with two."""
    if value.is_integer():
        return format_plain(value)
    return str(Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
