"""
Price parsing for inventory items.
"""

import math
from dataclasses import dataclass
from typing import Union

PRICE_EPSILON = 0.001
CURRENCY_SYMBOL = "$"


@dataclass(frozen=True)
class Parsed:
    """A price that parsed to a number."""

    value: float


@dataclass(frozen=True)
class Missing:
    """No price element, or an empty one."""

    pass


@dataclass(frozen=True)
class Malformed:
    """Price text that is present but not a number."""

    raw_text: str


PriceParseResult = Union[Parsed, Missing, Malformed]


def parse_price(raw_price: str | None) -> PriceParseResult:
    """
    Parse raw price text such as ``"$29.99"``.

    Args:
        raw_price: Text content of the price element, or None if there is none

    Returns:
        Parsed, Missing or Malformed
    """
    if raw_price is None or not raw_price.strip():
        return Missing()

    text = raw_price.strip()
    if text.startswith(CURRENCY_SYMBOL):
        text = text[len(CURRENCY_SYMBOL):]

    try:
        value = float(text)
    except ValueError:
        return Malformed(raw_price)

    # float() accepts "nan" and "inf", which are not prices
    if not math.isfinite(value):
        return Malformed(raw_price)

    return Parsed(value)


def prices_equal(a: float, b: float) -> bool:
    """Compare two prices with a tolerance for float conversion noise."""
    return abs(a - b) < PRICE_EPSILON
