"""
Inventory price parsing and validation.
"""

from .inventory_validator import (
    ItemSnapshot,
    TieFlags,
    ValidationReport,
    find_items_with_highest_price,
    find_items_with_lowest_price,
    select_cheapest,
    select_most_expensive,
    validate_inventory_prices,
)
from .price_parser import PRICE_EPSILON, Malformed, Missing, Parsed, parse_price, prices_equal

__all__ = [
    "PRICE_EPSILON",
    "ItemSnapshot",
    "Malformed",
    "Missing",
    "Parsed",
    "TieFlags",
    "ValidationReport",
    "find_items_with_highest_price",
    "find_items_with_lowest_price",
    "parse_price",
    "prices_equal",
    "select_cheapest",
    "select_most_expensive",
    "validate_inventory_prices",
]
