"""
Inventory Price Validation

Validates the prices of every item visible on the inventory page in a single pass:
items with missing or malformed prices are collected, and the items sharing the
lowest and highest price (within a small tolerance) are identified so that ties
can be reported before an item is picked by price.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from storefront_harness.core.exceptions import ValidationError
from storefront_harness.inventory.price_parser import (
    Malformed,
    Missing,
    Parsed,
    parse_price,
    prices_equal,
)

logger = logging.getLogger(__name__)

# Ordered (name, raw price text) pairs; raw price is None when the element is absent
ItemSnapshot = Sequence[tuple[str, str | None]]


@dataclass(frozen=True)
class TieFlags:
    """Whether more than one item shares the lowest or highest price."""

    low: bool = False
    high: bool = False


@dataclass(frozen=True)
class ValidationReport:
    """Result of validating one inventory snapshot."""

    missing_items: tuple[str, ...] = ()
    lowest_price_items: tuple[str, ...] = ()
    highest_price_items: tuple[str, ...] = ()
    has_tie: TieFlags = field(default_factory=TieFlags)
    valid_prices: Mapping[str, float] = field(default_factory=dict)
    conflicting_items: tuple[str, ...] = ()

    @property
    def has_missing_prices(self) -> bool:
        return bool(self.missing_items)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for reporting."""
        return {
            "has_missing_prices": self.has_missing_prices,
            "items_with_missing_prices": list(self.missing_items),
            "has_multiple_lowest_price": self.has_tie.low,
            "items_with_lowest_price": list(self.lowest_price_items),
            "has_multiple_highest_price": self.has_tie.high,
            "items_with_highest_price": list(self.highest_price_items),
            "has_conflicting_prices": bool(self.conflicting_items),
            "items_with_conflicting_prices": list(self.conflicting_items),
        }


def find_items_with_lowest_price(items_with_prices: Mapping[str, float]) -> list[str]:
    """Return every item whose price is within tolerance of the minimum, in order."""
    if not items_with_prices:
        return []
    lowest = min(items_with_prices.values())
    return [name for name, price in items_with_prices.items() if prices_equal(price, lowest)]


def find_items_with_highest_price(items_with_prices: Mapping[str, float]) -> list[str]:
    """Return every item whose price is within tolerance of the maximum, in order."""
    if not items_with_prices:
        return []
    highest = max(items_with_prices.values())
    return [name for name, price in items_with_prices.items() if prices_equal(price, highest)]


def validate_inventory_prices(snapshot: ItemSnapshot) -> ValidationReport:
    """
    Validate all item prices in a snapshot.

    Missing and malformed prices are both reported as missing. Lowest and highest
    price groups are computed over the items with valid prices only. Every entry is
    parsed, duplicates included: a bad price on any entry of a name makes the item
    missing, and a duplicate with a different price marks the item as conflicting.

    Args:
        snapshot: Ordered (name, raw price) pairs

    Returns:
        ValidationReport for the snapshot
    """
    valid_prices: dict[str, float] = {}
    missing: list[str] = []
    conflicting: list[str] = []
    seen: set[str] = set()

    for name, raw_price in snapshot:
        duplicate = name in seen
        seen.add(name)
        if duplicate:
            logger.warning(f"Duplicate inventory item '{name}'")

        result = parse_price(raw_price)
        if isinstance(result, Parsed):
            if not duplicate:
                valid_prices[name] = result.value
            elif name in valid_prices and not prices_equal(valid_prices[name], result.value):
                logger.warning(
                    f"Item '{name}' listed with conflicting prices: "
                    f"{valid_prices[name]} and {result.value}"
                )
                if name not in conflicting:
                    conflicting.append(name)
            continue

        if isinstance(result, Missing):
            logger.debug(f"Item '{name}' has no price")
        elif isinstance(result, Malformed):
            logger.debug(f"Item '{name}' has malformed price: {result.raw_text!r}")
        # An item with any unusable price entry has no valid price
        valid_prices.pop(name, None)
        if name not in missing:
            missing.append(name)

    # Only names still holding a valid price can conflict
    conflicting = [name for name in conflicting if name in valid_prices]

    if not valid_prices:
        return ValidationReport(missing_items=tuple(missing))

    lowest = find_items_with_lowest_price(valid_prices)
    highest = find_items_with_highest_price(valid_prices)

    return ValidationReport(
        missing_items=tuple(missing),
        lowest_price_items=tuple(lowest),
        highest_price_items=tuple(highest),
        has_tie=TieFlags(low=len(lowest) > 1, high=len(highest) > 1),
        valid_prices=valid_prices,
        conflicting_items=tuple(conflicting),
    )


def _require_valid(report: ValidationReport) -> None:
    if report.missing_items:
        raise ValidationError(
            f"Items with missing or invalid prices: {', '.join(report.missing_items)}",
            report,
        )
    if not report.valid_prices:
        raise ValidationError("No inventory items with valid prices", report)
    if report.conflicting_items:
        raise ValidationError(
            f"Items listed with conflicting prices: {', '.join(report.conflicting_items)}",
            report,
        )


def select_cheapest(snapshot: ItemSnapshot) -> tuple[str, float]:
    """
    Pick the cheapest item after validating the snapshot.

    On a tie the first item in snapshot order is returned and a warning is logged.

    Raises:
        ValidationError: If any price is missing or malformed, no item has a price,
            or an item is listed twice with different prices
    """
    report = validate_inventory_prices(snapshot)
    _require_valid(report)
    if report.has_tie.low:
        logger.warning(
            f"Multiple items share the lowest price: {', '.join(report.lowest_price_items)}"
        )
    name = report.lowest_price_items[0]
    return name, report.valid_prices[name]


def select_most_expensive(snapshot: ItemSnapshot) -> tuple[str, float]:
    """
    Pick the most expensive item after validating the snapshot.

    On a tie the first item in snapshot order is returned and a warning is logged.

    Raises:
        ValidationError: If any price is missing or malformed, no item has a price,
            or an item is listed twice with different prices
    """
    report = validate_inventory_prices(snapshot)
    _require_valid(report)
    if report.has_tie.high:
        logger.warning(
            f"Multiple items share the highest price: {', '.join(report.highest_price_items)}"
        )
    name = report.highest_price_items[0]
    return name, report.valid_prices[name]
