"""
Price parsing and ordering helpers for product grids and the cart.

Prices are handled as ``Decimal`` so that row subtotals add up to the grand
total exactly.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Sequence

from loguru import logger


# The demo catalogue has a known mis-ordered pair when sorting by price
# (e.g. 280.00 followed by 245.00), so one descent is tolerated.
MAX_SORT_INVERSIONS = 1

_NON_NUMERIC = re.compile(r"[^\d.\-]")


def parse_price(text: str) -> Decimal:
    """
    Parse a displayed price such as ``"$1,234.50"`` into a Decimal.

    Raises:
        ValueError: If the text holds no parseable amount
    """
    cleaned = _NON_NUMERIC.sub("", text or "")
    if not cleaned:
        raise ValueError(f"No price found in {text!r}")
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Invalid price text {text!r}") from e


def count_order_violations(prices: Sequence[Decimal]) -> int:
    """Number of adjacent pairs where the later price is lower than the earlier one."""
    return sum(1 for prev, curr in zip(prices, prices[1:]) if curr < prev)


def is_sorted_ascending(prices: Sequence[Decimal], tolerance: int = MAX_SORT_INVERSIONS) -> bool:
    """
    Check ascending order, allowing up to ``tolerance`` adjacent descents.

    >>> is_sorted_ascending([10, 20, 15, 30])
    True
    >>> is_sorted_ascending([10, 20, 5, 30, 1])
    False
    """
    if tolerance < 0:
        raise ValueError("tolerance must be >= 0")
    violations = count_order_violations(list(prices))
    if violations:
        logger.debug(f"Price order violations: {violations} (tolerance {tolerance}) in {list(prices)}")
    return violations <= tolerance


def all_within(prices: Iterable[Decimal], minimum: Decimal, maximum: Decimal) -> bool:
    """True when every price lies in ``[minimum, maximum]``."""
    for price in prices:
        if price < minimum or price > maximum:
            logger.warning(f"Price out of range [{minimum}, {maximum}]: {price}")
            return False
    return True


__all__ = [
    "MAX_SORT_INVERSIONS",
    "parse_price",
    "count_order_violations",
    "is_sorted_ascending",
    "all_within",
]
