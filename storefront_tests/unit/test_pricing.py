from decimal import Decimal

import pytest

from storefront_tests.ui_testing.framework.pricing import (
    MAX_SORT_INVERSIONS,
    all_within,
    count_order_violations,
    is_sorted_ascending,
    parse_price,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$140.00", Decimal("140.00")),
        ("  $1,234.50 ", Decimal("1234.50")),
        ("Regular Price: $95.00", Decimal("95.00")),
        ("€0.99", Decimal("0.99")),
    ],
)
def test_parse_price(text, expected):
    assert parse_price(text) == expected


@pytest.mark.parametrize("text", ["", "Out of stock", None])
def test_parse_price_rejects_text_without_amount(text):
    with pytest.raises(ValueError):
        parse_price(text)


def test_one_descent_is_tolerated():
    assert MAX_SORT_INVERSIONS == 1
    assert is_sorted_ascending([10, 20, 15, 30])
    assert is_sorted_ascending([Decimal("10"), Decimal("20"), Decimal("30")])


def test_two_descents_are_rejected():
    prices = [10, 20, 5, 30, 1]

    assert count_order_violations(prices) == 2
    assert not is_sorted_ascending(prices)


def test_strict_ordering():
    assert not is_sorted_ascending([10, 20, 15, 30], tolerance=0)
    with pytest.raises(ValueError):
        is_sorted_ascending([1, 2], tolerance=-1)


def test_range_check_is_inclusive():
    low, high = Decimal("0.00"), Decimal("99.99")

    assert all_within([Decimal("0.00"), Decimal("99.99"), Decimal("50")], low, high)
    assert not all_within([Decimal("100.00")], low, high)
    assert all_within([], low, high)


def test_decimal_sums_are_exact():
    subtotals = [parse_price("$24.68"), parse_price("$56.78")]
    assert sum(subtotals, Decimal("0")) == parse_price("$81.46")
