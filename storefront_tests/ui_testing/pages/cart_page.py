"""
================================================================================
Shopping Cart Page Object (Async / Playwright)
================================================================================

Cart rows, quantity updates, totals and the empty-cart state.

All amounts are Decimals so that the row subtotals can be compared with the
grand total exactly.

================================================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import List

import allure
from loguru import logger

from storefront_tests.ui_testing.framework.errors import (
    BusinessAssertionError,
    ElementNotFoundError,
    WaitTimeoutError,
)
from storefront_tests.ui_testing.framework.locators import chain, css
from storefront_tests.ui_testing.framework.page_base import BasePage
from storefront_tests.ui_testing.framework.pricing import parse_price
from storefront_tests.ui_testing.framework.waits import (
    any_of,
    count_less_than,
    presence_of,
    presence_of_all,
    text_differs,
    url_contains,
    visibility_of,
)


EMPTY_CART_TITLE_TEXT = "shopping cart is empty"
EMPTY_CART_MESSAGE_TEXT = "you have no items in your shopping cart"


class CartPage(BasePage):
    """Shopping cart page object (async)."""

    URL_PATH = "/checkout/cart/"

    CART_ROWS = chain(
        "Cart rows",
        css("table#shopping-cart-table tbody tr"),
        css("#shopping-cart-table tbody tr"),
    )
    ROW_QTY_INPUT = chain("Quantity input", css("td.product-cart-actions input.qty"), css("input.qty"))
    ROW_UPDATE_BUTTON = chain(
        "Row update button",
        css("td.product-cart-actions button.btn-update"),
        css("button.btn-update"),
    )
    ROW_SUBTOTALS = chain(
        "Row subtotals",
        css("table#shopping-cart-table tbody tr td.product-cart-total span.price"),
        css("#shopping-cart-table td.product-cart-total .price"),
    )
    FIRST_ROW_SUBTOTAL = chain(
        "First row subtotal",
        css("table#shopping-cart-table tbody tr:first-child td.product-cart-total span.price"),
        css("#shopping-cart-table tbody tr:first-child .product-cart-total .price"),
    )
    FIRST_ROW_REMOVE_LINK = chain(
        "First row remove link",
        css("table#shopping-cart-table tbody tr:first-child td.product-cart-remove a.btn-remove"),
        css("table#shopping-cart-table tbody tr:first-child a.btn-remove"),
    )
    GRAND_TOTAL = chain(
        "Grand total",
        css("#shopping-cart-totals-table tfoot tr.last span.price"),
        css("table#shopping-cart-totals-table span.price"),
    )
    EMPTY_CART_TITLE = chain("Cart title", css("div.page-title h1"), css("h1"))
    EMPTY_CART_MESSAGE = chain(
        "Empty cart message",
        css("div.cart-empty p"),
        css("div.cart-empty"),
    )

    @allure.step("Open shopping cart")
    async def open(self) -> "CartPage":
        await self.navigate()
        await self.wait_for_cart_to_settle()
        return self

    async def wait_for_cart_to_load(self) -> None:
        """Cart URL with at least one product row."""
        await self.wait_until(url_contains("/checkout/cart"))
        await self.wait_until(presence_of(self.CART_ROWS))

    async def wait_for_cart_to_settle(self) -> None:
        """Cart URL with either product rows or the empty-cart message."""
        await self.wait_until(url_contains("/checkout/cart"))
        await self.wait_until(
            any_of(presence_of(self.CART_ROWS), presence_of(self.EMPTY_CART_MESSAGE))
        )

    async def get_cart_item_count(self) -> int:
        """Number of product rows; 0 once the cart shows its empty state."""
        await self.wait_for_cart_to_settle()
        return len(await self.find_all(self.CART_ROWS))

    # =========================================================================
    # Quantity and totals
    # =========================================================================

    @allure.step("Set first item quantity to {quantity}")
    async def set_first_item_quantity(self, quantity: int = 2) -> str:
        """
        Change the first row's quantity and wait for its subtotal to be re-rendered.

        Returns:
            The new subtotal text

        Raises:
            BusinessAssertionError: If the cart has no rows
        """
        await self.wait_until(url_contains("/checkout/cart"))
        rows = await self.wait_until(
            any_of(presence_of_all(self.CART_ROWS), presence_of(self.EMPTY_CART_MESSAGE))
        )
        if not isinstance(rows, list):
            raise BusinessAssertionError("Cart is empty: no product row to update")

        old_subtotal = await self.text_of(self.FIRST_ROW_SUBTOTAL)

        async def update_first_row() -> None:
            first_row = await self.find(self.CART_ROWS)
            qty_input = await self.smart.resolve_first(self.ROW_QTY_INPUT, scope=first_row)
            await self.type_text(qty_input, str(quantity))
            update = await self.smart.resolve_first(self.ROW_UPDATE_BUTTON, scope=first_row)
            await self.click(update)

        await self.retry_stale(update_first_row, description="update first row quantity")

        new_subtotal = await self.wait_until(text_differs(self.FIRST_ROW_SUBTOTAL, old_subtotal))
        logger.info(f"First row subtotal: {old_subtotal} -> {new_subtotal}")
        return new_subtotal

    async def get_first_row_subtotal(self) -> Decimal:
        await self.wait_for_cart_to_load()
        return parse_price(await self.text_of(self.FIRST_ROW_SUBTOTAL))

    async def get_row_subtotals(self) -> List[Decimal]:
        await self.wait_for_cart_to_load()
        subtotals = []
        for handle in await self.find_all(self.ROW_SUBTOTALS):
            text = await self.text_of(handle)
            if text:
                subtotals.append(parse_price(text))
        return subtotals

    async def get_sum_of_all_subtotals(self) -> Decimal:
        return sum(await self.get_row_subtotals(), Decimal("0"))

    async def get_grand_total(self) -> Decimal:
        """
        Grand total from the totals table (its last price cell).

        Raises:
            ElementNotFoundError: If the totals table has no price
        """
        await self.wait_for_cart_to_load()
        prices = await self.find_all(self.GRAND_TOTAL)
        if not prices:
            raise ElementNotFoundError("No grand total in the cart totals table", chain=self.GRAND_TOTAL)
        return parse_price(await self.text_of(prices[-1]))

    # =========================================================================
    # Removal
    # =========================================================================

    @allure.step("Delete first cart item (previous count {previous_count})")
    async def delete_first_item_and_wait(self, previous_count: int) -> None:
        """
        Remove the first row and wait for the cart to reflect it.

        With more than one row the row count has to drop below
        ``previous_count``; removing the last row has to reveal the
        empty-cart message.
        """
        await self.wait_for_cart_to_load()
        await self.click(self.FIRST_ROW_REMOVE_LINK)

        if previous_count > 1:
            await self.wait_until(count_less_than(self.CART_ROWS, previous_count))
        else:
            await self.wait_until(visibility_of(self.EMPTY_CART_MESSAGE))

    @allure.step("Empty the shopping cart")
    async def empty_cart(self) -> None:
        count = await self.get_cart_item_count()
        for _ in range(count):
            if count == 0:
                break
            await self.delete_first_item_and_wait(count)
            count = await self.get_cart_item_count()
            logger.info(f"Items left in cart: {count}")

        if count:
            raise BusinessAssertionError(f"Cart still holds {count} item(s) after emptying it")

    async def is_cart_empty_message_visible(self) -> bool:
        """True when the title and message both describe an empty cart."""
        try:
            title = await self.wait_until(visibility_of(self.EMPTY_CART_TITLE))
            title_text = await self.text_of(title)
            message_text = await self.text_of(self.EMPTY_CART_MESSAGE)
        except (WaitTimeoutError, ElementNotFoundError):
            return False
        return (
            title_text.lower() == EMPTY_CART_TITLE_TEXT
            and EMPTY_CART_MESSAGE_TEXT in message_text.lower()
        )


__all__ = ["CartPage"]
