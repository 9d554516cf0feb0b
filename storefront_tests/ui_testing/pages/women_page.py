"""
================================================================================
Women Category Page Object (Async / Playwright)
================================================================================

Sorting by price and adding listing products to the wishlist.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger
from playwright.async_api import ElementHandle

from storefront_tests.ui_testing.framework.errors import (
    ElementNotFoundError,
    RetryExhaustedError,
    WaitTimeoutError,
    driver_call,
    is_stale_error,
)
from storefront_tests.ui_testing.framework.locators import chain, css, partial_link_text
from storefront_tests.ui_testing.framework.pricing import MAX_SORT_INVERSIONS, is_sorted_ascending
from storefront_tests.ui_testing.framework.retry import run_with_retry
from storefront_tests.ui_testing.framework.waits import element_to_be_clickable, url_contains

from .category_page import CategoryPage


WISHLIST_RETRY_BUDGET = 2

JS_SELECTED_OPTION_TEXT = (
    "el => el.selectedIndex >= 0 ? el.options[el.selectedIndex].text.trim() : ''"
)


class WomenPage(CategoryPage):
    """Women listing page object (async)."""

    URL_PATH = "/women.html"
    URL_FRAGMENT = "/women.html"
    SORTED_BY_PRICE_PATH = "/women.html?dir=asc&order=price"

    SORT_BY_SELECT = chain(
        "Sort By select",
        css("div.sort-by select[title='Sort By']"),
        css("select[title='Sort By']"),
    )
    SORT_DIRECTION_SWITCH = chain(
        "Sort direction switcher",
        css("div.sort-by a.sort-by-switcher"),
        css("a.sort-by-switcher"),
    )
    WISHLIST_LINK = chain(
        "Add to Wishlist link",
        css("a.link-wishlist"),
        partial_link_text("Add to Wishlist"),
    )

    async def ensure_ascending_direction(self) -> None:
        """
        Switch the listing to ascending order if it is descending.

        A missing or unresponsive switcher is logged and ignored.
        """
        try:
            switch = await self.find(self.SORT_DIRECTION_SWITCH)
            classes = await self.get_attribute(switch, "class")
            logger.debug(f"Sort direction classes: {classes}")
            if "sort-by-switcher--desc" not in classes:
                return
            await self.click(self.SORT_DIRECTION_SWITCH)
            await self.wait_until(url_contains("dir=asc"))
            await self.wait_for_page_load()
        except (WaitTimeoutError, ElementNotFoundError, RetryExhaustedError) as e:
            logger.warning(f"Sort direction switcher unavailable, keeping current order: {e}")

    @allure.step("Sort by price ascending")
    async def sort_by_price_ascending(self) -> None:
        await self.wait_for_page_load()
        await self.ensure_ascending_direction()

        select = await self.wait_until(element_to_be_clickable(self.SORT_BY_SELECT))
        current = await driver_call(select.evaluate(JS_SELECTED_OPTION_TEXT))
        logger.info(f"Current Sort By: {current}")

        if current.lower() != "price":
            await self.select_option(self.SORT_BY_SELECT, label="Price")
            await self.wait_until(url_contains("order=price"))

        await self.wait_for_page_load()
        await self.ensure_ascending_direction()
        await self.wait_for_page_load()
        logger.info(f"URL after sorting: {self.current_url}")

    async def are_prices_sorted_ascending(self, tolerance: int = MAX_SORT_INVERSIONS) -> bool:
        return is_sorted_ascending(await self.get_prices(), tolerance=tolerance)

    async def add_product_to_wishlist(self, product: ElementHandle) -> None:
        """Click the product card's wishlist link (scroll, gate, JS fallback)."""
        link = await self.smart.resolve_first(self.WISHLIST_LINK, scope=product)
        # Card actions are only revealed while the pointer is over the card
        await self.hover(product)
        await self.click(link)

    @allure.step("Add product #{index} to wishlist")
    async def add_product_to_wishlist_by_index(self, index: int) -> None:
        """
        Add the ``index``-th product of the price-sorted listing to the wishlist.

        Adding a product navigates to the wishlist, so every attempt first
        returns to the sorted listing when the browser has left it.

        Raises:
            IndexError: If the listing has no product at ``index``
        """

        async def attempt() -> None:
            if self.URL_FRAGMENT not in self.current_url:
                await self.navigate_to(self.SORTED_BY_PRICE_PATH)
                await self.wait_for_page_load()
                await self.ensure_ascending_direction()

            products = await self.get_all_products()
            if not 0 <= index < len(products):
                raise IndexError(
                    f"Product index {index} out of range ({len(products)} products)"
                )
            await self.add_product_to_wishlist(products[index])

        await run_with_retry(
            attempt,
            budget=WISHLIST_RETRY_BUDGET,
            is_transient=is_stale_error,
            description=f"add product #{index} to wishlist",
        )


__all__ = ["WomenPage"]
