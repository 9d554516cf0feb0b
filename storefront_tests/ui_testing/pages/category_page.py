"""
================================================================================
Category Listing Page Object (Async / Playwright)
================================================================================

Shared product-grid behaviour for the Men, Women and Sale listings.

================================================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import List

import allure
from loguru import logger
from playwright.async_api import ElementHandle

from storefront_tests.ui_testing.framework.errors import is_stale_error
from storefront_tests.ui_testing.framework.locators import chain, css
from storefront_tests.ui_testing.framework.page_base import BasePage
from storefront_tests.ui_testing.framework.pricing import parse_price
from storefront_tests.ui_testing.framework.retry import RetryPolicy
from storefront_tests.ui_testing.framework.waits import (
    presence_of_all,
    url_contains,
    visibility_of,
)


class CategoryPage(BasePage):
    """Product listing page object (async)."""

    URL_PATH = "/"
    URL_FRAGMENT = ""

    PRODUCTS = chain(
        "Product grid items",
        css("div.category-products ul.products-grid li.item"),
        css("ul.products-grid li.item"),
        css("li.item.product"),
    )
    PRODUCT_PRICE = chain(
        "Product price",
        css("div.price-box span.price"),
        css("span.price"),
    )
    LAST_PRODUCT = chain(
        "Last product",
        css("ul.products-grid li.item.last"),
        css("ul.products-grid li.item:last-child"),
    )
    LAST_PRODUCT_ACTIONS = chain(
        "Last product actions",
        css("ul.products-grid li.item.last div.actions"),
        css("ul.products-grid li.item:last-child div.actions"),
    )
    TITLE = chain("Page title", css("div.page-title h1"), css("h1"))

    @allure.step("Open category page")
    async def open(self):
        await self.navigate()
        await self.wait_for_page_load()
        return self

    async def wait_for_page_load(self) -> List[ElementHandle]:
        """Wait for the listing URL and for at least one product card."""
        if self.URL_FRAGMENT:
            await self.wait_until(url_contains(self.URL_FRAGMENT))
        return await self.wait_until(presence_of_all(self.PRODUCTS))

    async def get_all_products(self) -> List[ElementHandle]:
        """Fresh handles for every product card in the grid."""
        return await self.wait_for_page_load()

    async def get_product_price(self, product: ElementHandle) -> Decimal:
        price = await self.smart.resolve_first(self.PRODUCT_PRICE, scope=product)
        return parse_price(await self.text_of(price))

    async def get_prices(self) -> List[Decimal]:
        """
        Prices of all products, in grid order.

        The grid is re-resolved if a card goes stale while it is being read.
        """

        async def read_all() -> List[Decimal]:
            products = await self.get_all_products()
            return [await self.get_product_price(product) for product in products]

        policy = RetryPolicy(budget=self.settings.retry_budget, is_transient=is_stale_error)
        prices = await policy.run(read_all, description=f"read prices on {self.URL_PATH}")
        logger.info(f"Prices found: {[str(p) for p in prices]}")
        return prices

    # =========================================================================
    # Hover actions
    # =========================================================================

    @allure.step("Hover last product")
    async def hover_last_product(self) -> None:
        await self.hover(self.LAST_PRODUCT)

    async def are_last_product_actions_visible(self) -> bool:
        return await self.is_visible(self.LAST_PRODUCT_ACTIONS)

    async def wait_for_last_product_actions_visible(self) -> ElementHandle:
        return await self.wait_until(visibility_of(self.LAST_PRODUCT_ACTIONS))


__all__ = ["CategoryPage"]
