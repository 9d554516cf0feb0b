"""
================================================================================
Sale Category Page Object (Async / Playwright)
================================================================================

Discounted products: original (struck-through) and special prices.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure
from loguru import logger
from playwright.async_api import ElementHandle

from storefront_tests.ui_testing.framework.errors import (
    ElementNotFoundError,
    WaitTimeoutError,
    driver_call,
)
from storefront_tests.ui_testing.framework.locators import chain, css
from storefront_tests.ui_testing.framework.waits import (
    any_of,
    presence_of_all,
    text_contains,
    url_contains,
    visibility_of,
)

from .category_page import CategoryPage


class SalePage(CategoryPage):
    """Sale listing page object (async)."""

    URL_PATH = "/sale.html"
    URL_FRAGMENT = "sale"

    OLD_PRICE = chain(
        "Old price",
        css("p.old-price span.price"),
        css(".old-price .price"),
    )
    SPECIAL_PRICE = chain(
        "Special price",
        css("p.special-price span.price"),
        css(".special-price .price"),
    )

    async def wait_for_page_load(self) -> List[ElementHandle]:
        """
        The Sale page counts as loaded when the URL mentions "sale" or the
        title mentions "Sale"; then at least one product must be present.
        """
        logger.debug(f"Current URL: {self.current_url}")
        try:
            await self.wait_until(
                any_of(url_contains("sale"), text_contains(self.TITLE, "Sale"))
            )
        except WaitTimeoutError as e:
            raise WaitTimeoutError(
                f"Sale page did not load. URL: {self.current_url}",
                timeout=e.timeout,
                last_state=e.last_state,
            ) from e
        return await self.wait_until(presence_of_all(self.PRODUCTS))

    @allure.step("Get sale products")
    async def get_sale_products(self) -> List[ElementHandle]:
        products = await self.wait_for_page_load()
        await self.scroll_into_view(products[0])
        await self.wait_until(visibility_of(self.PRODUCTS))
        products = await self.find_all(self.PRODUCTS)
        logger.info(f"Found {len(products)} products on the Sale page")
        return products

    async def get_old_price(self, product: ElementHandle) -> ElementHandle:
        return await self.smart.resolve_first(self.OLD_PRICE, scope=product)

    async def get_special_price(self, product: ElementHandle) -> ElementHandle:
        return await self.smart.resolve_first(self.SPECIAL_PRICE, scope=product)

    async def has_both_prices(self, product: ElementHandle) -> bool:
        """True when both the old and the special price are displayed."""
        try:
            old_price = await self.get_old_price(product)
            special_price = await self.get_special_price(product)
        except ElementNotFoundError:
            return False
        return (
            await driver_call(old_price.is_visible())
            and await driver_call(special_price.is_visible())
        )

    async def get_text_decoration(self, price: ElementHandle) -> str:
        """Computed text decoration, falling back to ``text-decoration-line``."""
        value = await self.get_css_value(price, "text-decoration")
        if value:
            return value
        return await self.get_css_value(price, "text-decoration-line")

    async def get_color(self, price: ElementHandle) -> str:
        return await self.get_css_value(price, "color")


__all__ = ["SalePage"]
