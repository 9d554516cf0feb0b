"""
================================================================================
Men Category Page Object (Async / Playwright)
================================================================================

Product grid plus the layered-navigation filters (colour, price).

================================================================================
"""

from __future__ import annotations

from decimal import Decimal

import allure
from loguru import logger
from playwright.async_api import ElementHandle

from storefront_tests.ui_testing.framework.locators import chain, css, xpath
from storefront_tests.ui_testing.framework.pricing import all_within
from storefront_tests.ui_testing.framework.waits import url_contains

from .category_page import CategoryPage


PRICE_FILTER_MIN = Decimal("0.00")
PRICE_FILTER_MAX = Decimal("99.99")


class MenPage(CategoryPage):
    """Men listing page object (async)."""

    URL_PATH = "/men.html"
    URL_FRAGMENT = "/men.html"

    COLOR_FILTER_BLACK = chain(
        "Color filter: Black",
        xpath(
            "//dt[normalize-space()='Color']/following-sibling::dd[1]"
            "//img[@alt='Black']/ancestor::a[1]"
        ),
        css("#narrow-by-list a[href*='color=20']"),
    )
    PRICE_FILTER_0_99 = chain(
        "Price filter: $0.00 - $99.99",
        xpath(
            "//dt[normalize-space()='Price']/following-sibling::dd[1]"
            "//a[contains(@href,'price=-100')]"
        ),
        css("#narrow-by-list a[href*='price=-100']"),
    )
    BLACK_SWATCH = chain(
        "Black swatch",
        css("ul.configurable-swatch-list li.option-black"),
        css("li.option-black"),
    )
    SWATCH_VISUAL = chain("Swatch border", css("a.swatch-link"), css("span.swatch-label"))

    @allure.step("Apply Color = Black filter")
    async def apply_black_color_filter(self) -> None:
        await self.click(self.COLOR_FILTER_BLACK)
        await self.wait_until(url_contains("color=20"))
        await self.wait_for_page_load()

    @allure.step("Apply Price = $0.00 - $99.99 filter")
    async def apply_price_filter_0_to_99(self) -> bool:
        """
        Apply the lowest price band when the filter panel offers it.

        Returns:
            False when the link is absent (band already applied or not offered)
        """
        if not await self.is_present(self.PRICE_FILTER_0_99):
            logger.warning(
                "Price filter $0.00 - $99.99 not offered (listing may already be filtered); "
                "continuing with current products"
            )
            await self.wait_for_page_load()
            return False

        await self.click(self.PRICE_FILTER_0_99)
        await self.wait_until(url_contains("price=-100"))
        await self.wait_for_page_load()
        return True

    async def has_black_color_selected_with_border(self, product: ElementHandle) -> bool:
        """
        True when the product's black swatch is selected and drawn with a visible solid border.
        """
        swatches = await self.find_all(self.BLACK_SWATCH, scope=product)
        if not swatches:
            return False
        swatch = swatches[0]

        if "selected" not in (await self.get_attribute(swatch, "class")).split():
            return False

        visuals = await self.find_all(self.SWATCH_VISUAL, scope=swatch)
        if not visuals:
            return False
        visual = visuals[0]

        color = await self.get_css_value(visual, "border-color") or \
            await self.get_css_value(visual, "border-top-color")
        style = await self.get_css_value(visual, "border-style") or \
            await self.get_css_value(visual, "border-top-style")

        transparent = not color or "0, 0, 0, 0" in color or color == "transparent"
        return not transparent and "solid" in style.lower()

    async def all_products_price_between(
        self,
        minimum: Decimal = PRICE_FILTER_MIN,
        maximum: Decimal = PRICE_FILTER_MAX,
    ) -> bool:
        return all_within(await self.get_prices(), minimum, maximum)


__all__ = ["MenPage", "PRICE_FILTER_MIN", "PRICE_FILTER_MAX"]
