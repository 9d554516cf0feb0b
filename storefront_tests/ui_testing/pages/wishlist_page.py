"""
================================================================================
Wishlist Page Object (Async / Playwright)
================================================================================

Wishlist table and the transfer of wishlist items into the cart.

Adding a configurable product from the wishlist opens a configure page
where colour/size have to be chosen first. That page comes in several
markup shapes, so options and the add-to-cart control are located through
ordered fallbacks.

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

import allure
from loguru import logger
from playwright.async_api import ElementHandle

from storefront_tests.ui_testing.framework.errors import (
    MissingControlError,
    UIEngineError,
    WaitTimeoutError,
    driver_call,
)
from storefront_tests.ui_testing.framework.locators import (
    LocatorChain,
    by_id,
    chain,
    css,
    xpath,
)
from storefront_tests.ui_testing.framework.page_base import BasePage
from storefront_tests.ui_testing.framework.waits import (
    any_of,
    count_less_than,
    presence_of,
    presence_of_all,
    url_contains,
    visibility_of,
)


CONFIGURE_URL_FRAGMENT = "/wishlist/index/configure"
CART_URL_FRAGMENT = "/checkout/cart"

JS_FIRST_ENABLED_OPTION = (
    "el => Array.from(el.options).findIndex((o, i) => i > 0 && !o.disabled && o.value !== '')"
)


class WishlistPage(BasePage):
    """Wishlist page object (async)."""

    URL_PATH = "/wishlist/"
    CART_PATH = "/checkout/cart/"

    WISHLIST_TABLE = chain("Wishlist table", css("table#wishlist-table"), css("#wishlist-view-form table"))
    WISHLIST_EMPTY = chain("Empty wishlist notice", css("p.wishlist-empty"), css(".my-wishlist p.note-msg"))
    WISHLIST_ROWS = chain(
        "Wishlist rows",
        css("table#wishlist-table tbody tr"),
        css("#wishlist-view-form tbody tr"),
    )
    ROW_ADD_TO_CART = chain(
        "Row Add to Cart button",
        css("button.btn-cart"),
        css("button[title='Add to Cart']"),
    )
    SUCCESS_MESSAGE = chain("Success message", css("li.success-msg span"), css("li.success-msg"))
    CART_TABLE = chain("Cart table", css("table#shopping-cart-table"))

    # Configure page: options
    COLOR_SWATCHES = chain(
        "Colour swatch",
        css("#configurable_swatch_color a.swatch-link"),
        css("ul.configurable-swatch-list.configurable-swatch-color li a"),
        css("ul.configurable-swatch-list li a"),
    )
    SIZE_SWATCHES = chain(
        "Size swatch",
        css("#configurable_swatch_size a.swatch-link"),
        css("ul.configurable-swatch-list.configurable-swatch-size li a"),
        css("ul.configurable-swatch-list li a"),
    )
    VARIANT_SELECTS = chain(
        "Variant dropdown",
        css("select.super-attribute-select"),
        css("#product-options-wrapper select"),
    )

    # Configure page: add-to-cart cascade
    ADD_TO_CART_BY_ATTRIBUTE = chain(
        "Add to Cart (attribute)",
        css("form#product_addtocart_form button.btn-cart"),
        css("button[title='Add to Cart']"),
        by_id("product-addtocart-button"),
    )
    ADD_TO_CART_BY_TEXT = chain(
        "Add to Cart (text)",
        xpath(
            "//button[contains(normalize-space(.), 'Add to Cart') or contains(@title, 'Add to Cart')]"
            " | //a[contains(normalize-space(.), 'Add to Cart') or contains(@title, 'Add to Cart')]"
        ),
    )
    ADD_TO_CART_LABEL = chain(
        "Add to Cart label",
        xpath("//span[contains(normalize-space(.), 'Add to Cart') or contains(@title, 'Add to Cart')]"),
    )
    CLICKABLE_ANCESTOR = chain(
        "Clickable ancestor",
        xpath("./ancestor::*[self::button or self::a][1]"),
    )

    @allure.step("Open wishlist")
    async def open(self) -> "WishlistPage":
        await self.navigate()
        await self.wait_for_wishlist_to_load()
        return self

    async def wait_for_wishlist_to_load(self) -> None:
        """The URL is the wishlist and either the table or the empty notice is rendered."""
        await self.wait_until(url_contains("/wishlist"))
        await self.wait_until(
            any_of(presence_of(self.WISHLIST_TABLE), presence_of(self.WISHLIST_EMPTY))
        )

    async def get_wishlist_items(self) -> List[ElementHandle]:
        await self.wait_for_wishlist_to_load()
        return await self.find_all(self.WISHLIST_ROWS)

    async def click_add_to_cart_for_row(self, position: int = 0) -> None:
        """
        Click the Add to Cart button of the wishlist row at ``position``.

        Raises:
            IndexError: If the wishlist has no row at ``position``
        """

        async def attempt() -> None:
            rows = await self.wait_until(presence_of_all(self.WISHLIST_ROWS))
            if not 0 <= position < len(rows):
                raise IndexError(f"Wishlist row {position} out of range ({len(rows)} rows)")
            button = await self.smart.resolve_first(self.ROW_ADD_TO_CART, scope=rows[position])
            await self.click(button)

        await self.retry_stale(attempt, description=f"add wishlist row #{position + 1} to cart")

    # =========================================================================
    # Configure page
    # =========================================================================

    async def _first_visible(self, target: LocatorChain, scope=None) -> Optional[ElementHandle]:
        for handle in await self.find_all(target, scope=scope):
            if await driver_call(handle.is_visible()):
                return handle
        return None

    async def _pick_first_swatch(self, target: LocatorChain) -> bool:
        async def attempt() -> bool:
            swatch = await self._first_visible(target)
            if swatch is None:
                return False
            await self.click(swatch)
            return True

        if not await self.retry_stale(attempt, description=f"pick {target.name}"):
            logger.warning(f"No {target.name} offered; continuing without it")
            return False
        logger.info(f"{target.name} selected")
        return True

    async def _select_first_variant_options(self) -> None:
        """Pick the first enabled option of every variant dropdown, in page order."""
        count = len(await self.find_all(self.VARIANT_SELECTS))
        for position in range(count):

            async def attempt() -> None:
                # Selecting one attribute re-renders the options of the next one
                selects = await self.find_all(self.VARIANT_SELECTS)
                if position >= len(selects):
                    return
                select = selects[position]
                index = await driver_call(select.evaluate(JS_FIRST_ENABLED_OPTION))
                if index < 1:
                    logger.warning(f"Variant dropdown #{position + 1} has no selectable option")
                    return
                await self.select_option(select, index=index)

            try:
                await self.retry_stale(attempt, description=f"select variant #{position + 1}")
            except UIEngineError as e:
                logger.warning(f"Could not select option in variant dropdown #{position + 1}: {e}")

    async def find_add_to_cart_control(self) -> ElementHandle:
        """
        Locate the real add-to-cart control on the configure page.

        Cascade: attribute match, then text match, then the nearest
        button/link ancestor of an "Add to Cart" label.

        Raises:
            MissingControlError: If no visible control exists
        """

        async def cascade() -> ElementHandle:
            control = await self._first_visible(self.ADD_TO_CART_BY_ATTRIBUTE)
            if control is not None:
                return control

            control = await self._first_visible(self.ADD_TO_CART_BY_TEXT)
            if control is not None:
                logger.warning("Add to Cart located by text match")
                return control

            for label in await self.find_all(self.ADD_TO_CART_LABEL):
                if not await driver_call(label.is_visible()):
                    continue
                ancestor = await self._first_visible(self.CLICKABLE_ANCESTOR, scope=label)
                if ancestor is not None:
                    logger.warning("Add to Cart located through its label's ancestor")
                    return ancestor

            raise MissingControlError(f"No visible Add to Cart control on {self.current_url}")

        return await self.retry_stale(cascade, description="locate Add to Cart control")

    @allure.step("Configure product and add to cart")
    async def configure_product_and_add_to_cart(self) -> None:
        """
        Choose colour / size, submit, and end up on the cart page.

        When none of the post-submit signals shows up, the cart is opened
        directly.
        """
        logger.info(f"Configuring product at: {self.current_url}")

        await self._pick_first_swatch(self.COLOR_SWATCHES)
        await self._pick_first_swatch(self.SIZE_SWATCHES)
        await self._select_first_variant_options()

        async def submit() -> None:
            control = await self.find_add_to_cart_control()
            await self.click(control)

        await self.retry_stale(submit, description="click Add to Cart")

        try:
            await self.wait_until(
                any_of(
                    url_contains(CART_URL_FRAGMENT),
                    visibility_of(self.SUCCESS_MESSAGE),
                    presence_of(self.CART_TABLE),
                )
            )
        except WaitTimeoutError as e:
            logger.warning(f"No add-to-cart confirmation seen ({e.last_state!r}); opening cart directly")

        if CART_URL_FRAGMENT not in self.current_url:
            await self.navigate_to(self.CART_PATH)
            await self.wait_until(url_contains(CART_URL_FRAGMENT))

        logger.info(f"After configuration we are at: {self.current_url}")

    # =========================================================================
    # Wishlist -> cart
    # =========================================================================

    @allure.step("Add first {how_many} wishlist products to cart")
    async def add_first_n_products_to_cart(self, how_many: int) -> int:
        """
        Move the first ``how_many`` wishlist items into the cart.

        Returns:
            Number of items actually added (fewer if the wishlist runs out)
        """
        await self.wait_for_wishlist_to_load()
        added = 0

        for position in range(how_many):
            rows = await self.get_wishlist_items()
            if not rows:
                logger.warning(f"Wishlist is empty; only {added} product(s) added to cart")
                break

            logger.info(f"Adding wishlist product #{position + 1} to cart")
            await self.click_add_to_cart_for_row(0)

            await self.wait_until(
                any_of(
                    url_contains(CONFIGURE_URL_FRAGMENT),
                    url_contains(CART_URL_FRAGMENT),
                    visibility_of(self.SUCCESS_MESSAGE),
                    count_less_than(self.WISHLIST_ROWS, len(rows)),
                )
            )

            if CONFIGURE_URL_FRAGMENT in self.current_url:
                await self.configure_product_and_add_to_cart()
            added += 1

            if position < how_many - 1:
                await self.navigate_to(self.URL_PATH)
                await self.wait_for_wishlist_to_load()

        return added


__all__ = ["WishlistPage"]
