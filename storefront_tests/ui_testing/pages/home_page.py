"""
================================================================================
Home Page Object (Async / Playwright)
================================================================================

Storefront header: account dropdown, top navigation and the wishlist
counter shown inside the account menu.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from storefront_tests.ui_testing.framework.errors import (
    BusinessAssertionError,
    RetryExhaustedError,
    WaitTimeoutError,
)
from storefront_tests.ui_testing.framework.locators import (
    chain,
    css,
    link_text,
    partial_link_text,
    xpath,
)
from storefront_tests.ui_testing.framework.page_base import BasePage
from storefront_tests.ui_testing.framework.retry import run_with_retry
from storefront_tests.ui_testing.framework.waits import (
    text_contains,
    url_contains,
    visibility_of,
)


MENU_RETRY_BUDGET = 2
WISHLIST_COUNT_ATTEMPTS = 3


def wishlist_count_suffix(count: int) -> str:
    """Label suffix the header prints for ``count`` wishlist items."""
    return f"({count} item)" if count == 1 else f"({count} items)"


class HomePage(BasePage):
    """Home page / global header object (async)."""

    URL_PATH = "/"

    # Account menu
    ACCOUNT_LINK = chain(
        "Account menu",
        css("a.skip-account"),
        css("#header a[data-target-element='#header-account']"),
    )
    ACCOUNT_DROPDOWN = chain(
        "Account dropdown",
        css("#header-account.skip-active"),
        css("div.skip-content.skip-active div.links"),
    )
    REGISTER_LINK = chain(
        "Register link",
        link_text("Register"),
        css("#header-account a[title='Register']"),
    )
    SIGN_IN_LINK = chain(
        "Log In link",
        link_text("Log In"),
        css("#header-account a[title='Log In']"),
    )
    LOG_OUT_LINK = chain(
        "Log Out link",
        link_text("Log Out"),
        css("#header-account a[title='Log Out']"),
    )
    MY_WISHLIST_LINK = chain(
        "My Wishlist link",
        partial_link_text("My Wishlist"),
        css("#header-account a[href*='/wishlist/']"),
    )
    WELCOME_MSG = chain("Welcome message", css("p.welcome-msg"), css(".welcome-msg"))

    # Top navigation
    WOMEN_MENU = chain(
        "WOMEN menu",
        link_text("WOMEN"),
        css("#nav a[href*='/women.html']"),
    )
    VIEW_ALL_WOMEN = chain(
        "View All Women",
        link_text("View All Women"),
        xpath("//a[normalize-space()='View All Women']"),
    )
    MEN_MENU = chain(
        "MEN menu",
        css("#nav a[href*='/men.html']"),
        link_text("MEN"),
    )
    VIEW_ALL_MEN = chain(
        "View All Men",
        link_text("View All Men"),
        xpath("//a[normalize-space()='View All Men']"),
    )
    SALE_MENU = chain(
        "SALE menu",
        link_text("SALE"),
        css("#nav a[href*='/sale.html']"),
    )

    @allure.step("Open home page")
    async def open(self) -> "HomePage":
        await self.navigate()
        await self.wait_until(visibility_of(self.ACCOUNT_LINK))
        return self

    # =========================================================================
    # Account menu
    # =========================================================================

    async def is_account_menu_open(self) -> bool:
        return await self.is_visible(self.ACCOUNT_DROPDOWN)

    @allure.step("Open account menu")
    async def open_account_menu(self) -> None:
        """
        Open the account dropdown; a no-op when it is already open.

        Clicking the account link toggles the dropdown, so the open state is
        checked on every attempt before clicking.
        """

        async def attempt() -> None:
            if await self.is_account_menu_open():
                return
            await self.click(self.ACCOUNT_LINK)
            await self.wait_until(visibility_of(self.ACCOUNT_DROPDOWN))

        await run_with_retry(attempt, budget=MENU_RETRY_BUDGET, description="open account menu")

    @allure.step("Go to Register")
    async def go_to_register(self) -> None:
        await self.open_account_menu()
        await self.click(self.REGISTER_LINK)
        await self.wait_until(url_contains("/customer/account/create"))

    @allure.step("Go to Log In")
    async def go_to_sign_in(self) -> None:
        await self.open_account_menu()
        await self.click(self.SIGN_IN_LINK)
        await self.wait_until(url_contains("/customer/account/login"))

    @allure.step("Log out")
    async def logout(self) -> None:
        await self.open_account_menu()
        await self.click(self.LOG_OUT_LINK)
        await self.wait_until(url_contains("logoutSuccess"))

    # =========================================================================
    # Welcome message
    # =========================================================================

    async def get_welcome_message(self) -> str:
        handle = await self.wait_until(visibility_of(self.WELCOME_MSG))
        return await self.text_of(handle)

    async def is_user_logged_in(self) -> bool:
        """
        True when the header greets a signed-in customer.

        Anonymous visitors see the store's default greeting, which also
        contains "welcome".
        """
        try:
            text = (await self.get_welcome_message()).lower()
        except WaitTimeoutError:
            return False
        return "welcome" in text and "default welcome" not in text

    # =========================================================================
    # Navigation
    # =========================================================================

    @allure.step("Go to View All Women")
    async def go_to_all_women(self) -> None:
        await self.hover(self.WOMEN_MENU)
        await self.click(self.VIEW_ALL_WOMEN)
        await self.wait_until(url_contains("/women.html"))

    @allure.step("Go to View All Men")
    async def go_to_all_men(self) -> None:
        await self.hover(self.MEN_MENU)
        await self.click(self.VIEW_ALL_MEN)
        await self.wait_until(url_contains("/men.html"))

    @allure.step("Go to Sale")
    async def go_to_sale(self) -> None:
        logger.info(f"URL before SALE click: {self.current_url}")
        try:
            await self.click(self.SALE_MENU)
        except RetryExhaustedError as e:
            logger.warning(f"Native click on SALE failed ({e.last_error}); using JavaScript click")
            await self.js_click(await self.find(self.SALE_MENU))
        logger.info(f"URL after SALE click: {self.current_url}")

    # =========================================================================
    # Wishlist
    # =========================================================================

    async def get_my_wishlist_text(self) -> str:
        """Open the account menu and read the "My Wishlist (n items)" label."""
        await self.open_account_menu()
        handle = await self.wait_until(visibility_of(self.MY_WISHLIST_LINK))
        return await self.text_of(handle)

    @allure.step("Go to My Wishlist")
    async def go_to_my_wishlist(self) -> None:
        await self.open_account_menu()
        await self.click(self.MY_WISHLIST_LINK)
        await self.wait_until(url_contains("/wishlist"))

    @allure.step("Wait for wishlist count {expected_count}")
    async def wait_for_wishlist_item_count(self, expected_count: int) -> str:
        """
        Wait until the My Wishlist label reports ``expected_count`` items.

        The dropdown may close between polls, so the open-and-wait cycle is
        repeated a few times before giving up.

        Returns:
            The label text that matched

        Raises:
            BusinessAssertionError: If the label never shows the expected suffix
        """
        suffix = wishlist_count_suffix(expected_count)

        for attempt in range(1, WISHLIST_COUNT_ATTEMPTS + 1):
            await self.open_account_menu()
            try:
                await self.wait_until(text_contains(self.MY_WISHLIST_LINK, suffix))
                return await self.text_of(self.MY_WISHLIST_LINK)
            except WaitTimeoutError as e:
                logger.warning(
                    f"My Wishlist not yet {suffix} (attempt {attempt}/{WISHLIST_COUNT_ATTEMPTS}): "
                    f"last seen {e.last_state!r}"
                )

        raise BusinessAssertionError(f"My Wishlist never reached {suffix}")


__all__ = [
    "HomePage",
    "wishlist_count_suffix",
]
