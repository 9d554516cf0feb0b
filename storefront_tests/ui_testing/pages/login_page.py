"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================
"""

from __future__ import annotations

import allure

from storefront_tests.ui_testing.framework.locators import by_id, by_name, chain, css
from storefront_tests.ui_testing.framework.page_base import BasePage
from storefront_tests.ui_testing.framework.waits import visibility_of


class LoginPage(BasePage):
    """Customer login page object (async)."""

    URL_PATH = "/customer/account/login/"
    PAGE_TITLE = "LOGIN OR CREATE AN ACCOUNT"

    EMAIL_INPUT = chain("Email", by_id("email"), by_name("login[username]"))
    PASSWORD_INPUT = chain("Password", by_id("pass"), by_name("login[password]"))
    LOGIN_BUTTON = chain(
        "Login button",
        by_id("send2"),
        css("#login-form button[type='submit']"),
    )
    TITLE = chain("Page title", css("div.page-title h1"), css("h1"))

    @allure.step("Open login page")
    async def open(self) -> "LoginPage":
        await self.navigate()
        await self.wait_until(visibility_of(self.EMAIL_INPUT))
        return self

    async def get_title_text(self) -> str:
        handle = await self.wait_until(visibility_of(self.TITLE))
        return await self.text_of(handle)

    @allure.step("Login (email={email})")
    async def login(self, email: str, password: str) -> None:
        """
        Submit the login form.

        Args:
            email: Account email
            password: Account password
        """
        await self.type_text(self.EMAIL_INPUT, email)
        await self.type_text(self.PASSWORD_INPUT, password)
        await self.click(self.LOGIN_BUTTON)


__all__ = ["LoginPage"]
