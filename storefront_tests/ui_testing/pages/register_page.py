"""
================================================================================
Register Page Object (Async / Playwright)
================================================================================

Customer account creation form and its success feedback.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from storefront_tests.ui_testing.framework.credentials import (
    AccountDetails,
    generate_unique_email,
)
from storefront_tests.ui_testing.framework.locators import by_id, by_name, chain, css
from storefront_tests.ui_testing.framework.page_base import BasePage
from storefront_tests.ui_testing.framework.waits import visibility_of


class RegisterPage(BasePage):
    """Create-account page object (async)."""

    URL_PATH = "/customer/account/create/"
    PAGE_TITLE = "CREATE AN ACCOUNT"

    FIRST_NAME = chain("First name", by_id("firstname"), by_name("firstname"))
    MIDDLE_NAME = chain("Middle name", by_id("middlename"), by_name("middlename"))
    LAST_NAME = chain("Last name", by_id("lastname"), by_name("lastname"))
    EMAIL = chain("Email address", by_id("email_address"), by_name("email"))
    PASSWORD = chain("Password", by_id("password"), by_name("password"))
    CONFIRM_PASSWORD = chain("Confirm password", by_id("confirmation"), by_name("confirmation"))
    REGISTER_BUTTON = chain(
        "Register button",
        css("button[title='Register']"),
        css("#form-validate button[type='submit']"),
    )
    SUCCESS_MESSAGE = chain(
        "Registration success message",
        css("li.success-msg span"),
        css("ul.messages li.success-msg"),
    )
    TITLE = chain("Page title", css("div.page-title h1"), css("h1"))

    @allure.step("Open register page")
    async def open(self) -> "RegisterPage":
        await self.navigate()
        await self.wait_until(visibility_of(self.FIRST_NAME))
        return self

    async def get_title_text(self) -> str:
        handle = await self.wait_until(visibility_of(self.TITLE))
        return await self.text_of(handle)

    @staticmethod
    def generate_unique_email() -> str:
        return generate_unique_email()

    @allure.step("Fill registration form")
    async def fill_register_form(self, account: AccountDetails) -> None:
        await self.wait_until(visibility_of(self.FIRST_NAME))
        await self.type_text(self.FIRST_NAME, account.first_name)
        await self.type_text(self.MIDDLE_NAME, account.middle_name)
        await self.type_text(self.LAST_NAME, account.last_name)
        await self.type_text(self.EMAIL, account.email)
        await self.type_text(self.PASSWORD, account.password)
        await self.type_text(self.CONFIRM_PASSWORD, account.password)

    async def click_register(self) -> None:
        await self.click(self.REGISTER_BUTTON)

    async def get_success_message(self) -> str:
        handle = await self.wait_until(visibility_of(self.SUCCESS_MESSAGE))
        return await self.text_of(handle)

    @allure.step("Register new account")
    async def register(self, account: AccountDetails) -> str:
        """
        Fill and submit the form, then wait for the success message.

        Returns:
            The success message text
        """
        await self.fill_register_form(account)
        await self.click_register()
        message = await self.get_success_message()
        logger.info(f"Registered {account.email}: {message}")
        return message


__all__ = ["RegisterPage"]
