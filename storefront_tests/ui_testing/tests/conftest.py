"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for the live storefront journeys, providing
fixtures for browser management, page objects, and test setup/teardown.

Key Features:
- One fresh browser session per test (BrowserManager)
- Page Object fixtures for all pages
- Screenshot capture on failure (FailureObserver)
- Locator health report attached after every page object is used
- Write-once credential hand-off between journeys (CredentialStore)

================================================================================
"""

from typing import AsyncGenerator, Generator

import pytest
from loguru import logger
from playwright.async_api import Page

from storefront_tests.ui_testing.framework.browser_manager import BrowserManager
from storefront_tests.ui_testing.framework.config_loader import UISettings
from storefront_tests.ui_testing.framework.credentials import (
    AccountDetails,
    Credentials,
    CredentialStore,
)
from storefront_tests.ui_testing.framework.page_base import BasePage
from storefront_tests.ui_testing.pages import (
    CartPage,
    HomePage,
    LoginPage,
    MenPage,
    RegisterPage,
    SalePage,
    WishlistPage,
    WomenPage,
)
from storefront_tools.report_tools import FailureObserver, attach_text, failed_before_teardown


# ================================================================================
# Settings & Shared State
# ================================================================================

@pytest.fixture(scope="session")
def settings() -> UISettings:
    """Typed UI settings; fails fast when ``ui.base_url`` is not configured."""
    return UISettings.from_config()


@pytest.fixture(scope="session")
def credential_store() -> CredentialStore:
    """
    Session-scoped credential hand-off.

    Written once by the account creation journey and read by later ones.
    """
    return CredentialStore.from_config()


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="function")
async def browser_manager(settings: UISettings) -> AsyncGenerator[BrowserManager, None]:
    """
    Function-scoped browser manager fixture.

    Every test gets its own browser so that a failed journey never leaks
    state into the next one.
    """
    async with BrowserManager.from_settings(settings) as manager:
        yield manager


@pytest.fixture(scope="function")
async def page(
    request,
    browser_manager: BrowserManager,
    settings: UISettings,
) -> AsyncGenerator[Page, None]:
    """
    Function-scoped page fixture.

    Captures a screenshot plus URL when fixture setup or the test body failed.
    """
    page = await browser_manager.new_page()
    yield page

    if failed_before_teardown(request.node):
        observer = FailureObserver(screenshot_dir=settings.screenshot_dir)
        await observer.capture(page, request.node.name)


# ================================================================================
# Page Object Fixtures
# ================================================================================

def _attach_locator_health(controller: BasePage) -> None:
    """Record which locators only matched through a fallback."""
    attach_text(
        controller.get_locator_health_report(),
        name=f"{type(controller).__name__} locator health",
    )


@pytest.fixture
def home_page(page: Page, settings: UISettings) -> Generator[HomePage, None, None]:
    controller = HomePage(page, settings)
    yield controller
    _attach_locator_health(controller)


@pytest.fixture
def login_page(page: Page, settings: UISettings) -> Generator[LoginPage, None, None]:
    controller = LoginPage(page, settings)
    yield controller
    _attach_locator_health(controller)


@pytest.fixture
def register_page(page: Page, settings: UISettings) -> Generator[RegisterPage, None, None]:
    controller = RegisterPage(page, settings)
    yield controller
    _attach_locator_health(controller)


@pytest.fixture
def men_page(page: Page, settings: UISettings) -> Generator[MenPage, None, None]:
    controller = MenPage(page, settings)
    yield controller
    _attach_locator_health(controller)


@pytest.fixture
def women_page(page: Page, settings: UISettings) -> Generator[WomenPage, None, None]:
    controller = WomenPage(page, settings)
    yield controller
    _attach_locator_health(controller)


@pytest.fixture
def sale_page(page: Page, settings: UISettings) -> Generator[SalePage, None, None]:
    controller = SalePage(page, settings)
    yield controller
    _attach_locator_health(controller)


@pytest.fixture
def wishlist_page(page: Page, settings: UISettings) -> Generator[WishlistPage, None, None]:
    controller = WishlistPage(page, settings)
    yield controller
    _attach_locator_health(controller)


@pytest.fixture
def cart_page(page: Page, settings: UISettings) -> Generator[CartPage, None, None]:
    controller = CartPage(page, settings)
    yield controller
    _attach_locator_health(controller)


# ================================================================================
# Authentication Fixtures
# ================================================================================

@pytest.fixture
async def published_credentials(
    home_page: HomePage,
    register_page: RegisterPage,
    credential_store: CredentialStore,
) -> Credentials:
    """
    Credentials of an existing customer, signed out.

    Uses the published credentials; when no journey on this worker has
    published any yet, a fresh account is registered and logged out again.
    """

    async def register(account: AccountDetails) -> None:
        await home_page.open()
        await home_page.go_to_register()
        await register_page.register(account)
        await home_page.logout()

    return await credential_store.get_or_register(register)


@pytest.fixture
async def signed_in_home(
    home_page: HomePage,
    login_page: LoginPage,
    published_credentials: Credentials,
) -> HomePage:
    """Provides the home page with a signed-in customer."""
    await home_page.open()
    await home_page.go_to_sign_in()
    await login_page.login(published_credentials.email, published_credentials.password)

    await home_page.open()
    logger.info(f"Signed in as {published_credentials.email}")
    return home_page


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Keep each phase's report on the item.

    The ``page`` fixture reads ``rep_setup`` / ``rep_call`` during teardown to decide whether
    failure diagnostics have to be captured.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)
