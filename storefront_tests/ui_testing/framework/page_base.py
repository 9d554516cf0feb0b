"""
================================================================================
Base Page Object
================================================================================

Foundation class for the storefront page controllers.

Provides:
    - Navigation and URL handling
    - LocatorChain resolution through the Waiter
    - Element actions with retry and JavaScript fallback
    - Computed style / text helpers
    - Locator health reporting

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, List, Optional, TypeVar, Union

import allure
from loguru import logger
from playwright.async_api import ElementHandle, Page

from .config_loader import UISettings
from .element_actions import ElementActions, Target
from .errors import driver_call, is_stale_error
from .locators import LocatorChain, SmartLocator
from .retry import RetryPolicy
from .waits import Waiter, WaitCondition, presence_of

T = TypeVar("T")

JS_COMPUTED_STYLE = "(el, prop) => window.getComputedStyle(el).getPropertyValue(prop)"


class BasePage:
    """
    Base class for all page controllers.

    A controller is bound to one Playwright page and one UISettings for the
    duration of a test. It stores locators (class constants) but never
    element handles: every operation resolves fresh.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/customer/account/login/"

            EMAIL_INPUT = chain("Email", by_id("email"))

            async def login(self, email: str, password: str):
                await self.type_text(self.EMAIL_INPUT, email)
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        page: Page,
        settings: Optional[UISettings] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            settings: UI settings (loaded from configuration when omitted)
        """
        self.page = page
        self.settings = settings or UISettings.from_config()
        self.base_url = self.settings.base_url.rstrip("/")
        self.smart = SmartLocator(page)
        self.waiter = Waiter(
            page,
            timeout=self.settings.timeout_seconds,
            poll_interval=self.settings.poll_interval_seconds,
            locator=self.smart,
        )
        self.retry_policy = RetryPolicy(budget=self.settings.retry_budget)
        self.actions = ElementActions(
            page,
            self.waiter,
            retry_policy=self.retry_policy,
            action_timeout=self.settings.action_timeout_seconds,
        )

    @property
    def url(self) -> str:
        """Get full page URL."""
        return self.settings.url(self.URL_PATH)

    @property
    def current_url(self) -> str:
        return self.page.url

    async def navigate(self, wait_for: str = "domcontentloaded") -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        await self.navigate_to(self.URL_PATH, wait_for=wait_for)

    async def navigate_to(
        self,
        path: str,
        wait_for: str = "domcontentloaded",
    ) -> None:
        """
        Navigate to specific path (or absolute URL).

        Args:
            path: URL path to navigate to
            wait_for: Wait condition
        """
        full_url = self.settings.url(path)
        with allure.step(f"Navigate to {path}"):
            await driver_call(self.page.goto(full_url, wait_until=wait_for))
            logger.debug(f"Navigated to: {full_url}")

    # =========================================================================
    # Element lookup
    # =========================================================================

    async def wait_until(self, condition: WaitCondition, timeout: Optional[float] = None) -> Any:
        """Wait for a named condition using this page's Waiter."""
        return await self.waiter.until(condition, timeout=timeout)

    async def find(self, target: LocatorChain, scope: Any = None) -> ElementHandle:
        """Wait for ``target`` to be present and return its first handle."""
        return await self.waiter.until(presence_of(target, scope=scope))

    async def find_all(self, target: LocatorChain, scope: Any = None) -> List[ElementHandle]:
        """Current matches of ``target`` without waiting (may be empty)."""
        return await self.smart.resolve(target, scope=scope)

    async def is_present(self, target: LocatorChain, scope: Any = None) -> bool:
        return bool(await self.find_all(target, scope=scope))

    async def is_visible(self, target: Union[LocatorChain, ElementHandle], scope: Any = None) -> bool:
        """
        Check whether ``target`` is currently visible, without waiting.

        Returns:
            False when nothing matches
        """
        if isinstance(target, LocatorChain):
            for handle in await self.find_all(target, scope=scope):
                if await driver_call(handle.is_visible()):
                    return True
            return False
        return await driver_call(target.is_visible())

    async def text_of(self, target: Union[LocatorChain, ElementHandle], scope: Any = None) -> str:
        """Trimmed visible text of ``target`` (waits for presence of a chain)."""
        handle = await self.find(target, scope=scope) if isinstance(target, LocatorChain) else target
        return (await driver_call(handle.inner_text())).strip()

    async def get_attribute(self, handle: ElementHandle, name: str) -> str:
        return await driver_call(handle.get_attribute(name)) or ""

    async def get_css_value(self, handle: ElementHandle, prop: str) -> str:
        """Computed CSS value of ``prop`` for ``handle``."""
        return (await driver_call(handle.evaluate(JS_COMPUTED_STYLE, prop))).strip()

    # =========================================================================
    # Element actions
    # =========================================================================

    async def click(self, target: Target, scope: Any = None) -> None:
        await self.actions.click(target, scope=scope)

    async def type_text(self, target: Target, text: str, clear: bool = True) -> None:
        await self.actions.type_text(target, text, clear=clear)

    async def select_option(self, target: Target, **choice: Any) -> None:
        await self.actions.select_option(target, **choice)

    async def hover(self, target: Target, scope: Any = None) -> None:
        await self.actions.hover(target, scope=scope)

    async def scroll_into_view(self, handle: ElementHandle) -> None:
        await self.actions.scroll_into_view(handle)

    async def js_click(self, handle: ElementHandle) -> None:
        await self.actions.js_click(handle)

    async def retry_stale(self, operation: Callable[[], Awaitable[T]], description: str) -> T:
        """
        Run ``operation`` again while it fails on a stale handle.

        Actions on pre-resolved handles are not retried by ElementActions,
        so ``operation`` has to resolve its handles itself on every call.
        """
        policy = RetryPolicy(budget=self.settings.retry_budget, is_transient=is_stale_error)
        return await policy.run(operation, description=description)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.smart.get_health_report()


__all__ = [
    "BasePage",
]
