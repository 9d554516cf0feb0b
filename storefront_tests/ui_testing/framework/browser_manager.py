"""
================================================================================
Browser Manager
================================================================================

Browser session lifecycle for storefront UI tests.

Features:
    - One browser / context / page per test session
    - Browser selection and headless mode from UISettings
    - Default navigation and action timeouts applied to every context
    - Best-effort shutdown that never masks the test outcome

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from .config_loader import UISettings
from .errors import ConfigurationMissingError


SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    Manages the browser session of a single test.

    Usage:
        async with BrowserManager.from_settings(settings) as manager:
            page = await manager.new_page()
            await page.goto(settings.base_url)
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--ignore-certificate-errors",
            "--disable-notifications",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
        navigation_timeout: float = 30.0,
        action_timeout: float = 5.0,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode
            browser_type: Browser to use - 'chromium', 'firefox', 'webkit'
            navigation_timeout: Page navigation timeout in seconds
            action_timeout: Default Playwright action timeout in seconds
        """
        if browser_type not in SUPPORTED_BROWSERS:
            raise ConfigurationMissingError(
                f"Unsupported browser '{browser_type}', expected one of {SUPPORTED_BROWSERS}"
            )
        self.headless = headless
        self.browser_type = browser_type
        self.navigation_timeout = navigation_timeout
        self.action_timeout = action_timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    @classmethod
    def from_settings(cls, settings: UISettings) -> "BrowserManager":
        """Create a manager configured from UISettings."""
        return cls(
            headless=settings.headless,
            browser_type=settings.browser,
            navigation_timeout=max(settings.timeout_seconds * 3, 30.0),
            action_timeout=settings.action_timeout_seconds,
        )

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry - start browser."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close browser."""
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()

        browser_launcher = getattr(self._playwright, self.browser_type)
        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
        }
        if self.browser_type != "chromium":
            launch_options.pop("args")

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.browser_type} "
            f"(headless={self.headless})"
        )

    async def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"Failed to close browser context: {e}")
        self._contexts.clear()

        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Failed to close browser: {e}")
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, cart and session.

        Args:
            **options: Additional context options

        Returns:
            New BrowserContext
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **options}
        context = await self._browser.new_context(**context_options)
        context.set_default_navigation_timeout(self.navigation_timeout * 1000)
        context.set_default_timeout(self.action_timeout * 1000)
        self._contexts.append(context)

        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """
        Create new page in new or existing context.

        Args:
            context: Existing context to use (creates new if None)
            **context_options: Options for new context

        Returns:
            New Page
        """
        if context is None:
            context = await self.new_context(**context_options)

        return await context.new_page()

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
    "SUPPORTED_BROWSERS",
]
