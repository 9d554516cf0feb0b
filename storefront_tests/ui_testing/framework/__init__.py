"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based interaction engine for the storefront suite.

Components:
    - locators: LocatorChain fallbacks and the SmartLocator resolver
    - waits: named wait conditions and the polling Waiter
    - element_actions: resolve / scroll / gate / act / JS-fallback executor
    - retry: bounded RetryPolicy
    - page_base: base page controller
    - browser_manager: browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .errors import (
    BusinessAssertionError,
    ClickInterceptedError,
    ConfigurationMissingError,
    ElementNotFoundError,
    FailureKind,
    MissingControlError,
    RetryExhaustedError,
    StaleElementError,
    UIEngineError,
    WaitTimeoutError,
)
from .locators import By, Locator, LocatorChain, SmartLocator, chain
from .waits import WaitCondition, Waiter
from .retry import RetryPolicy, run_with_retry, with_retry
from .element_actions import ElementActions
from .config_loader import ConfigLoader, UISettings
from .credentials import AccountDetails, Credentials, CredentialStore
from .page_base import BasePage
from .browser_manager import BrowserManager

__all__ = [
    "AccountDetails",
    "BasePage",
    "BrowserManager",
    "BusinessAssertionError",
    "By",
    "ClickInterceptedError",
    "ConfigLoader",
    "ConfigurationMissingError",
    "CredentialStore",
    "Credentials",
    "ElementActions",
    "ElementNotFoundError",
    "FailureKind",
    "Locator",
    "LocatorChain",
    "MissingControlError",
    "RetryExhaustedError",
    "RetryPolicy",
    "SmartLocator",
    "StaleElementError",
    "UIEngineError",
    "UISettings",
    "WaitCondition",
    "WaitTimeoutError",
    "Waiter",
    "chain",
    "run_with_retry",
    "with_retry",
]
