"""
================================================================================
Locators and Smart Locator Chains
================================================================================

Element location with ordered fallback strategies:
    - Locator: immutable (strategy, selector) pair
    - LocatorChain: named, ordered list of equivalent Locators
    - SmartLocator: resolves chains against the page or a parent element,
      short-circuiting on the first strategy that matches, and records
      which elements only matched through a fallback

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from playwright.async_api import ElementHandle, Page

from .errors import ElementNotFoundError, translate_error


class By(str, Enum):
    """Supported locator strategies."""

    CSS = "css"
    XPATH = "xpath"
    ID = "id"
    NAME = "name"
    TEXT = "text"
    LINK_TEXT = "link_text"
    PARTIAL_LINK_TEXT = "partial_link_text"


@dataclass(frozen=True)
class Locator:
    """
    A single element-finding strategy.

    Attributes:
        by: Locator strategy
        value: Selector, id or text depending on the strategy
    """
    by: By
    value: str

    def to_selector(self) -> str:
        """Render the locator as a Playwright selector string."""
        if self.by is By.CSS:
            return self.value
        if self.by is By.XPATH:
            return f"xpath={self.value}"
        if self.by is By.ID:
            return f"[id={json.dumps(self.value)}]"
        if self.by is By.NAME:
            return f"[name={json.dumps(self.value)}]"
        if self.by is By.TEXT:
            return f"text={json.dumps(self.value)}"
        if self.by is By.LINK_TEXT:
            return f"a:text-is({json.dumps(self.value)})"
        if self.by is By.PARTIAL_LINK_TEXT:
            return f"a:has-text({json.dumps(self.value)})"
        raise ValueError(f"Unsupported locator strategy: {self.by}")

    def __str__(self) -> str:
        return f"{self.by.value}={self.value}"


def css(selector: str) -> Locator:
    return Locator(By.CSS, selector)


def xpath(expression: str) -> Locator:
    return Locator(By.XPATH, expression)


def by_id(element_id: str) -> Locator:
    return Locator(By.ID, element_id)


def by_name(name: str) -> Locator:
    return Locator(By.NAME, name)


def text(visible_text: str) -> Locator:
    return Locator(By.TEXT, visible_text)


def link_text(visible_text: str) -> Locator:
    return Locator(By.LINK_TEXT, visible_text)


def partial_link_text(visible_text: str) -> Locator:
    return Locator(By.PARTIAL_LINK_TEXT, visible_text)


@dataclass(frozen=True)
class LocatorChain:
    """
    Ordered, semantically equivalent fallbacks for one logical target.

    Attributes:
        name: Human-readable element name used in logs and errors
        locators: Strategies, most preferred first
    """
    name: str
    locators: Tuple[Locator, ...]

    def __post_init__(self):
        if not self.locators:
            raise ValueError(f"Locator chain '{self.name}' needs at least one locator")

    @property
    def primary(self) -> Locator:
        return self.locators[0]

    def or_else(self, *fallbacks: Locator) -> "LocatorChain":
        """Return a new chain with extra fallbacks appended."""
        return LocatorChain(self.name, self.locators + tuple(fallbacks))

    def describe(self) -> str:
        return f"{self.name} [{' -> '.join(str(loc) for loc in self.locators)}]"

    def __str__(self) -> str:
        return self.name


def chain(name: str, *locators: Locator) -> LocatorChain:
    """Build a LocatorChain from its name and strategies."""
    return LocatorChain(name, tuple(locators))


@dataclass
class LocatorHealth:
    """
    Tracks locator health and usage statistics.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_index: Position of the fallback in the chain (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_index: Optional[int] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    Resolves LocatorChains against a live page.

    Resolution evaluates each Locator in order against the scope (the page or
    a parent ElementHandle). The first Locator producing at least one match
    wins; later Locators are never queried. No match yields an empty list,
    which callers may treat as a valid outcome.

    Usage:
        >>> smart = SmartLocator(page)
        >>> rows = await smart.resolve(CartPage.CART_ROWS)
        >>> price = await smart.resolve_first(PRODUCT_PRICE, scope=rows[0])
    """

    def __init__(self, page: Page):
        """
        Initialize SmartLocator with a Playwright page.

        Args:
            page: Playwright Page object used as the default scope
        """
        self.page = page
        self._fallback_used: Dict[str, LocatorHealth] = {}

    async def resolve(
        self,
        target: LocatorChain,
        scope: Optional[Any] = None,
    ) -> List[ElementHandle]:
        """
        Resolve a chain to fresh element handles.

        Args:
            target: Chain to evaluate
            scope: Page or ElementHandle to search under (defaults to the page)

        Returns:
            Handles matched by the first successful Locator, or an empty list
        """
        root = scope if scope is not None else self.page

        for index, locator in enumerate(target.locators):
            selector = locator.to_selector()
            try:
                handles = await root.query_selector_all(selector)
            except Exception as e:
                raise translate_error(e) from e

            if not handles:
                continue

            self._record(target, index, locator)
            logger.debug(
                f"Element '{target.name}' resolved {len(handles)} match(es) via {locator}"
            )
            return handles

        logger.debug(f"Element '{target.name}' matched nothing: {target.describe()}")
        return []

    async def resolve_first(
        self,
        target: LocatorChain,
        scope: Optional[Any] = None,
    ) -> ElementHandle:
        """
        Resolve a chain and return its first match.

        Raises:
            ElementNotFoundError: When no Locator in the chain matches
        """
        handles = await self.resolve(target, scope=scope)
        if not handles:
            raise ElementNotFoundError(
                f"All locators failed for '{target.name}': {target.describe()}",
                chain=target,
            )
        return handles[0]

    def _record(self, target: LocatorChain, index: int, locator: Locator) -> None:
        """Remember the first fallback each element needed; one entry per element."""
        if index == 0 or target.name in self._fallback_used:
            return
        logger.warning(f"Element '{target.name}' used fallback #{index}: {locator}")
        self._fallback_used[target.name] = LocatorHealth(
            element_name=target.name,
            primary_selector=str(target.primary),
            used_fallback=True,
            fallback_index=index,
            fallback_selector=str(locator),
        )

    @property
    def fallbacks_used(self) -> Dict[str, LocatorHealth]:
        return dict(self._fallback_used)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists the elements that could only be found through a fallback,
        i.e. whose primary selector no longer matches the markup.

        Returns:
            Formatted health report string
        """
        if not self._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
        ]
        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: #{health.fallback_index} -> {health.fallback_selector}",
                "",
            ])
        return "\n".join(report_lines)


__all__ = [
    "By",
    "Locator",
    "LocatorChain",
    "LocatorHealth",
    "SmartLocator",
    "chain",
    "css",
    "xpath",
    "by_id",
    "by_name",
    "text",
    "link_text",
    "partial_link_text",
]
