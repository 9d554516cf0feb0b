# ================================================================================
# Element Actions Module
# ================================================================================
#
# Reliable element interactions against an asynchronously rendering page.
#
# Key Features:
#   - Resolve -> scroll -> gate -> native action -> JS fallback pipeline
#   - Stale / not-yet-rendered failures restart from resolution (RetryPolicy)
#   - Overlay interception recovered with a programmatic action
#   - Allure step integration
#
# Usage:
#   actions = ElementActions(page, waiter)
#   await actions.click(LoginPage.SIGN_IN_BUTTON)
#   await actions.type_text(LoginPage.EMAIL_INPUT, "user@example.com")
#   await actions.select_option(SIZE_SELECT, index=1)
#
# ================================================================================

from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

import allure
from loguru import logger
from playwright.async_api import ElementHandle, Page

from .errors import ClickInterceptedError, MissingControlError, driver_call
from .locators import LocatorChain
from .retry import RetryPolicy
from .waits import Waiter, handle_clickable, presence_of


T = TypeVar("T")

Target = Union[LocatorChain, ElementHandle]

DEFAULT_ACTION_TIMEOUT = 5.0

SCROLL_INTO_VIEW_JS = "el => el.scrollIntoView({block: 'center', inline: 'nearest'})"
JS_CLICK = "el => el.click()"
JS_HOVER = """el => {
    for (const type of ['mouseover', 'mouseenter']) {
        el.dispatchEvent(new MouseEvent(type, {bubbles: true}));
    }
}"""
JS_SET_VALUE = """(el, [text, append]) => {
    el.value = append ? el.value + text : text;
    el.dispatchEvent(new Event('input', {bubbles: true}));
    el.dispatchEvent(new Event('change', {bubbles: true}));
}"""
JS_SELECT = """(el, choice) => {
    const options = Array.from(el.options);
    let index = choice.index;
    if (index === null || index === undefined) {
        index = options.findIndex(o =>
            choice.label !== null ? o.text.trim() === choice.label : o.value === choice.value);
    }
    if (index < 0 || index >= options.length) {
        return false;
    }
    el.selectedIndex = index;
    el.dispatchEvent(new Event('change', {bubbles: true}));
    return true;
}"""


class ElementActions:
    """
    Element interaction executor.

    Every action accepts either a LocatorChain or an already resolved
    ElementHandle. For a chain the whole pipeline (resolution included)
    runs under the RetryPolicy, so a handle that goes stale mid-action is
    simply re-resolved. For a handle the pipeline runs once and staleness
    propagates to the caller, which re-resolves through
    BasePage.retry_stale.

    The executor never waits for whatever the action triggers afterwards;
    that is the page controller's job.

    Example:
        actions = ElementActions(page, waiter, RetryPolicy(budget=3))
        await actions.click(HomePage.ACCOUNT_LINK)
        await actions.type_text(RegisterPage.EMAIL_INPUT, email)
    """

    def __init__(
        self,
        page: Page,
        waiter: Waiter,
        retry_policy: Optional[RetryPolicy] = None,
        action_timeout: float = DEFAULT_ACTION_TIMEOUT,
    ):
        """
        Initialize ElementActions.

        Args:
            page: Playwright Page object
            waiter: Waiter used for presence and interactability gates
            retry_policy: Policy wrapping resolution + action (default budget 3)
            action_timeout: Native Playwright action timeout in seconds
        """
        self.page = page
        self.waiter = waiter
        self.retry_policy = retry_policy or RetryPolicy()
        self.action_timeout = action_timeout

    @property
    def _timeout_ms(self) -> float:
        return self.action_timeout * 1000

    async def _perform(
        self,
        verb: str,
        target: Target,
        action: Callable[[ElementHandle, str], Awaitable[T]],
        scope: Any = None,
    ) -> T:
        if not isinstance(target, LocatorChain):
            return await action(target, "element")

        async def attempt() -> T:
            handle = await self.waiter.until(presence_of(target, scope=scope))
            return await action(handle, target.name)

        return await self.retry_policy.run(attempt, description=f"{verb} {target.name}")

    async def _prepare(self, handle: ElementHandle, name: str) -> None:
        await self.scroll_into_view(handle)
        await self.waiter.until(handle_clickable(handle, name))

    async def _native_or_fallback(
        self,
        name: str,
        native: Callable[[], Awaitable[Any]],
        fallback: Callable[[], Awaitable[Any]],
    ) -> None:
        try:
            await driver_call(native())
        except ClickInterceptedError as e:
            logger.warning(
                f"Native action on '{name}' intercepted ({str(e).splitlines()[0][:120]}); "
                f"using JavaScript fallback"
            )
            await fallback()

    # =========================================================================
    # Actions
    # =========================================================================

    async def scroll_into_view(self, handle: ElementHandle) -> None:
        """Center ``handle`` in the viewport. Safe to repeat."""
        await driver_call(handle.evaluate(SCROLL_INTO_VIEW_JS))

    async def js_click(self, handle: ElementHandle) -> None:
        """Programmatic click that bypasses hit-testing."""
        await driver_call(handle.evaluate(JS_CLICK))

    async def click(self, target: Target, scope: Any = None) -> None:
        """
        Click an element, falling back to a JavaScript click when intercepted.

        Args:
            target: LocatorChain or resolved ElementHandle
            scope: Parent page/handle for chain resolution
        """
        name = getattr(target, "name", "element")
        with allure.step(f"Click: {name}"):
            logger.info(f"Clicking: {name}")

            async def action(handle: ElementHandle, label: str) -> None:
                await self._prepare(handle, label)
                await self._native_or_fallback(
                    label,
                    lambda: handle.click(timeout=self._timeout_ms),
                    lambda: self.js_click(handle),
                )

            await self._perform("click", target, action, scope=scope)

    async def type_text(
        self,
        target: Target,
        text: str,
        clear: bool = True,
        scope: Any = None,
    ) -> None:
        """
        Enter text into an input.

        Args:
            target: LocatorChain or resolved ElementHandle
            text: Text to enter
            clear: Replace the current value instead of appending
            scope: Parent page/handle for chain resolution
        """
        name = getattr(target, "name", "element")
        shown = "*" * len(text) if "password" in name.lower() else text
        with allure.step(f"Type into {name}: {shown}"):
            logger.info(f"Typing into {name}: '{shown[:50]}'")

            async def action(handle: ElementHandle, label: str) -> None:
                await self._prepare(handle, label)
                if clear:
                    native = lambda: handle.fill(text, timeout=self._timeout_ms)
                else:
                    native = lambda: handle.type(text, timeout=self._timeout_ms)
                await self._native_or_fallback(
                    label,
                    native,
                    lambda: driver_call(handle.evaluate(JS_SET_VALUE, [text, not clear])),
                )

            await self._perform("type into", target, action, scope=scope)

    async def select_option(
        self,
        target: Target,
        label: Optional[str] = None,
        index: Optional[int] = None,
        value: Optional[str] = None,
        scope: Any = None,
    ) -> None:
        """
        Select an option of a <select> element by exactly one of label, index or value.

        Raises:
            ValueError: If not exactly one selector argument is given
            MissingControlError: If the JavaScript fallback finds no such option
        """
        given = [arg for arg in (label, index, value) if arg is not None]
        if len(given) != 1:
            raise ValueError("select_option() needs exactly one of label, index or value")

        name = getattr(target, "name", "element")
        choice = label if label is not None else (f"#{index}" if index is not None else value)
        with allure.step(f"Select {choice} in {name}"):
            logger.info(f"Selecting {choice} in {name}")

            async def fallback(handle: ElementHandle, label_: str) -> None:
                wanted = {"label": label, "index": index, "value": value}
                found = await driver_call(handle.evaluate(JS_SELECT, wanted))
                if not found:
                    raise MissingControlError(f"Option {choice} not present in {label_}")

            async def action(handle: ElementHandle, label_: str) -> None:
                await self._prepare(handle, label_)
                if label is not None:
                    native = lambda: handle.select_option(label=label, timeout=self._timeout_ms)
                elif index is not None:
                    native = lambda: handle.select_option(index=index, timeout=self._timeout_ms)
                else:
                    native = lambda: handle.select_option(value=value, timeout=self._timeout_ms)
                await self._native_or_fallback(label_, native, lambda: fallback(handle, label_))

            await self._perform("select in", target, action, scope=scope)

    async def hover(self, target: Target, scope: Any = None) -> None:
        """Move the pointer over an element (dispatching mouse events if intercepted)."""
        name = getattr(target, "name", "element")
        with allure.step(f"Hover: {name}"):
            logger.info(f"Hovering: {name}")

            async def action(handle: ElementHandle, label: str) -> None:
                await self._prepare(handle, label)
                await self._native_or_fallback(
                    label,
                    lambda: handle.hover(timeout=self._timeout_ms),
                    lambda: driver_call(handle.evaluate(JS_HOVER)),
                )

            await self._perform("hover", target, action, scope=scope)


__all__ = [
    "DEFAULT_ACTION_TIMEOUT",
    "ElementActions",
    "Target",
]
