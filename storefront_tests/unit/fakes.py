"""
In-memory stand-ins for a Playwright page and its element handles.

Elements are registered under the selector string a Locator produces, so a
LocatorChain resolves against a FakePage exactly as it would against a live
page. Driver failures are real ``playwright.async_api`` errors carrying the
messages Playwright uses, so error translation is exercised end to end.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from storefront_tests.ui_testing.framework.element_actions import (
    JS_CLICK,
    JS_HOVER,
    JS_SELECT,
    JS_SET_VALUE,
    SCROLL_INTO_VIEW_JS,
)
from storefront_tests.ui_testing.framework.locators import Locator, LocatorChain
from storefront_tests.ui_testing.framework.page_base import JS_COMPUTED_STYLE
from storefront_tests.ui_testing.pages.wishlist_page import JS_FIRST_ENABLED_OPTION
from storefront_tests.ui_testing.pages.women_page import JS_SELECTED_OPTION_TEXT


PNG_BYTES = b"\x89PNG\r\n\x1a\n"

SelectorKey = Union[LocatorChain, Locator, str]


def selector_of(target: SelectorKey) -> str:
    """Selector string a chain's primary locator (or a locator) resolves with."""
    if isinstance(target, LocatorChain):
        return target.primary.to_selector()
    if isinstance(target, Locator):
        return target.to_selector()
    return target


def detached_error() -> PlaywrightError:
    return PlaywrightError("Element is not attached to the DOM")


def intercepted_error() -> PlaywrightTimeoutError:
    return PlaywrightTimeoutError(
        "Timeout 5000ms exceeded.\n"
        "Call log:\n"
        "  - <div class=\"overlay\"></div> intercepts pointer events"
    )


class _Container:
    def __init__(self):
        self.elements: Dict[str, List["FakeElement"]] = {}
        self.queries: List[str] = []

    def add(self, target: SelectorKey, *elements: "FakeElement"):
        self.elements.setdefault(selector_of(target), []).extend(elements)
        return self

    def set(self, target: SelectorKey, elements: List["FakeElement"]):
        self.elements[selector_of(target)] = list(elements)
        return self

    def clear(self, target: SelectorKey):
        self.elements.pop(selector_of(target), None)
        return self

    async def query_selector_all(self, selector: str) -> List["FakeElement"]:
        self.queries.append(selector)
        return [e for e in self.elements.get(selector, []) if not e.detached]


class FakeElement(_Container):
    """Element handle double with click/type/select/hover bookkeeping."""

    def __init__(
        self,
        text: str = "",
        visible: bool = True,
        enabled: bool = True,
        attrs: Optional[Dict[str, str]] = None,
        styles: Optional[Dict[str, str]] = None,
        value: str = "",
        options: Optional[List[Dict[str, Any]]] = None,
        intercepted: bool = False,
        on_click: Optional[Callable[["FakeElement"], None]] = None,
    ):
        super().__init__()
        self.text = text
        self.visible = visible
        self.enabled = enabled
        self.attrs = attrs or {}
        self.styles = styles or {}
        self.value = value
        self.options = options or []
        self.selected_index = 0
        self.intercepted = intercepted
        self.on_click = on_click
        self.detached = False
        # Errors raised by the next native actions, oldest first
        self.pending_errors: List[Exception] = []

        self.clicks = 0
        self.js_clicks = 0
        self.hovers = 0
        self.js_hovers = 0
        self.scrolls = 0
        self.typed: List[str] = []

    def __repr__(self) -> str:
        return f"FakeElement(text={self.text!r})"

    def detach(self) -> None:
        self.detached = True

    def _check_attached(self) -> None:
        if self.detached:
            raise detached_error()

    def _native(self) -> None:
        self._check_attached()
        if self.pending_errors:
            raise self.pending_errors.pop(0)
        if self.intercepted:
            raise intercepted_error()

    def _activate(self) -> None:
        if self.on_click is not None:
            self.on_click(self)

    async def query_selector_all(self, selector: str) -> List["FakeElement"]:
        self._check_attached()
        return await super().query_selector_all(selector)

    async def is_visible(self) -> bool:
        self._check_attached()
        return self.visible

    async def is_enabled(self) -> bool:
        self._check_attached()
        return self.enabled

    async def inner_text(self) -> str:
        self._check_attached()
        return self.text

    async def get_attribute(self, name: str) -> Optional[str]:
        self._check_attached()
        return self.attrs.get(name)

    async def click(self, timeout: Optional[float] = None) -> None:
        self._native()
        self.clicks += 1
        self._activate()

    async def hover(self, timeout: Optional[float] = None) -> None:
        self._native()
        self.hovers += 1

    async def fill(self, text: str, timeout: Optional[float] = None) -> None:
        self._native()
        self.value = text
        self.typed.append(text)

    async def type(self, text: str, timeout: Optional[float] = None) -> None:
        self._native()
        self.value += text
        self.typed.append(text)

    async def select_option(
        self,
        label: Optional[str] = None,
        index: Optional[int] = None,
        value: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> List[str]:
        self._native()
        position = self._option_index(label=label, index=index, value=value)
        if position < 0:
            raise PlaywrightTimeoutError("Timeout exceeded: did not find some options")
        self.selected_index = position
        return [self.options[position]["value"]]

    def _option_index(self, label=None, index=None, value=None) -> int:
        if index is not None:
            return index if 0 <= index < len(self.options) else -1
        for position, option in enumerate(self.options):
            if label is not None and option["label"] == label:
                return position
            if value is not None and option["value"] == value:
                return position
        return -1

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self._check_attached()
        if expression == SCROLL_INTO_VIEW_JS:
            self.scrolls += 1
            return None
        if expression == JS_CLICK:
            self.js_clicks += 1
            self._activate()
            return None
        if expression == JS_HOVER:
            self.js_hovers += 1
            return None
        if expression == JS_SET_VALUE:
            text, append = arg
            self.value = self.value + text if append else text
            return None
        if expression == JS_SELECT:
            position = self._option_index(**arg)
            if position < 0:
                return False
            self.selected_index = position
            return True
        if expression == JS_COMPUTED_STYLE:
            return self.styles.get(arg, "")
        if expression == JS_FIRST_ENABLED_OPTION:
            for position, option in enumerate(self.options):
                if position > 0 and not option.get("disabled") and option["value"] != "":
                    return position
            return -1
        if expression == JS_SELECTED_OPTION_TEXT:
            if not self.options:
                return ""
            return self.options[self.selected_index]["label"]
        raise AssertionError(f"FakeElement cannot evaluate: {expression}")


class FakePage(_Container):
    """Page double: URL, selector registry, navigation and screenshots."""

    def __init__(self, url: str = "https://shop.test/"):
        super().__init__()
        self.url = url
        self.navigations: List[str] = []
        self.screenshot_error: Optional[Exception] = None
        self.on_navigate: Optional[Callable[[str], None]] = None

    async def goto(self, url: str, wait_until: Optional[str] = None) -> None:
        self.url = url
        self.navigations.append(url)
        if self.on_navigate is not None:
            self.on_navigate(url)

    async def reload(self, wait_until: Optional[str] = None) -> None:
        self.navigations.append(self.url)

    async def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        if path:
            Path(path).write_bytes(PNG_BYTES)
        return PNG_BYTES
