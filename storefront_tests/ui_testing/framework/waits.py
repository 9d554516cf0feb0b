# ================================================================================
# Wait Coordinator Module
# ================================================================================
#
# Named wait conditions and a fixed-interval polling loop for the live DOM.
#
# Key Features:
#   - Every wait has a description and a finite timeout
#   - Conditions return (satisfied, observed) like the API polling helpers
#   - Stale / not-yet-rendered elements count as "not yet", never as failure
#   - Timeouts report the last observed state for diagnosis
#
# Usage:
#   waiter = Waiter(page, timeout=10)
#   rows = await waiter.until(count_less_than(CART_ROWS, 3))
#   await waiter.until(any_of(url_contains("/checkout/cart"), visibility_of(SUCCESS)))
#
# ================================================================================

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from loguru import logger
from playwright.async_api import ElementHandle, Page

from .errors import FailureKind, WaitTimeoutError, translate_error
from .locators import LocatorChain, SmartLocator


DEFAULT_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.5

CheckFn = Callable[[SmartLocator], Awaitable[Tuple[bool, Any]]]

# Errors raised by a check that only mean "the DOM is not there yet"
_NOT_YET = (FailureKind.STALE, FailureKind.NOT_FOUND)


@dataclass(frozen=True)
class WaitCondition:
    """
    A named predicate over the current page state.

    Attributes:
        description: Human-readable name used in logs and timeout errors
        check: Coroutine ``(smart_locator) -> (satisfied, observed)``
        tolerate_stale: Treat stale / not-found errors as "not yet"
    """
    description: str
    check: CheckFn = field(repr=False)
    tolerate_stale: bool = True

    def __str__(self) -> str:
        return self.description


async def _first_visible(handles: List[ElementHandle]) -> Optional[ElementHandle]:
    for handle in handles:
        if await handle.is_visible():
            return handle
    return None


async def _is_interactable(handle: ElementHandle) -> bool:
    return await handle.is_visible() and await handle.is_enabled()


async def _first_text(smart: SmartLocator, target: LocatorChain) -> Optional[str]:
    handles = await smart.resolve(target)
    if not handles:
        return None
    return (await handles[0].inner_text()).strip()


def presence_of(target: LocatorChain, scope: Any = None) -> WaitCondition:
    """At least one element of ``target`` is attached; yields the first handle."""

    async def check(smart: SmartLocator):
        handles = await smart.resolve(target, scope=scope)
        return bool(handles), handles[0] if handles else None

    return WaitCondition(f"presence of {target.name}", check)


def presence_of_all(target: LocatorChain, scope: Any = None) -> WaitCondition:
    """At least one element of ``target`` is attached; yields all handles."""

    async def check(smart: SmartLocator):
        handles = await smart.resolve(target, scope=scope)
        return bool(handles), handles

    return WaitCondition(f"presence of all {target.name}", check)


def visibility_of(target: LocatorChain, scope: Any = None) -> WaitCondition:
    """An element of ``target`` is rendered and visible; yields that handle."""

    async def check(smart: SmartLocator):
        handles = await smart.resolve(target, scope=scope)
        visible = await _first_visible(handles)
        if visible is None:
            return False, f"{len(handles)} match(es), none visible"
        return True, visible

    return WaitCondition(f"visibility of {target.name}", check)


def element_to_be_clickable(target: LocatorChain, scope: Any = None) -> WaitCondition:
    """An element of ``target`` is visible and enabled; yields that handle."""

    async def check(smart: SmartLocator):
        handles = await smart.resolve(target, scope=scope)
        for handle in handles:
            if await _is_interactable(handle):
                return True, handle
        return False, f"{len(handles)} match(es), none clickable"

    return WaitCondition(f"{target.name} to be clickable", check)


def handle_clickable(handle: ElementHandle, name: str = "element") -> WaitCondition:
    """
    A pre-resolved handle is visible and enabled.

    Staleness is not tolerated here: a detached handle can never become
    clickable again, so the caller has to re-resolve.
    """

    async def check(smart: SmartLocator):
        ready = await _is_interactable(handle)
        return ready, handle if ready else "not visible or disabled"

    return WaitCondition(f"{name} to be clickable", check, tolerate_stale=False)


def invisibility_of(target: LocatorChain) -> WaitCondition:
    """No element of ``target`` is visible (absent counts as invisible)."""

    async def check(smart: SmartLocator):
        handles = await smart.resolve(target)
        visible = await _first_visible(handles)
        return visible is None, f"{len(handles)} match(es)"

    return WaitCondition(f"invisibility of {target.name}", check)


def url_contains(fragment: str) -> WaitCondition:
    async def check(smart: SmartLocator):
        url = smart.page.url
        return fragment in url, url

    return WaitCondition(f"URL to contain '{fragment}'", check)


def text_contains(target: LocatorChain, expected: str) -> WaitCondition:
    async def check(smart: SmartLocator):
        current = await _first_text(smart, target)
        return current is not None and expected in current, current

    return WaitCondition(f"{target.name} text to contain '{expected}'", check)


def text_equals(target: LocatorChain, expected: str) -> WaitCondition:
    async def check(smart: SmartLocator):
        current = await _first_text(smart, target)
        return current == expected, current

    return WaitCondition(f"{target.name} text to equal '{expected}'", check)


def text_differs(target: LocatorChain, previous: str) -> WaitCondition:
    """The element's text is present and no longer equals ``previous``."""

    async def check(smart: SmartLocator):
        current = await _first_text(smart, target)
        return current is not None and current != previous.strip(), current

    return WaitCondition(f"{target.name} text to change from '{previous}'", check)


def count_less_than(target: LocatorChain, limit: int) -> WaitCondition:
    async def check(smart: SmartLocator):
        count = len(await smart.resolve(target))
        return count < limit, count

    return WaitCondition(f"count of {target.name} < {limit}", check)


def count_equals(target: LocatorChain, expected: int) -> WaitCondition:
    async def check(smart: SmartLocator):
        count = len(await smart.resolve(target))
        return count == expected, count

    return WaitCondition(f"count of {target.name} == {expected}", check)


def any_of(*conditions: WaitCondition) -> WaitCondition:
    """
    Logical OR over conditions.

    Members are checked in order each poll; the first satisfied one wins and
    its observed value is returned. On failure the observed state maps each
    member's description to what it last saw.
    """
    if not conditions:
        raise ValueError("any_of() needs at least one condition")

    async def check(smart: SmartLocator):
        observed: Dict[str, Any] = {}
        for condition in conditions:
            try:
                satisfied, value = await condition.check(smart)
            except Exception as e:
                error = translate_error(e)
                if getattr(error, "kind", None) not in _NOT_YET:
                    raise error from e
                observed[condition.description] = error
                continue
            if satisfied:
                return True, value
            observed[condition.description] = value
        return False, observed

    description = " OR ".join(c.description for c in conditions)
    return WaitCondition(f"any of ({description})", check)


class Waiter:
    """
    Polls a WaitCondition at a fixed interval until it holds or times out.

    The loop yields with ``asyncio.sleep`` and never sleeps past the
    deadline, so ``until`` returns within ``timeout`` plus one check.
    """

    def __init__(
        self,
        page: Page,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        locator: Optional[SmartLocator] = None,
    ):
        """
        Initialize Waiter.

        Args:
            page: Playwright page the conditions observe
            timeout: Default timeout in seconds
            poll_interval: Seconds between checks
            locator: Shared SmartLocator (one is created if omitted)
        """
        if timeout <= 0:
            raise ValueError(f"Wait timeout must be positive, got {timeout}")
        if poll_interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {poll_interval}")
        self.page = page
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.locator = locator or SmartLocator(page)

    async def until(
        self,
        condition: WaitCondition,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Wait for ``condition`` to be satisfied.

        Args:
            condition: Condition to poll
            timeout: Override of the default timeout in seconds

        Returns:
            The condition's observed value at the moment it was satisfied

        Raises:
            WaitTimeoutError: With the last observed state once the deadline passes
            ValueError: If ``timeout`` is not positive
        """
        limit = self.timeout if timeout is None else timeout
        if limit <= 0:
            raise ValueError(f"Wait timeout must be positive, got {limit}")

        deadline = time.monotonic() + limit
        attempt = 0
        last_state: Any = None

        while True:
            attempt += 1
            try:
                satisfied, observed = await condition.check(self.locator)
            except Exception as e:
                error = translate_error(e)
                if not condition.tolerate_stale or getattr(error, "kind", None) not in _NOT_YET:
                    if error is e:
                        raise
                    raise error from e
                satisfied, observed = False, error
                logger.debug(f"Wait '{condition}' poll {attempt}: {type(error).__name__}")

            if satisfied:
                logger.debug(f"Wait '{condition}' satisfied after {attempt} poll(s)")
                return observed

            last_state = observed
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            await asyncio.sleep(min(self.poll_interval, remaining))

        logger.debug(f"Wait '{condition}' timed out after {attempt} poll(s): {last_state!r}")
        raise WaitTimeoutError(condition.description, timeout=limit, last_state=last_state)


__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_POLL_INTERVAL",
    "WaitCondition",
    "Waiter",
    "presence_of",
    "presence_of_all",
    "visibility_of",
    "element_to_be_clickable",
    "handle_clickable",
    "invisibility_of",
    "url_contains",
    "text_contains",
    "text_equals",
    "text_differs",
    "count_less_than",
    "count_equals",
    "any_of",
]
