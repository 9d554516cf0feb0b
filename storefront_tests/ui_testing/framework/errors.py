"""
================================================================================
UI Engine Errors
================================================================================

Failure taxonomy shared by every layer of the UI engine.

Playwright reports most failures as a generic ``Error`` with a descriptive
message. ``translate_error`` turns those into the classes below so that the
retry policy and the action executor can decide what is transient.

    Timeout        -> WaitTimeoutError
    NotFound       -> ElementNotFoundError
    Stale          -> StaleElementError
    Intercepted    -> ClickInterceptedError
    Configuration  -> ConfigurationMissingError
    Assertion      -> BusinessAssertionError

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Optional, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


T = TypeVar("T")

# Fragments of Playwright messages raised when a handle outlived its node
STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "execution context was destroyed",
    "cannot find context with specified id",
    "node is detached from document",
)

INTERCEPT_MARKERS = (
    "intercepts pointer events",
    "element click intercepted",
)


class FailureKind(Enum):
    """Classified outcome of a failed UI operation."""

    TIMEOUT = "timeout"
    NOT_FOUND = "element-not-found"
    STALE = "stale-reference"
    INTERCEPTED = "click-intercepted"
    ASSERTION = "assertion-mismatch"
    CONFIGURATION = "configuration-missing"

    @property
    def retryable(self) -> bool:
        return self in (FailureKind.TIMEOUT, FailureKind.NOT_FOUND, FailureKind.STALE)


class UIEngineError(Exception):
    """Base class for all UI engine failures."""

    kind: Optional[FailureKind] = None


class WaitTimeoutError(UIEngineError):
    """Raised when a wait condition never became true within its timeout."""

    kind = FailureKind.TIMEOUT

    def __init__(
        self,
        description: str,
        timeout: Optional[float] = None,
        last_state: Any = None,
    ):
        self.description = description
        self.timeout = timeout
        self.last_state = last_state
        message = description
        if timeout is not None:
            message = f"Timeout after {timeout:.2f}s waiting for: {description}"
        if last_state is not None:
            message = f"{message}. Last observed: {last_state!r}"
        super().__init__(message)


class ElementNotFoundError(UIEngineError):
    """Raised when a locator chain is exhausted where a match was required."""

    kind = FailureKind.NOT_FOUND

    def __init__(self, message: str, chain: Any = None):
        self.chain = chain
        super().__init__(message)


class StaleElementError(UIEngineError):
    """Raised when a resolved handle was invalidated before it was used."""

    kind = FailureKind.STALE


class ClickInterceptedError(UIEngineError):
    """Raised when a native action was rejected because another element overlaps the target."""

    kind = FailureKind.INTERCEPTED


class ConfigurationMissingError(UIEngineError):
    """Raised when a required configuration source, key or value is absent."""

    kind = FailureKind.CONFIGURATION


class BusinessAssertionError(UIEngineError, AssertionError):
    """A business expectation was violated. Never retried."""

    kind = FailureKind.ASSERTION


class MissingControlError(UIEngineError):
    """A required control is absent from a fully rendered page. Never retried."""


class RetryExhaustedError(UIEngineError):
    """Raised when a retry budget is spent on transient failures."""

    def __init__(self, description: str, attempts: int, last_error: BaseException):
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"'{description}' failed after {attempts} attempt(s): "
            f"{type(last_error).__name__}: {last_error}"
        )


def _message_has(error: BaseException, markers: tuple) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in markers)


def translate_error(error: BaseException) -> BaseException:
    """
    Map a Playwright driver error onto the engine taxonomy.

    Errors that are already part of the taxonomy, and errors that do not
    come from the driver, are returned unchanged.

    Args:
        error: Exception raised by a driver call

    Returns:
        The equivalent engine error, or ``error`` itself
    """
    if isinstance(error, UIEngineError):
        return error
    if not isinstance(error, PlaywrightError):
        return error

    # Playwright keeps retrying an intercepted click until its timeout,
    # so interception has to be checked before the timeout class.
    if _message_has(error, INTERCEPT_MARKERS):
        return ClickInterceptedError(str(error))
    if _message_has(error, STALE_MARKERS):
        return StaleElementError(str(error))
    if isinstance(error, PlaywrightTimeoutError):
        return WaitTimeoutError(str(error).splitlines()[0])
    return error


async def driver_call(call: Awaitable[T]) -> T:
    """Await a driver call, translating its failure into the engine taxonomy."""
    try:
        return await call
    except Exception as e:
        error = translate_error(e)
        if error is e:
            raise
        raise error from e


def classify(error: BaseException) -> Optional[FailureKind]:
    """Return the failure kind of ``error``, or None if it is not a UI failure."""
    translated = translate_error(error)
    return getattr(translated, "kind", None)


def is_transient_error(error: BaseException) -> bool:
    """Default classifier: timeouts, missing elements and stale handles are retried."""
    kind = classify(error)
    return kind is not None and kind.retryable


def is_stale_error(error: BaseException) -> bool:
    """Narrow classifier used by domain-level retries around a single handle."""
    return classify(error) is FailureKind.STALE


__all__ = [
    "FailureKind",
    "UIEngineError",
    "WaitTimeoutError",
    "ElementNotFoundError",
    "StaleElementError",
    "ClickInterceptedError",
    "ConfigurationMissingError",
    "BusinessAssertionError",
    "MissingControlError",
    "RetryExhaustedError",
    "translate_error",
    "driver_call",
    "classify",
    "is_transient_error",
    "is_stale_error",
]
