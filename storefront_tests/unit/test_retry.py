import pytest

from storefront_tests.ui_testing.framework.errors import (
    BusinessAssertionError,
    RetryExhaustedError,
    StaleElementError,
    WaitTimeoutError,
    is_stale_error,
)
from storefront_tests.ui_testing.framework.retry import RetryPolicy, run_with_retry, with_retry

from .fakes import detached_error


def flaky(failures, result="ok", error_factory=lambda: StaleElementError("gone")):
    """Operation failing ``failures`` times before returning ``result``."""
    calls = []

    async def operation():
        calls.append(1)
        if len(calls) <= failures:
            raise error_factory()
        return result

    return operation, calls


@pytest.mark.asyncio
@pytest.mark.parametrize("budget", [1, 2, 3])
async def test_succeeds_on_last_allowed_attempt(budget):
    operation, calls = flaky(budget - 1)

    assert await run_with_retry(operation, budget=budget) == "ok"
    assert len(calls) == budget


@pytest.mark.asyncio
async def test_exhaustion_after_exactly_budget_attempts():
    operation, calls = flaky(10)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await run_with_retry(operation, budget=3, description="click Add to Cart")

    assert len(calls) == 3
    assert exc_info.value.attempts == 3
    assert isinstance(exc_info.value.last_error, StaleElementError)
    assert exc_info.value.__cause__ is exc_info.value.last_error
    assert "click Add to Cart" in str(exc_info.value)


@pytest.mark.asyncio
async def test_terminal_errors_are_not_retried():
    operation, calls = flaky(5, error_factory=lambda: BusinessAssertionError("wrong total"))

    with pytest.raises(BusinessAssertionError):
        await run_with_retry(operation, budget=3)
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_driver_errors_are_classified():
    operation, calls = flaky(1, error_factory=detached_error)

    assert await run_with_retry(operation, budget=2) == "ok"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_narrow_classifier_lets_timeouts_through():
    operation, calls = flaky(1, error_factory=lambda: WaitTimeoutError("rows"))
    policy = RetryPolicy(budget=3, is_transient=is_stale_error)

    with pytest.raises(WaitTimeoutError):
        await policy.run(operation)
    assert len(calls) == 1


@pytest.mark.parametrize("budget", [0, -1])
def test_budget_must_be_positive(budget):
    with pytest.raises(ValueError):
        RetryPolicy(budget=budget)


@pytest.mark.asyncio
async def test_with_retry_decorator():
    attempts = []

    @with_retry(RetryPolicy(budget=2))
    async def open_menu(name):
        attempts.append(name)
        if len(attempts) == 1:
            raise StaleElementError("menu re-rendered")
        return f"{name} open"

    assert await open_menu("Account") == "Account open"
    assert attempts == ["Account", "Account"]
