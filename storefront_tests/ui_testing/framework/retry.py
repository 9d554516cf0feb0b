# ================================================================================
# Retry Policy Module
# ================================================================================
#
# Bounded-attempt wrapper used around element resolution and element actions.
#
# Key Features:
#   - Budget and transient-classifier are independent, swappable pieces
#   - Every retry re-runs the *whole* operation (fresh resolution)
#   - Exhausted budgets surface as RetryExhaustedError
#   - Decorator form for page-object methods
#
# Usage:
#   policy = RetryPolicy(budget=3)
#   handle = await policy.run(resolve_and_click, description="Click Add to Cart")
#
# ================================================================================

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from .errors import RetryExhaustedError, is_transient_error


T = TypeVar("T")

DEFAULT_RETRY_BUDGET = 3


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    budget: int = DEFAULT_RETRY_BUDGET,
    is_transient: Callable[[BaseException], bool] = is_transient_error,
    description: str = "operation",
) -> T:
    """
    Run ``operation`` until it succeeds, a terminal error occurs or the budget is spent.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt
        budget: Maximum number of attempts (>= 1)
        is_transient: Classifier deciding whether an error may be retried
        description: Human-readable name for logging

    Returns:
        Result of the first successful attempt

    Raises:
        RetryExhaustedError: When every attempt failed transiently
        Exception: The first non-transient error, unchanged
    """
    if budget < 1:
        raise ValueError(f"Retry budget must be >= 1, got {budget}")

    last_error: Optional[BaseException] = None

    for attempt in range(1, budget + 1):
        try:
            return await operation()
        except Exception as e:
            if not is_transient(e):
                raise
            last_error = e
            if attempt < budget:
                logger.warning(
                    f"Attempt {attempt}/{budget} failed for {description}: "
                    f"{type(e).__name__}: {str(e)[:200]}. Retrying from resolution..."
                )

    logger.error(
        f"All {budget} attempts failed for {description}: {last_error}"
    )
    raise RetryExhaustedError(description, budget, last_error) from last_error


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry budget plus transient-error classifier.

    Attributes:
        budget: Maximum number of attempts for one logical operation
        is_transient: Predicate selecting retryable errors
    """
    budget: int = DEFAULT_RETRY_BUDGET
    is_transient: Callable[[BaseException], bool] = field(default=is_transient_error)

    def __post_init__(self):
        if self.budget < 1:
            raise ValueError(f"Retry budget must be >= 1, got {self.budget}")

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        description: str = "operation",
    ) -> T:
        return await run_with_retry(
            operation,
            budget=self.budget,
            is_transient=self.is_transient,
            description=description,
        )


def with_retry(policy: RetryPolicy = None):
    """
    Decorator adding retry logic to an async page-object method.

    Args:
        policy: RetryPolicy controlling budget and classification
    """
    if policy is None:
        policy = RetryPolicy()

    def decorator(func: Callable[..., Awaitable[Any]]):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            return await policy.run(
                lambda: func(*args, **kwargs),
                description=func.__qualname__,
            )

        return wrapper
    return decorator


__all__ = [
    "DEFAULT_RETRY_BUDGET",
    "RetryPolicy",
    "run_with_retry",
    "with_retry",
]
