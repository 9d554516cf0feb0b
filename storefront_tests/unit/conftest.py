"""
Fixtures for the engine unit tests.

Every test gets a fresh FakePage and fast UISettings so that timeouts
resolve in fractions of a second.
"""

import pytest

from storefront_tests.ui_testing.framework.config_loader import ConfigLoader, UISettings
from storefront_tests.ui_testing.framework.waits import Waiter

from .fakes import FakePage


FAST_TIMEOUT = 0.2
FAST_POLL = 0.01


@pytest.fixture
def settings() -> UISettings:
    return UISettings(
        base_url="https://shop.test",
        timeout_seconds=FAST_TIMEOUT,
        poll_interval_seconds=FAST_POLL,
        action_timeout_seconds=0.1,
        retry_budget=3,
    )


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def waiter(page: FakePage) -> Waiter:
    return Waiter(page, timeout=FAST_TIMEOUT, poll_interval=FAST_POLL)


@pytest.fixture(autouse=True)
def _fresh_config():
    """Never let one test's ConfigLoader singleton leak into the next."""
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
