"""
Repository-level pytest configuration.

Why this exists:
  - Provide safe defaults for the public demo storefront (no secrets embedded)
  - Configure loguru once per run from the ``logging`` config section
  - Keep behavior explicit and discoverable

Important:
  Account credentials are never defaulted here. The account journey creates a
  fresh customer per session; set ACCOUNT_EMAIL / ACCOUNT_PASSWORD to reuse one.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from storefront_tests.ui_testing.framework.config_loader import ConfigLoader
from storefront_tools.common import init_logger


def pytest_configure(config):
    """Initialise logging before collection so page objects log from the start."""
    loader = ConfigLoader()
    init_logger(
        level=loader.get("logging.level"),
        log_file=loader.get("logging.file"),
        rotation=loader.get("logging.rotation", "10 MB"),
        retention=loader.get("logging.retention", "7 days"),
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _demo_safe_env_defaults() -> Generator[None, None, None]:
    """
    Set demo-safe environment defaults if not already provided by the user/CI.

    Unit tests never read these; they build their settings explicitly.
    """
    defaults = {
        "UI_BASE_URL": "https://ecommerce.tealiumdemo.com",
        "UI_BROWSER": "chromium",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
