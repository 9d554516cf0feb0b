"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the storefront suites.
It registers common markers and gates the live browser journeys.

Live journeys under ``ui_testing/tests`` drive a real browser against the
demo storefront; they only run when ``RUN_UI_TESTS=1``.

================================================================================
"""

import os

import pytest


RUN_UI_TESTS_ENV = "RUN_UI_TESTS"


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests simulating user flows"
    )
    config.addinivalue_line(
        "markers", "unit: Engine tests against in-memory fakes"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Live browser tests"
    )
    config.addinivalue_line(
        "markers", "account: Account creation and sign-in journeys"
    )
    config.addinivalue_line(
        "markers", "catalog: Category listing journeys"
    )
    config.addinivalue_line(
        "markers", "cart: Wishlist and shopping cart journeys"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds the 'ui' / 'unit' markers by directory and skips live journeys
    unless they were explicitly enabled.
    """
    run_ui = os.environ.get(RUN_UI_TESTS_ENV, "").lower() in ("1", "true", "yes")
    skip_ui = pytest.mark.skip(reason=f"live UI journeys disabled (set {RUN_UI_TESTS_ENV}=1)")

    for item in items:
        path = str(item.fspath)

        # Auto-add 'ui' marker to tests in ui_testing directory
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
            if not run_ui:
                item.add_marker(skip_ui)

        # Auto-add 'unit' marker to tests in unit directory
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    run_ui = os.environ.get(RUN_UI_TESTS_ENV, "") or "0"
    return [
        "",
        "=" * 60,
        "Storefront UI Interaction Engine",
        f"Live UI journeys: {RUN_UI_TESTS_ENV}={run_ui}",
        "=" * 60,
        "",
    ]
