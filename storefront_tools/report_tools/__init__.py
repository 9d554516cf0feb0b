"""Allure reporting helpers."""

from .allure_utils import (
    FailureObserver,
    attach_json,
    attach_text,
    failed_before_teardown,
    generate_allure_report,
)

__all__ = [
    "FailureObserver",
    "attach_json",
    "attach_text",
    "failed_before_teardown",
    "generate_allure_report",
]
