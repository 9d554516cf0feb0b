"""
================================================================================
Storefront Tools
================================================================================

Infrastructure helpers shared by the storefront test suites.

Modules:
    - common: Logging bootstrap and filesystem helpers
    - report_tools: Allure attachments, failure screenshots and report generation

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
