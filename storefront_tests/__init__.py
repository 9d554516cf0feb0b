"""
Storefront test suites package.

This repository keeps `storefront_tests` importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - page-object reuse from other suites

All content targets the public demo storefront and holds no secrets.
"""
