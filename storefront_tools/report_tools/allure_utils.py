"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports from the storefront suites.

Features:
- Custom attachment helpers
- Failure observer (screenshot + URL on a failed test)
- Report generation and result summary

================================================================================
"""

import json
import re
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import allure
from loguru import logger

from storefront_tools.common import ensure_directory


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


# ================================================================================
# Failure Observer
# ================================================================================

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")


class FailureObserver:
    """
    Captures diagnostics for a failed UI test.

    Writes ``<screenshot_dir>/<test_name>_<YYYYmmdd_HHMMSS>.png`` and attaches
    it, together with the page URL, to the Allure report. Capturing is best
    effort: a page that is already closed must not hide the real failure.
    """

    def __init__(
        self,
        screenshot_dir: str = "screenshots",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.screenshot_dir = Path(screenshot_dir)
        self._clock = clock

    def screenshot_path(self, test_name: str) -> Path:
        safe_name = _UNSAFE_FILENAME_CHARS.sub("_", test_name).strip("_") or "test"
        timestamp = self._clock().strftime("%Y%m%d_%H%M%S")
        return self.screenshot_dir / f"{safe_name}_{timestamp}.png"

    async def capture(self, page, test_name: str) -> Optional[Path]:
        """
        Save and attach a full-page screenshot plus the failure context.

        Args:
            page: Playwright page of the failed test
            test_name: Test identifier used in the file name

        Returns:
            Screenshot path, or None if nothing could be captured
        """
        path = self.screenshot_path(test_name)
        try:
            ensure_directory(self.screenshot_dir)
            await page.screenshot(path=str(path), full_page=True)
        except Exception as e:
            logger.warning(f"Could not capture failure screenshot for {test_name}: {e}")
            return None

        with allure.step("Capture failure details"):
            allure.attach.file(
                str(path),
                name=f"failure_{test_name}",
                attachment_type=allure.attachment_type.PNG,
            )
            attach_json(
                {"test": test_name, "url": page.url, "screenshot": str(path)},
                name="Failure context",
            )

        logger.info(f"Failure screenshot saved: {path}")
        return path


def failed_before_teardown(item) -> bool:
    """
    True when the setup or call phase of ``item`` failed.

    Reads the ``rep_setup`` / ``rep_call`` reports that a
    ``pytest_runtest_makereport`` hookwrapper stores on the item.
    """
    reports = (getattr(item, "rep_setup", None), getattr(item, "rep_call", None))
    return any(report is not None and report.failed for report in reports)


# ================================================================================
# Report Processing
# ================================================================================

@dataclass
class TestResultSummary:
    """Summary of test execution results."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0

    __test__ = False

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100


def summarize_results(results_dir: Path) -> TestResultSummary:
    """Count Allure result statuses in ``results_dir``."""
    results: List[Dict[str, Any]] = []
    for result_file in Path(results_dir).glob("*-result.json"):
        try:
            with open(result_file, encoding="utf-8") as f:
                results.append(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to parse {result_file}: {e}")

    summary = TestResultSummary(total=len(results))
    for result in results:
        status = result.get("status")
        if status in ("passed", "failed", "broken", "skipped"):
            setattr(summary, status, getattr(summary, status) + 1)
    return summary


def generate_allure_report(
    results_dir: str,
    output_dir: Optional[str] = None,
    open_report: bool = False
) -> bool:
    """
    Generate Allure report from results.

    Args:
        results_dir: Path to allure-results directory
        output_dir: Optional output directory
        open_report: Whether to open report in browser

    Returns:
        True if successful
    """
    results_path = Path(results_dir)
    report_path = Path(output_dir) if output_dir else results_path.parent / "allure-report"

    cmd = ["allure", "generate", str(results_path), "-o", str(report_path), "--clean"]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        logger.error("Allure command not found. Install allure-commandline.")
        return False

    if result.returncode != 0:
        logger.error(f"Report generation failed: {result.stderr}")
        return False

    summary = summarize_results(results_path)
    logger.info(f"Report generated at {report_path}")
    logger.info(
        f"Total: {summary.total} | Passed: {summary.passed} | Failed: {summary.failed} | "
        f"Broken: {summary.broken} | Skipped: {summary.skipped} | "
        f"Pass rate: {summary.pass_rate:.2f}%"
    )

    if open_report:
        subprocess.run(["allure", "open", str(report_path)])
    return True


__all__ = [
    "attach_json",
    "attach_text",
    "FailureObserver",
    "failed_before_teardown",
    "TestResultSummary",
    "summarize_results",
    "generate_allure_report",
]
