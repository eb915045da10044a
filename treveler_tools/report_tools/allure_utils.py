"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports of the Treveler suites and for
post-processing the results directory.

Features:
- Attachment helpers (JSON, text, step details, request/response pairs)
- Sensitive header masking in every attachment
- Results summary and HTML report generation with history

Author: Automation Team
License: MIT
================================================================================
"""

import json
import shutil
import subprocess
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger


MASKED_HEADERS = {"authorization", "x-api-key", "cookie", "set-cookie"}
MASK = "***MASKED***"

# Longest body text kept in an attachment
MAX_BODY_LENGTH = 3000


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
    json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    allure.attach(text, name=name, attachment_type=allure.attachment_type.TEXT)


def attach_step_details(details: Dict[str, Any], name: str = "Step Details"):
    """
    Attach a dict of step facts (state, status, timings) as JSON.

    Keys are sorted so repeated runs produce comparable attachments.
    """
    attach_json(dict(sorted(details.items())), name=name)


def mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Replace credential-bearing header values with a fixed mask."""
    return {
        key: MASK if key.lower() in MASKED_HEADERS else value
        for key, value in headers.items()
    }


def truncate(text: str, limit: int = MAX_BODY_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}\n\n... [Truncated, full length: {len(text)} chars] ..."


def attach_request_response(
    method: str,
    path: str,
    url: str,
    status_code: int,
    elapsed_ms: float,
    request_headers: Dict[str, str],
    request_body: Optional[Any] = None,
    query_params: Optional[Dict[str, Any]] = None,
    curl_command: Optional[str] = None,
    response_text: str = "",
):
    """
    Attach one HTTP exchange as a single Allure step.

    Header values named in MASKED_HEADERS are masked here. Request bodies
    and the cURL command are attached as given, so redact them first.

    Args:
        method: HTTP method
        path: Path as requested, used in the step title
        url: Full URL including the query string
        status_code: Response status code
        elapsed_ms: Round-trip time in milliseconds
        request_headers: Headers as sent
        request_body: JSON request body
        query_params: Query parameters
        curl_command: Reproduction command
        response_text: Response body, pretty-printed when it is JSON
    """
    status_emoji = "✅" if status_code < 400 else "❌"

    with allure.step(f"{status_emoji} {method} {path} → {status_code}"):
        attach_text(url, name="🔗 Request URL")

        headers = mask_headers(request_headers)
        if headers:
            attach_json(headers, name="📤 Request Headers")
        if request_body:
            attach_json(request_body, name="📤 Request Body")
        if query_params:
            attach_json(query_params, name="📤 Query Params")
        if curl_command:
            attach_text(curl_command, name="🔧 cURL Command")

        attach_text(f"{status_emoji} {status_code} ({elapsed_ms:.0f}ms)", name="📥 Response Status")
        allure.attach(
            truncate(response_text or "<empty>"),
            name="📥 Response Body",
            attachment_type=allure.attachment_type.JSON
        )


# ================================================================================
# Report Processing
# ================================================================================

STATUSES = ("passed", "failed", "broken", "skipped")


@dataclass
class TestResultSummary:
    """Status counts and total duration of one allure-results directory."""
    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        return self.passed * 100 / self.total if self.total else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["pass_rate"] = f"{self.pass_rate:.2f}%"
        return data


class AllureReportProcessor:
    """
    Reads an allure-results directory, summarises it and renders the HTML
    report (requires the ``allure`` command line on PATH).

    The previous report's history/ folder is copied into the results before
    rendering so the trend graphs carry over between runs.
    """

    def __init__(
        self,
        results_dir: Path,
        report_dir: Optional[Path] = None,
        history_dir: Optional[Path] = None
    ):
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")
        self.history_dir = Path(history_dir or self.results_dir.parent / "allure-history")

    def parse_results(self) -> List[Dict[str, Any]]:
        """Load every *-result.json, skipping files that do not parse."""
        results = []
        for result_file in sorted(self.results_dir.glob("*-result.json")):
            try:
                results.append(json.loads(result_file.read_text(encoding="utf-8")))
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable result {result_file.name}: {e}")
        return results

    def generate_summary(self) -> TestResultSummary:
        results = self.parse_results()
        counts = Counter(result.get("status") for result in results)

        summary = TestResultSummary(total=len(results))
        for status in STATUSES:
            setattr(summary, status, counts.pop(status, 0))
        summary.unknown = sum(counts.values())
        summary.duration_ms = sum(
            result.get("stop", 0) - result.get("start", 0) for result in results
        )
        return summary

    def copy_history(self) -> None:
        previous = self.report_dir / "history"
        if not previous.exists():
            return

        target = self.results_dir / "history"
        shutil.rmtree(target, ignore_errors=True)
        shutil.copytree(previous, target)
        logger.info(f"Carried report history over from {previous}")

    def generate_report(self) -> bool:
        """Render the HTML report. Returns False when the allure CLI fails or is missing."""
        self.copy_history()

        cmd = ["allure", "generate", str(self.results_dir), "-o", str(self.report_dir), "--clean"]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.error("Allure command not found. Install allure-commandline.")
            return False

        if result.returncode != 0:
            logger.error(f"Report generation failed: {result.stderr}")
            return False

        logger.info(f"Report generated at {self.report_dir}")
        return True

    def save_history(self) -> None:
        """Archive the rendered history/ under a timestamp and as current/."""
        history = self.report_dir / "history"
        if not history.exists():
            return

        self.history_dir.mkdir(parents=True, exist_ok=True)
        shutil.copytree(history, self.history_dir / datetime.now().strftime("%Y%m%d_%H%M%S"))

        current = self.history_dir / "current"
        shutil.rmtree(current, ignore_errors=True)
        shutil.copytree(history, current)
        logger.info(f"History saved to {self.history_dir}")

    def print_summary(self) -> TestResultSummary:
        summary = self.generate_summary()

        logger.info("=" * 60)
        logger.info("TREVELER API TEST SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Total Tests:    {summary.total}")
        logger.info(f"Passed:         {summary.passed} ✅")
        logger.info(f"Failed:         {summary.failed} ❌")
        logger.info(f"Broken:         {summary.broken} ⚠️")
        logger.info(f"Skipped:        {summary.skipped} ⏭️")
        logger.info(f"Pass Rate:      {summary.pass_rate:.2f}%")
        logger.info(f"Duration:       {summary.duration_ms / 1000:.2f}s")
        logger.info("=" * 60)
        return summary


# ================================================================================
# Convenience Functions
# ================================================================================

def generate_allure_report(
    results_dir: str,
    output_dir: Optional[str] = None,
    open_report: bool = False
) -> bool:
    """
    Render the report for ``results_dir``, log its summary and archive history.

    Args:
        results_dir: Path to allure-results directory
        output_dir: Report directory, next to the results if None
        open_report: Serve the report with ``allure open`` afterwards

    Returns:
        True if the report was rendered
    """
    processor = AllureReportProcessor(
        Path(results_dir),
        Path(output_dir) if output_dir else None
    )

    if not processor.generate_report():
        return False

    processor.print_summary()
    processor.save_history()

    if open_report:
        subprocess.run(["allure", "open", str(processor.report_dir)])
    return True
