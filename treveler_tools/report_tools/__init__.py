"""Allure attachment helpers and report post-processing."""

from .allure_utils import (
    AllureReportProcessor,
    TestResultSummary,
    attach_json,
    attach_request_response,
    attach_step_details,
    attach_text,
    generate_allure_report,
    mask_headers,
)

__all__ = [
    "AllureReportProcessor",
    "TestResultSummary",
    "attach_json",
    "attach_request_response",
    "attach_step_details",
    "attach_text",
    "generate_allure_report",
    "mask_headers",
]
