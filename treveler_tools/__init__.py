"""
================================================================================
Treveler Tools
================================================================================

Automation utilities around the Treveler API suites.

Modules:
    - common: Shared configuration and logging utilities
    - report_tools: Allure attachments and report generation

Example:
    from treveler_tools.common import init_logger
    from treveler_tools.report_tools import generate_allure_report

    init_logger()
    generate_allure_report("reports/allure-results")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
