"""
================================================================================
Treveler Tools Common Utilities
================================================================================

Shared configuration and logging setup for the automation tooling.

Exports:
    - get_config / set_config: dot-path configuration access
    - init_logger: loguru setup with standard settings

Usage:
    from treveler_tools.common import get_config, init_logger

    init_logger()
    results_dir = get_config("report.results_dir", "reports/allure-results")

================================================================================
"""

from .global_config import (
    get_config,
    init_logger,
    set_config,
)

__all__ = [
    "get_config",
    "init_logger",
    "set_config",
]
