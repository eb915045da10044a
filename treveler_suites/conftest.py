"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the markers shared by the API and unit suites and tags collected
items by directory.

================================================================================
"""

from pathlib import Path

import pytest


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
        "markers", "unit: Offline tests against a fake backend"
    )
    config.addinivalue_line(
        "markers", "api: Tests against the live API"
    )
    config.addinivalue_line(
        "markers", "requires_external: Tests requiring a live backend"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "hotel: Tests related to hotels, locations and stays"
    )
    config.addinivalue_line(
        "markers", "event: Tests related to events and comments"
    )
    config.addinivalue_line(
        "markers", "user: Tests related to user profiles"
    )


def pytest_collection_modifyitems(config, items):
    """Tag items by the directory they live in."""
    for item in items:
        parts = Path(str(item.fspath)).parts
        if "api_testing" in parts:
            item.add_marker(pytest.mark.api)
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Treveler API Automation Suite",
        "=" * 60,
        "",
    ]
