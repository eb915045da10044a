"""
Repository-level pytest configuration.

  - Demo-safe environment defaults (no secrets embedded)
  - The --run-external switch: tests marked ``requires_external`` talk to a
    live Treveler backend and are skipped unless it is given (or
    RUN_EXTERNAL_TESTS=1 is set)
  - Logger initialization for every run

Values below are placeholders. Real projects should load secrets from a
secure secret manager in CI/CD.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from treveler_tools.common import init_logger


def pytest_addoption(parser):
    parser.addoption(
        "--run-external",
        action="store_true",
        default=False,
        help="Run tests marked requires_external against a live backend",
    )


def _external_enabled(config) -> bool:
    if config.getoption("--run-external"):
        return True
    return os.getenv("RUN_EXTERNAL_TESTS", "").lower() in ("1", "true", "yes")


def pytest_collection_modifyitems(config, items):
    if _external_enabled(config):
        return

    skip_external = pytest.mark.skip(
        reason="needs a live backend (use --run-external or RUN_EXTERNAL_TESTS=1)"
    )
    for item in items:
        if "requires_external" in item.keywords:
            item.add_marker(skip_external)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _demo_safe_env_defaults() -> Generator[None, None, None]:
    """
    Set demo-safe environment defaults if not already provided by the user/CI.
    """
    defaults = {
        "API_BASE_URL": "http://localhost:8000",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    init_logger()
    yield
