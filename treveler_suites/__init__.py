"""
Treveler test suites package.

Kept importable so that:
  - the shared fixtures and framework resolve with absolute imports
  - programmatic runners (e.g., `run_tests.py`) can locate the suites
  - CI/CD jobs can import the framework directly

All content is demo-safe and does not include production secrets.
"""
