"""Root pytest configuration for test discovery and auto-skip behavior.

All tests stay visible to the test explorer while integration tests
(Testcontainers PostgreSQL) are auto-skipped unless explicitly enabled.

Test Structure:
    tests/
    ├── keygate_auth/          # Password hashing and signed tokens
    ├── keygate_config/        # Settings
    ├── keygate_identity/      # Identity domain (users, verification, login)
    │   ├── unit/              # Fast, isolated tests (SQLite in memory)
    │   └── integration/       # Tests with Testcontainers PostgreSQL
    ├── cross_domain/
    │   └── e2e/               # Full user journeys through the composition root
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os

import pytest

from keygate_config import clear_settings_cache

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that verify database/persistence behavior (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


def _flag_enabled(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if config.getoption("--run-all") or _flag_enabled("RUN_ALL_TESTS"):
        return

    if config.getoption("--run-integration") or _flag_enabled("RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )

    for item in items:
        # Explicit marker only, not folder name
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def configure_app_settings(monkeypatch):
    """Give every test a known signing secret and a fresh settings cache."""
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_JWT_SECRET)
    clear_settings_cache()
    yield
    clear_settings_cache()
