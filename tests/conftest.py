"""
Pytest configuration and shared fixtures for OdinKit tests.
"""

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.inputs import (
    make_request,
    install_path,
)
from tests.fixtures.platforms import (
    linux_platform,
    macos_platform,
    windows_platform,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that need git and network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def run_state():
    """In-memory run state."""
    from odinkit.core.state import MemoryRunState

    return MemoryRunState()


@pytest.fixture
def isolated_environment(tmp_path, monkeypatch):
    """
    Run outside of GitHub Actions with no INPUT_* variables and an empty cwd.
    """
    import os

    for variable in list(os.environ):
        if variable.startswith(("INPUT_", "STATE_", "GITHUB_")):
            monkeypatch.delenv(variable, raising=False)
    monkeypatch.delenv("RUNNER_TOOL_CACHE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
