"""
Pytest configuration and shared fixtures for SysrootKit tests.
"""

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.toolchains import (
    mock_host_sysroot,
    fake_locator,
    rust_src,
    fake_cargo,
)
from tests.fixtures.projects import (
    minimal_cargo_project,
    cargo_project_with_sysroot,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require a nightly Rust toolchain",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


@pytest.fixture
def clean_rust_env(monkeypatch):
    """Remove cargo/rustc environment overrides for the test."""
    for var in ("CARGO", "RUSTC", "RUSTFLAGS"):
        monkeypatch.delenv(var, raising=False)
