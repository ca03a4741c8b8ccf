"""Test fixtures for SysrootKit tests.

This package provides reusable pytest fixtures for testing SysrootKit components.
Fixtures are organized by type:

- toolchains: Mock rustc sysroots, rust-src trees, fake locator and fake cargo
- projects: Consuming Cargo projects (minimal, with sysroot metadata)

Import fixtures in your tests using:
    from tests.fixtures.toolchains import mock_host_sysroot
    from tests.fixtures.projects import cargo_project_with_sysroot
"""

__all__ = [
    "toolchains",
    "projects",
]
