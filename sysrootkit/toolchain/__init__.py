"""
Host toolchain module for SysrootKit.

Locates the installed rustc, its rust-src component and its host libraries.
"""

from .locator import HostToolchainLocator, RUST_SRC_RELATIVE, default_rustc

__all__ = [
    "HostToolchainLocator",
    "RUST_SRC_RELATIVE",
    "default_rustc",
]
