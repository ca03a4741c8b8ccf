"""
Core functionality for SysrootKit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    SysrootKitError,
    ConfigurationError,
    MissingTargetError,
    PathNotFoundError,
    ProjectManifestError,
    ToolchainProbeError,
    SysrootIOError,
    BuildError,
    CompileError,
    BuildToolNotFoundError,
    ArtifactError,
)

__all__ = [
    "SysrootKitError",
    "ConfigurationError",
    "MissingTargetError",
    "PathNotFoundError",
    "ProjectManifestError",
    "ToolchainProbeError",
    "SysrootIOError",
    "BuildError",
    "CompileError",
    "BuildToolNotFoundError",
    "ArtifactError",
]
