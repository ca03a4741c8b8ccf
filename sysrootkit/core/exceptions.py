"""
Centralized exception hierarchy for SysrootKit.

This module defines all custom exceptions used across the codebase
so that callers can catch a single base class while still telling
configuration, probe, I/O, compile and artifact failures apart.
"""

from pathlib import Path
from typing import Optional, Union


# ============================================================================
# Base Exceptions
# ============================================================================


class SysrootKitError(Exception):
    """Base exception for all SysrootKit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(SysrootKitError):
    """Base exception for invalid sysroot build configuration."""

    pass


class MissingTargetError(ConfigurationError):
    """Raised when a build is requested without a target."""

    def __init__(self):
        super().__init__("No target specified for sysroot build")


class PathNotFoundError(ConfigurationError):
    """Raised when a configured path does not exist."""

    def __init__(self, kind: str, path: Union[str, Path]):
        self.kind = kind
        self.path = Path(path)
        super().__init__(f"{kind} does not exist: {self.path}")


class ProjectManifestError(ConfigurationError):
    """Raised when the project's Cargo.toml cannot be read or lacks a field."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


# ============================================================================
# Toolchain Exceptions
# ============================================================================


class ToolchainProbeError(SysrootKitError):
    """Raised when querying the host rustc fails."""

    pass


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class SysrootIOError(SysrootKitError):
    """Filesystem operation failed; carries the path(s) involved."""

    def __init__(
        self,
        message: str,
        path: Union[str, Path],
        destination: Optional[Union[str, Path]] = None,
    ):
        self.path = Path(path)
        self.destination = Path(destination) if destination is not None else None
        super().__init__(message)


# ============================================================================
# Build Exceptions
# ============================================================================


class BuildError(SysrootKitError):
    """Base exception for failures of the external build tool."""

    pass


class CompileError(BuildError):
    """Raised when cargo exits unsuccessfully."""

    def __init__(self, exit_code: Optional[int]):
        self.exit_code = exit_code
        if exit_code is None:
            msg = "Sysroot build failed: cargo was terminated by a signal"
        else:
            msg = f"Sysroot build failed: cargo exited with code {exit_code}"
        super().__init__(msg)


class BuildToolNotFoundError(BuildError):
    """Raised when the build tool executable cannot be spawned."""

    def __init__(self, tool: str, reason: str = ""):
        self.tool = tool
        msg = f"Could not run build tool: {tool}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Artifact Exceptions
# ============================================================================


class ArtifactError(SysrootKitError):
    """Raised when compiled artifacts cannot be located or named."""

    pass
