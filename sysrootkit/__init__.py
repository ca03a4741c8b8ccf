"""
SysrootKit - build Rust sysroot crates for custom targets.

Compiles core, compiler_builtins, alloc and optionally std from the
rust-src component for a non-default target, and lays them out as a
sysroot that rustc can use via ``--sysroot``.

Example:
    >>> from sysrootkit import SysrootBuilder, CrateTier
    >>> sysroot = (
    ...     SysrootBuilder(CrateTier.ALLOC)
    ...     .target("x86_64-unknown-uefi")
    ...     .build()
    ... )
"""

from sysrootkit.core.exceptions import (
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
from sysrootkit.sysroot import (
    CrateTier,
    Feature,
    SysrootConfig,
    BuildStage,
    SysrootBuild,
    SysrootBuilder,
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
    "CrateTier",
    "Feature",
    "SysrootConfig",
    "BuildStage",
    "SysrootBuild",
    "SysrootBuilder",
]
