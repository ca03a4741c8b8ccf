"""
Sysroot build configuration snapshot.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from ..core.exceptions import MissingTargetError, PathNotFoundError
from .crates import CrateTier, Feature, artifact_dir, is_target_path, target_stem


@dataclass(frozen=True)
class SysrootConfig:
    """Immutable configuration consumed by one sysroot build.

    Attributes:
        tier: Sysroot crate to build (lower tiers come along as dependencies)
        output: Sysroot output directory
        target: Builtin target triple or path to a target-spec JSON file
        manifest: Optional project Cargo.toml to take ``[profile]`` from
        rust_src: rust-src ``library`` directory (auto-detected if None)
        features: compiler_builtins feature flags
        rustc_flags: Extra flags appended to RUSTFLAGS, in order
    """

    tier: CrateTier
    output: Path
    target: Optional[str] = None
    manifest: Optional[Path] = None
    rust_src: Optional[Path] = None
    features: FrozenSet[Feature] = field(default_factory=frozenset)
    rustc_flags: Tuple[str, ...] = ()

    def validate(self) -> None:
        """
        Check the configuration without touching the filesystem beyond stat.

        Raises:
            MissingTargetError: If no target is set
            PathNotFoundError: If a configured path does not exist
        """
        if not self.target:
            raise MissingTargetError()

        if self.manifest is not None and not self.manifest.exists():
            raise PathNotFoundError("Cargo manifest", self.manifest)

        if self.rust_src is not None and not self.rust_src.exists():
            raise PathNotFoundError("Rust source directory", self.rust_src)

        if self.target_is_path and not Path(self.target).exists():
            raise PathNotFoundError("Target specification", self.target)

    def require_target(self) -> str:
        if not self.target:
            raise MissingTargetError()
        return self.target

    @property
    def target_is_path(self) -> bool:
        return bool(self.target) and is_target_path(self.target)

    @property
    def target_stem(self) -> str:
        return target_stem(self.require_target())

    @property
    def target_dir(self) -> Path:
        """Cargo scratch directory, ``<output>/target``."""
        return self.output / "target"

    @property
    def artifact_dir(self) -> Path:
        return artifact_dir(self.output, self.require_target())

    @property
    def deps_dir(self) -> Path:
        """Where cargo leaves the compiled crates."""
        return self.target_dir / self.target_stem / "release" / "deps"
