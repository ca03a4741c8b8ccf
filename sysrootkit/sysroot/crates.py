"""
Sysroot crate tiers, feature flags and on-disk layout.

The tiers form a fixed hierarchy: building one pulls in every lower tier
through its own dependencies, so only the requested tier is declared.
"""

from enum import Enum
from pathlib import Path
from typing import Union


class CrateTier(Enum):
    """Which sysroot crate to build."""

    CORE = "core"
    COMPILER_BUILTINS = "compiler_builtins"
    ALLOC = "alloc"
    STD = "std"

    @classmethod
    def parse(cls, name: str) -> "CrateTier":
        """
        Look up a tier by name.

        Accepts ``compiler-builtins`` as an alias for ``compiler_builtins``.

        Raises:
            ValueError: If the name is not a known tier
        """
        normalized = name.strip().lower().replace("-", "_")
        for tier in cls:
            if tier.value == normalized:
                return tier
        valid = ", ".join(t.value for t in cls)
        raise ValueError(f"Unknown sysroot crate '{name}' (expected one of {valid})")


class Feature(Enum):
    """
    Feature flags forwarded to compiler_builtins.

    The value is the compiler_builtins feature; ``passthrough`` is the name
    alloc and std use to forward it.
    """

    COMPILER_BUILTINS_MEM = "mem"
    COMPILER_BUILTINS_C = "c"
    COMPILER_BUILTINS_NO_ASM = "no-asm"

    @property
    def passthrough(self) -> str:
        return f"compiler-builtins-{self.value}"

    @classmethod
    def parse(cls, name: str) -> "Feature":
        """
        Look up a feature by its compiler_builtins name or passthrough name.

        Raises:
            ValueError: If the name is not a known feature
        """
        normalized = name.strip().lower()
        for feature in cls:
            if normalized in (feature.value, feature.passthrough):
                return feature
        valid = ", ".join(f.value for f in cls)
        raise ValueError(f"Unknown feature '{name}' (expected one of {valid})")


# Fixed emission order, so manifests are byte-for-byte reproducible
FEATURE_ORDER = (
    Feature.COMPILER_BUILTINS_MEM,
    Feature.COMPILER_BUILTINS_C,
    Feature.COMPILER_BUILTINS_NO_ASM,
)


def target_stem(target: Union[str, Path]) -> str:
    """
    Name of the target as used in directory names.

    ``x86_64-unknown-uefi`` stays as is; ``specs/my-target.json`` becomes
    ``my-target``.
    """
    stem = Path(target).stem
    if not stem:
        raise ValueError(f"Failed to parse target triple: {target!r}")
    return stem


def is_target_path(target: Union[str, Path]) -> bool:
    """True if the target names a target-spec file rather than a builtin triple."""
    return Path(target).suffix != ""


def rustlib_dir(sysroot: Path) -> Path:
    """``<sysroot>/lib/rustlib``."""
    return Path(sysroot) / "lib" / "rustlib"


def artifact_dir(sysroot: Path, target: Union[str, Path]) -> Path:
    """``<sysroot>/lib/rustlib/<target-stem>/lib``, where built crates go."""
    return rustlib_dir(sysroot) / target_stem(target) / "lib"
