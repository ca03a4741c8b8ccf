"""
Cargo manifest synthesis for sysroot builds.

The generated crate has no code of its own. It exists to declare a
dependency on the requested sysroot crate, pointing into the rust-src
tree, so that cargo builds that crate and everything below it.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

from ..config.project import load_project_manifest
from ..core.filesystem import atomic_write
from .crates import FEATURE_ORDER, CrateTier
from .options import SysrootConfig

logger = logging.getLogger(__name__)

STUB_SOURCE = "#![feature(no_core)]\n#![no_core]\n"
STUB_NAME = "lib.rs"
MANIFEST_NAME = "Cargo.toml"

COMPILER_BUILTINS_VERSION = "0.1"
RUSTC_DEP_OF_STD = "rustc-dep-of-std"
WORKSPACE_CORE = "rustc-std-workspace-core"


class ManifestSynthesizer:
    """Writes the sysroot ``Cargo.toml`` and its ``lib.rs`` stub."""

    def synthesize(self, config: SysrootConfig, rust_src: Path) -> Path:
        """
        Write ``lib.rs`` and ``Cargo.toml`` into the output directory.

        Args:
            config: Build configuration
            rust_src: Resolved rust-src ``library`` directory

        Returns:
            Path to the written Cargo.toml

        Raises:
            SysrootIOError: If either file cannot be written
            ProjectManifestError: If the project manifest cannot be parsed
        """
        atomic_write(config.output / STUB_NAME, STUB_SOURCE)

        profile = None
        if config.manifest is not None:
            profile = load_project_manifest(config.manifest).profile

        manifest = build_manifest(config, rust_src, profile)
        path = config.output / MANIFEST_NAME
        atomic_write(path, toml.dumps(manifest))
        logger.debug(f"Wrote sysroot manifest for {config.tier.value} to {path}")
        return path


def build_manifest(
    config: SysrootConfig,
    rust_src: Path,
    profile: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the manifest as a plain dictionary.

    Args:
        config: Build configuration (tier and features are used)
        rust_src: rust-src ``library`` directory
        profile: ``[profile]`` table to copy, if any

    Returns:
        Manifest dictionary ready for ``toml.dumps``
    """
    manifest: Dict[str, Any] = {
        "package": {
            "name": "sysroot",
            "version": "0.0.0",
            "authors": ["The Rust Project Developers"],
            "edition": "2018",
            "autotests": False,
            "autobenches": False,
        },
        "lib": {
            "name": "sysroot",
            "path": STUB_NAME,
        },
        "dependencies": tier_dependencies(config, rust_src),
    }

    if config.tier is not CrateTier.CORE:
        # compiler_builtins comes from crates.io and depends on the
        # placeholder crate; redirect it to the local core.
        manifest["patch"] = {
            "crates-io": {
                WORKSPACE_CORE: {"path": str(rust_src / WORKSPACE_CORE)},
            }
        }

    if profile:
        manifest["profile"] = profile

    return manifest


def tier_dependencies(config: SysrootConfig, rust_src: Path) -> Dict[str, Any]:
    """The single dependency declaration for the configured tier."""
    tier = config.tier

    if tier is CrateTier.CORE:
        return {"core": {"path": str(rust_src / "core")}}

    if tier is CrateTier.COMPILER_BUILTINS:
        features = [RUSTC_DEP_OF_STD] + [
            f.value for f in FEATURE_ORDER if f in config.features
        ]
        return {
            "compiler_builtins": {
                "version": COMPILER_BUILTINS_VERSION,
                "features": features,
            }
        }

    dependency: Dict[str, Any] = {"path": str(rust_src / tier.value)}
    passthrough = _passthrough_features(config)
    if passthrough:
        dependency["features"] = passthrough
    return {tier.value: dependency}


def _passthrough_features(config: SysrootConfig) -> List[str]:
    return [f.passthrough for f in FEATURE_ORDER if f in config.features]
