"""
Sysroot building for SysrootKit.

This package generates the sysroot Cargo.toml, drives cargo, and stages
the resulting crates and the host tools into the sysroot layout.
"""

from sysrootkit.sysroot.crates import CrateTier, Feature, artifact_dir, target_stem
from sysrootkit.sysroot.options import SysrootConfig
from sysrootkit.sysroot.manifest import ManifestSynthesizer, build_manifest
from sysrootkit.sysroot.driver import BuildDriver, compose_rustflags
from sysrootkit.sysroot.collector import ArtifactCollector
from sysrootkit.sysroot.staging import HostToolStager
from sysrootkit.sysroot.builder import BuildStage, SysrootBuild, SysrootBuilder

__all__ = [
    "CrateTier",
    "Feature",
    "artifact_dir",
    "target_stem",
    "SysrootConfig",
    "ManifestSynthesizer",
    "build_manifest",
    "BuildDriver",
    "compose_rustflags",
    "ArtifactCollector",
    "HostToolStager",
    "BuildStage",
    "SysrootBuild",
    "SysrootBuilder",
]
