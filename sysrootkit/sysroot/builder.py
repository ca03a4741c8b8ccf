"""
Sysroot build orchestration.

``SysrootBuilder`` collects configuration fluently; ``build()`` freezes it
into a ``SysrootConfig`` and runs a ``SysrootBuild`` over it:

    validate -> resolve rust-src -> create directories -> write manifest
    -> compile -> collect artifacts -> stage host tools

Any failure stops the sequence and propagates. Nothing is rolled back;
a later build reuses or overwrites whatever was left behind.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..core.exceptions import ArtifactError, PathNotFoundError
from ..core.filesystem import ensure_directory
from ..toolchain.locator import HostToolchainLocator
from .collector import ArtifactCollector
from .crates import CrateTier, Feature
from .driver import BuildDriver
from .manifest import ManifestSynthesizer
from .options import SysrootConfig
from .staging import HostToolStager

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("target") / "sysroot"


class BuildStage(Enum):
    """Progress of a sysroot build, in order."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    VALIDATED = "validated"
    SOURCE_RESOLVED = "source resolved"
    DIRECTORIES_PREPARED = "directories prepared"
    MANIFEST_WRITTEN = "manifest written"
    COMPILED = "compiled"
    ARTIFACTS_STAGED = "artifacts staged"
    DONE = "done"


class SysrootBuild:
    """
    One run of the sysroot build over a configuration snapshot.

    ``stage`` always names the last stage that completed, so after a
    failure it tells where the build stopped.
    """

    def __init__(
        self,
        config: SysrootConfig,
        locator: Optional[HostToolchainLocator] = None,
        synthesizer: Optional[ManifestSynthesizer] = None,
        driver: Optional[BuildDriver] = None,
        collector: Optional[ArtifactCollector] = None,
        stager: Optional[HostToolStager] = None,
    ):
        self.config = config
        self.locator = locator or HostToolchainLocator()
        self.synthesizer = synthesizer or ManifestSynthesizer()
        self.driver = driver or BuildDriver()
        self.collector = collector or ArtifactCollector()
        self.stager = stager or HostToolStager(self.locator)
        self.stage = BuildStage.CONFIGURED
        self.rust_src: Optional[Path] = None
        self.manifest_path: Optional[Path] = None
        self.artifacts: List[Path] = []

    def _advance(self, stage: BuildStage) -> None:
        self.stage = stage
        logger.debug(f"Sysroot build stage: {stage.value}")

    def run(self) -> Path:
        """
        Build the sysroot.

        Returns:
            Absolute path to the sysroot, suitable for ``--sysroot``

        Raises:
            SysrootKitError: Whatever the failing step raised
        """
        config = self.config

        config.validate()
        self._advance(BuildStage.VALIDATED)

        rust_src = config.rust_src
        if rust_src is None:
            rust_src = self.locator.resolve_source_tree()
            if not rust_src.exists():
                raise PathNotFoundError("Rust source directory (rust-src)", rust_src)
        self.rust_src = rust_src.resolve()
        self._advance(BuildStage.SOURCE_RESOLVED)

        ensure_directory(config.output)
        ensure_directory(config.artifact_dir)
        self._advance(BuildStage.DIRECTORIES_PREPARED)

        self.manifest_path = self.synthesizer.synthesize(config, self.rust_src)
        self._advance(BuildStage.MANIFEST_WRITTEN)

        logger.info(
            f"Building sysroot crate {config.tier.value} for {config.target}"
        )
        self.driver.compile(self.manifest_path, config)
        self._advance(BuildStage.COMPILED)

        self.artifacts = self.collector.collect(config)
        if not self.artifacts:
            raise ArtifactError(
                f"No sysroot artifacts found in {config.deps_dir}"
            )
        self._advance(BuildStage.ARTIFACTS_STAGED)

        # Copy host tools to the new sysroot, so that stuff like proc-macros
        # and testing can work.
        self.stager.stage_host_tools(config.output)
        self._advance(BuildStage.DONE)

        sysroot = config.output.resolve()
        logger.info(f"Sysroot ready at {sysroot}")
        return sysroot


class SysrootBuilder:
    """
    Fluent configuration for a sysroot build.

    Example:
        >>> sysroot = (
        ...     SysrootBuilder(CrateTier.ALLOC)
        ...     .output(Path("target/sysroot"))
        ...     .target("x86_64-unknown-uefi")
        ...     .features([Feature.COMPILER_BUILTINS_MEM])
        ...     .build()
        ... )
    """

    def __init__(self, tier: CrateTier):
        self._tier = tier
        self._manifest: Optional[Path] = None
        self._output: Path = DEFAULT_OUTPUT
        self._target: Optional[str] = None
        self._rust_src: Optional[Path] = None
        self._features: set = set()
        self._rustc_flags: List[str] = []

    def manifest(self, manifest: Union[str, Path]) -> "SysrootBuilder":
        """Project Cargo.toml whose ``[profile]`` the sysroot should use."""
        self._manifest = Path(manifest)
        return self

    def output(self, output: Union[str, Path]) -> "SysrootBuilder":
        """Sysroot output directory (default ``target/sysroot``)."""
        self._output = Path(output)
        return self

    def target(self, target: Union[str, Path]) -> "SysrootBuilder":
        """Builtin target triple or path to a target-spec JSON file."""
        self._target = str(target)
        return self

    def rust_src(self, rust_src: Union[str, Path]) -> "SysrootBuilder":
        """rust-src ``library`` directory, instead of the rustup component."""
        self._rust_src = Path(rust_src)
        return self

    def features(self, features: Iterable[Feature]) -> "SysrootBuilder":
        """Replace the feature set."""
        self._features = set(features)
        return self

    def rustc_flags(self, flags: Iterable[str]) -> "SysrootBuilder":
        """Append flags to RUSTFLAGS for the sysroot build."""
        self._rustc_flags.extend(str(f) for f in flags)
        return self

    @property
    def stage(self) -> BuildStage:
        return BuildStage.CONFIGURED if self._target else BuildStage.UNCONFIGURED

    def snapshot(self) -> SysrootConfig:
        """Freeze the current settings."""
        return SysrootConfig(
            tier=self._tier,
            output=self._output.absolute(),
            target=self._target,
            manifest=self._manifest,
            rust_src=self._rust_src,
            features=frozenset(self._features),
            rustc_flags=tuple(self._rustc_flags),
        )

    def build(self, **collaborators) -> Path:
        """
        Build the sysroot.

        Keyword arguments are passed to ``SysrootBuild`` (locator, driver...).

        Returns:
            Absolute path to the sysroot
        """
        return SysrootBuild(self.snapshot(), **collaborators).run()
