"""
Cargo invocation for sysroot builds.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from ..core.exceptions import BuildToolNotFoundError, CompileError
from .options import SysrootConfig

logger = logging.getLogger(__name__)

EMBED_BITCODE_FLAG = "-Cembed-bitcode=yes"


def default_cargo() -> str:
    """Return the cargo executable (``$CARGO`` or ``cargo``)."""
    return os.environ.get("CARGO") or "cargo"


def resolve_target_arg(config: SysrootConfig) -> str:
    """
    The value passed to ``--target``.

    Target-spec paths are canonicalized. If that fails the raw value is
    used, on the assumption that it names a builtin target.
    """
    target = config.require_target()
    if not config.target_is_path:
        return target
    try:
        return str(Path(target).resolve(strict=True))
    except OSError as e:
        logger.debug(f"Couldn't canonicalize target {target} ({e}), assuming builtin")
        return target


def compose_rustflags(
    extra_flags: List[str], environ: Optional[Mapping[str, str]] = None
) -> str:
    """
    Compose RUSTFLAGS for the sysroot build.

    Order: the embed-bitcode flag, inherited RUSTFLAGS, then ``extra_flags``.
    Later flags win, so caller flags take precedence.
    """
    environ = os.environ if environ is None else environ
    flags = [EMBED_BITCODE_FLAG]
    inherited = environ.get("RUSTFLAGS", "").strip()
    if inherited:
        flags.append(inherited)
    flags.extend(extra_flags)
    return " ".join(flags)


class BuildDriver:
    """Runs ``cargo rustc`` on the synthesized manifest."""

    def __init__(self, cargo: Optional[str] = None):
        """
        Initialize driver.

        Args:
            cargo: cargo executable (defaults to $CARGO, then ``cargo``)
        """
        self.cargo = cargo or default_cargo()

    def command(self, manifest_path: Path, config: SysrootConfig) -> List[str]:
        """Build the cargo command line."""
        return [
            self.cargo,
            "rustc",
            "--release",
            "--target",
            resolve_target_arg(config),
            "--target-dir",
            str(config.target_dir),
            "--manifest-path",
            str(manifest_path),
            "--",  # Pass to rustc directly.
            "-Z",
            # Sysroot crates use unstable features without staged_api markers
            "force-unstable-if-unmarked",
        ]

    def compile(self, manifest_path: Path, config: SysrootConfig) -> None:
        """
        Compile the sysroot crates.

        Blocks until cargo exits. There is no timeout.

        Args:
            manifest_path: Synthesized Cargo.toml
            config: Build configuration

        Raises:
            BuildToolNotFoundError: If cargo cannot be started
            CompileError: If cargo exits non-zero or is killed by a signal
        """
        cmd = self.command(manifest_path, config)
        env = dict(os.environ)
        env["RUSTFLAGS"] = compose_rustflags(list(config.rustc_flags))

        logger.debug(f"Running: {' '.join(cmd)}")
        logger.debug(f"RUSTFLAGS={env['RUSTFLAGS']}")

        try:
            result = subprocess.run(cmd, env=env, check=False)
        except OSError as e:
            raise BuildToolNotFoundError(self.cargo, str(e)) from e

        if result.returncode != 0:
            # Negative return codes mean the process was killed by a signal
            exit_code = result.returncode if result.returncode > 0 else None
            raise CompileError(exit_code)
