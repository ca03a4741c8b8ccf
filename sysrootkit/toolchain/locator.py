"""
sysrootkit/toolchain/locator.py

Host toolchain discovery - asks the installed rustc where it lives.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from ..core.exceptions import ToolchainProbeError

logger = logging.getLogger(__name__)

# Location of the rust-src component relative to the rustc sysroot
RUST_SRC_RELATIVE = Path("lib") / "rustlib" / "src" / "rust" / "library"


def default_rustc() -> str:
    """Return the rustc executable to probe (``$RUSTC`` or ``rustc``)."""
    return os.environ.get("RUSTC") or "rustc"


class HostToolchainLocator:
    """
    Query the host rustc for its installation layout.

    Runs ``rustc --print sysroot`` and ``rustc --print target-libdir`` and
    interprets their output as paths. No path returned here is checked for
    existence; callers validate what they use.
    """

    def __init__(self, rustc: Optional[str] = None):
        """
        Initialize locator.

        Args:
            rustc: rustc executable (defaults to $RUSTC, then ``rustc``)
        """
        self.rustc = rustc or default_rustc()

    def _print(self, what: str, extra: Optional[List[str]] = None) -> Path:
        cmd = [self.rustc, "--print", what] + (extra or [])
        logger.debug(f"Probing host toolchain: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, check=False)
        except OSError as e:
            raise ToolchainProbeError(f"Failed to run {self.rustc}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ToolchainProbeError(
                f"`{' '.join(cmd)}` exited with code {result.returncode}: {stderr}"
            )

        try:
            output = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ToolchainProbeError(
                f"Failed to convert {what} path to utf-8: {e}"
            ) from e

        return Path(output.strip())

    def rustc_sysroot(self) -> Path:
        """
        Get the configured rustc sysroot.

        This is the HOST sysroot, not the one being built.

        Returns:
            Path to the host rustc sysroot

        Raises:
            ToolchainProbeError: If rustc cannot be run or its output is not UTF-8
        """
        return self._print("sysroot")

    def resolve_source_tree(self) -> Path:
        """
        Get the ``rust-src`` component of the current toolchain.

        Returns:
            ``<sysroot>/lib/rustlib/src/rust/library``

        Raises:
            ToolchainProbeError: If rustc cannot be queried
        """
        rust_src = self.rustc_sysroot() / RUST_SRC_RELATIVE
        logger.debug(f"Resolved rust-src to {rust_src}")
        return rust_src

    def resolve_target_libdir(self, target: Optional[Union[str, Path]] = None) -> Path:
        """
        Get the library directory rustc uses for a target.

        Args:
            target: Optional ``--target`` override (host target if None)

        Returns:
            Path like ``<sysroot>/lib/rustlib/<triple>/lib``

        Raises:
            ToolchainProbeError: If rustc cannot be queried
        """
        extra = ["--target", str(target)] if target is not None else None
        return self._print("target-libdir", extra)

    def host_triple(self) -> str:
        """
        Get the host target triple.

        Taken from the name of the host target-libdir's parent directory.

        Returns:
            Triple such as ``x86_64-unknown-linux-gnu``

        Raises:
            ToolchainProbeError: If rustc cannot be queried or the path is unusable
        """
        libdir = self.resolve_target_libdir()
        host = libdir.parent.name
        if not host:
            raise ToolchainProbeError(
                f"Couldn't determine host triple from target-libdir {libdir}"
            )
        return host
