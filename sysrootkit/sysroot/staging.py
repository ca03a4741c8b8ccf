"""
Host tool staging.

Host tools such as rust-lld need to be in the sysroot to link correctly,
and proc-macros and tests need the host's own libraries. The whole host
target directory is copied into the new sysroot.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from ..core.exceptions import SysrootIOError
from ..core.filesystem import atomic_write, directory_mtime, recursive_copy
from ..toolchain.locator import HostToolchainLocator
from .crates import rustlib_dir

logger = logging.getLogger(__name__)

# Written into the staged directory once a copy completes
STAGED_MARKER = ".sysrootkit-host-tools"


class HostToolStager:
    """Copies ``<host-sysroot>/lib/rustlib/<host>`` into a sysroot when stale."""

    def __init__(self, locator: Optional[HostToolchainLocator] = None):
        self.locator = locator or HostToolchainLocator()

    def stage_host_tools(self, output_dir: Path) -> bool:
        """
        Copy the host target directory into ``output_dir`` if out of date.

        The staged copy is up to date when it holds the staging marker and
        its modification time is strictly newer than the installed one's.
        This is a heuristic: skewed clocks can make it skip a needed copy.
        The marker matters when the build target is the host triple, since
        the artifact directory then creates the destination before staging.

        Args:
            output_dir: Sysroot directory

        Returns:
            True if files were copied, False if staging was skipped

        Raises:
            ToolchainProbeError: If the host toolchain cannot be queried
            SysrootIOError: If metadata cannot be read or the copy fails
        """
        host = self.locator.host_triple()
        src = self.locator.resolve_target_libdir().parent
        dest = rustlib_dir(output_dir) / host
        marker = dest / STAGED_MARKER

        src_mtime = directory_mtime(src)
        if src_mtime is None:
            raise SysrootIOError(f"Couldn't get metadata for {src}", src)

        # If our host tools dir doesn't exist it always needs updating.
        dest_mtime = directory_mtime(dest)
        if dest_mtime is not None and dest_mtime > src_mtime and marker.exists():
            logger.debug(f"Host tools for {host} are up to date in {dest}")
            return False

        logger.info(f"Copying host tools for {host} to {dest}")
        recursive_copy(src, dest, symlinks=True)
        atomic_write(marker, f"{src}\n")

        # Overwriting files in place leaves the directory mtime alone
        try:
            os.utime(dest)
        except OSError as e:
            raise SysrootIOError(
                f"Couldn't update modification time for {dest}: {e}", dest
            ) from e
        return True
