"""
Collect compiled sysroot crates into the sysroot layout.
"""

import logging
import os
from pathlib import Path
from typing import List

from ..core.exceptions import ArtifactError
from ..core.filesystem import copy_file, ensure_directory
from .options import SysrootConfig

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "lib"


class ArtifactCollector:
    """Copies ``lib*`` files from cargo's deps directory into the sysroot."""

    def collect(self, config: SysrootConfig) -> List[Path]:
        """
        Copy artifacts to the sysroot.

        Only the name prefix is checked; the files themselves are not
        inspected.

        Args:
            config: Build configuration

        Returns:
            Paths of the copied artifacts, in directory order

        Raises:
            ArtifactError: If the deps directory cannot be read or a file
                name is not valid UTF-8
            SysrootIOError: If a copy fails
        """
        deps_dir = config.deps_dir
        dest_dir = ensure_directory(config.artifact_dir)

        try:
            # Bytes names, so undecodable ones are detected rather than escaped
            names = os.listdir(os.fsencode(deps_dir))
        except OSError as e:
            raise ArtifactError(
                f"Failure to read artifact directory {deps_dir}: {e}"
            ) from e

        copied = []
        for raw_name in names:
            try:
                name = raw_name.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ArtifactError(
                    f"Invalid Unicode in path: {os.fsdecode(raw_name)!r} in {deps_dir}"
                ) from e

            if not name.startswith(ARTIFACT_PREFIX):
                continue

            copied.append(copy_file(deps_dir / name, dest_dir / name))

        logger.debug(f"Copied {len(copied)} artifact(s) to {dest_dir}")
        return copied
