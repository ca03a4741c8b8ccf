"""Reader for the consuming project's Cargo.toml.

Only two things are taken from it: the ``[profile]`` table, so the sysroot
crates are built with matching settings, and
``package.metadata.cargo-sysroot.target``, the default build target.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

from ..core.exceptions import ProjectManifestError

logger = logging.getLogger(__name__)

METADATA_KEY = "cargo-sysroot"


@dataclass
class ProjectManifest:
    """Parsed project manifest."""

    path: Path
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def profile(self) -> Optional[Dict[str, Any]]:
        """The ``[profile]`` table, or None if the manifest has none."""
        profile = self.data.get("profile")
        if profile is None:
            return None
        if not isinstance(profile, dict):
            raise ProjectManifestError(self.path, "[profile] is not a table")
        return profile

    @property
    def sysroot_target(self) -> Optional[str]:
        """``package.metadata.cargo-sysroot.target`` if present, else None."""
        try:
            return self.require_sysroot_target()
        except ProjectManifestError:
            return None

    def require_sysroot_target(self) -> str:
        """
        Get the sysroot target from package metadata.

        Returns:
            The configured target (triple or target-spec path)

        Raises:
            ProjectManifestError: Naming the first missing key or a bad type
        """
        package = self.data.get("package") or {}
        if not isinstance(package, dict):
            raise ProjectManifestError(self.path, "[package] is not a table")
        metadata = package.get("metadata")
        if metadata is None:
            raise ProjectManifestError(self.path, "Missing package metadata")
        if not isinstance(metadata, dict):
            raise ProjectManifestError(self.path, "package metadata is not a table")
        sysroot = metadata.get(METADATA_KEY)
        if sysroot is None:
            raise ProjectManifestError(self.path, f"Missing {METADATA_KEY} metadata")
        if not isinstance(sysroot, dict):
            raise ProjectManifestError(
                self.path, f"{METADATA_KEY} metadata is not a table"
            )
        if "target" not in sysroot:
            raise ProjectManifestError(self.path, f"Missing {METADATA_KEY} target")
        target = sysroot["target"]
        if not isinstance(target, str):
            raise ProjectManifestError(
                self.path, f"{METADATA_KEY} target field was not a string"
            )
        return target


def load_project_manifest(path: Union[str, Path]) -> ProjectManifest:
    """
    Parse a project Cargo.toml.

    Args:
        path: Path to Cargo.toml

    Returns:
        Parsed manifest

    Raises:
        ProjectManifestError: If the file cannot be read or is not valid TOML
    """
    path = Path(path)
    logger.debug(f"Loading project manifest from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except toml.TomlDecodeError as e:
        raise ProjectManifestError(path, f"Invalid TOML: {e}") from e
    except OSError as e:
        raise ProjectManifestError(path, f"Couldn't read manifest: {e}") from e

    return ProjectManifest(path=path, data=data)
