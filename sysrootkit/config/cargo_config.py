"""
Cargo configuration file generation.

Writes a ``.cargo/config.toml`` that points downstream builds at the
generated sysroot. An existing file is never modified.
"""

import logging
from pathlib import Path
from typing import Union

import toml

from ..core.exceptions import SysrootIOError
from ..core.filesystem import ensure_directory, write_new_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(".cargo")


def render_cargo_config(target: str, sysroot: Path) -> str:
    """
    Render the ``[build]`` section used by downstream builds.

    Args:
        target: Target triple or target-spec path, passed through verbatim
        sysroot: Absolute sysroot path

    Returns:
        TOML text
    """
    config = {
        "build": {
            "target": target,
            "rustflags": ["--sysroot", str(sysroot)],
        }
    }
    return toml.dumps(config)


def generate_cargo_config(
    target: Union[str, Path],
    sysroot: Union[str, Path],
    config_dir: Union[str, Path] = DEFAULT_CONFIG_DIR,
) -> bool:
    """
    Create ``config.toml`` to use our target and sysroot.

    Args:
        target: Target triple or target-spec path
        sysroot: Sysroot directory (must exist)
        config_dir: Directory holding the config file (default ``.cargo``)

    Returns:
        True if the file was written, False if one already existed

    Raises:
        SysrootIOError: If the sysroot cannot be resolved or the file written
    """
    config_dir = ensure_directory(config_dir)
    config_file = config_dir / "config.toml"

    if config_file.exists():
        logger.info(f"{config_file} already exists, not overwriting")
        return False

    sysroot = Path(sysroot)
    try:
        sysroot_dir = sysroot.resolve(strict=True)
    except OSError as e:
        raise SysrootIOError(
            f"Couldn't get canonical path to sysroot: {sysroot}", sysroot
        ) from e

    created = write_new_file(config_file, render_cargo_config(str(target), sysroot_dir))
    if created:
        logger.info(f"Wrote {config_file}")
    else:
        logger.info(f"{config_file} already exists, not overwriting")
    return created
