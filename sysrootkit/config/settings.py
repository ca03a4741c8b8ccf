"""YAML defaults file for the sysrootkit command line.

A ``sysrootkit.yaml`` can hold the values otherwise passed as flags:

    target: x86_64-unknown-uefi
    output: target/sysroot
    tier: alloc
    features: [mem]
    rustc_flags: ["-Copt-level=s"]

Relative paths are resolved against the directory holding the file.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "sysrootkit.yaml"


class ConfigError(ConfigurationError):
    """Settings file parsing or validation error."""

    pass


@dataclass
class SysrootSettings:
    """Defaults loaded from the settings file."""

    manifest_path: Optional[Path] = None
    output: Optional[Path] = None
    target: Optional[str] = None
    rust_src: Optional[Path] = None
    tier: Optional[str] = None
    features: List[str] = field(default_factory=list)
    rustc_flags: List[str] = field(default_factory=list)
    no_config: bool = False


_PATH_KEYS = ("manifest_path", "output", "rust_src")
_STR_KEYS = ("target", "tier")
_LIST_KEYS = ("features", "rustc_flags")
_KNOWN_KEYS = set(_PATH_KEYS + _STR_KEYS + _LIST_KEYS + ("no_config",))


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, or YAML parsing fails
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Couldn't read {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"{config_file}: top level must be a mapping")
    return config


def parse_settings(data: Dict[str, Any], base_dir: Path) -> SysrootSettings:
    """Validate raw settings data and build SysrootSettings."""
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

    settings = SysrootSettings()

    for key in _PATH_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string path")
        path = Path(value)
        setattr(settings, key, path if path.is_absolute() else base_dir / path)

    for key in _STR_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string")
        setattr(settings, key, value)

    for key in _LIST_KEYS:
        value = data.get(key, [])
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{key} must be a list of strings")
        setattr(settings, key, list(value))

    no_config = data.get("no_config", False)
    if not isinstance(no_config, bool):
        raise ConfigError("no_config must be true or false")
    settings.no_config = no_config

    return settings


def load_settings(config_file: Path, required: bool = False) -> SysrootSettings:
    """
    Load ``sysrootkit.yaml``.

    Args:
        config_file: Settings file path
        required: If True, a missing file is an error

    Returns:
        Parsed settings (all defaults if the file is absent)

    Raises:
        ConfigError: If the file is invalid
    """
    data = load_yaml_config(config_file, required=required)
    return parse_settings(data, config_file.parent)
