"""Configuration module for SysrootKit.

This module reads the consuming project's Cargo.toml, writes the downstream
``.cargo/config.toml``, and loads the optional ``sysrootkit.yaml`` defaults.
"""

from sysrootkit.config.project import (
    ProjectManifest,
    load_project_manifest,
)
from sysrootkit.config.cargo_config import (
    generate_cargo_config,
    render_cargo_config,
)
from sysrootkit.config.settings import (
    ConfigError,
    SysrootSettings,
    DEFAULT_SETTINGS_FILE,
    load_yaml_config,
    load_settings,
    parse_settings,
)

__all__ = [
    "ProjectManifest",
    "load_project_manifest",
    "generate_cargo_config",
    "render_cargo_config",
    "ConfigError",
    "SysrootSettings",
    "DEFAULT_SETTINGS_FILE",
    "load_yaml_config",
    "load_settings",
    "parse_settings",
]
