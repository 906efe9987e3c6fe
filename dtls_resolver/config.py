"""
Configuration file parsing and management.

Supports YAML configuration files, and JSON files for ``.json`` paths.
Merges configurations from multiple sources (explicit → project → user → defaults).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .common import DEFAULT_REPOSITORY, vlog
from .errors import ConfigurationError
from .install import DEFAULT_PROJECT_BIN_DIR
from .resolver import ResolverSettings


# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".dtls-resolver.yml",                                        # Project root (highest priority)
    ".dtls-resolver.yaml",                                       # Alternative extension
    ".dtls-resolver.json",
    os.path.expanduser("~/.config/dtls-resolver/config.yml"),    # User global
    os.path.expanduser("~/.config/dtls-resolver/config.yaml"),
]

CONFIG_ENV_VAR = "DTLS_RESOLVER_CONFIG"


@dataclass(frozen=True)
class Config:
    """
    Complete resolver configuration.

    Attributes:
        version: Config schema version
        repository: GitHub "owner/name" publishing the binaries
        install_dir: Working directory for downloaded versions (None = state home)
        project_bin_dir: Project-relative directory holding local binaries
        pre_release: Accept pre-releases when downloading
        timeout_seconds: Network timeout (None = transport default)
        cache_file: JSON state file for the persistent path cache (None = in-memory)
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    repository: str = DEFAULT_REPOSITORY
    install_dir: str | None = None
    project_bin_dir: str = DEFAULT_PROJECT_BIN_DIR
    pre_release: bool = False
    timeout_seconds: float | None = None
    cache_file: str | None = None
    source: str = ""

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

        if not isinstance(self.repository, str):
            raise ValueError(
                f"Invalid repository: {self.repository!r}. Must look like 'owner/name'"
            )

        owner, _, name = self.repository.partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(
                f"Invalid repository: {self.repository!r}. Must look like 'owner/name'"
            )

        if not self.project_bin_dir or os.path.isabs(self.project_bin_dir):
            raise ValueError(
                f"Invalid project_bin_dir: {self.project_bin_dir!r}. "
                "Must be a path relative to the project root"
            )

        if not isinstance(self.pre_release, bool):
            raise ValueError(f"Invalid pre_release: {self.pre_release!r}. Must be true or false")

        if self.timeout_seconds is not None and not 1 <= self.timeout_seconds <= 600:
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 600"
            )

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        return Config(
            version=data.get("version", 1),
            repository=data.get("repository", DEFAULT_REPOSITORY),
            install_dir=data.get("install_dir"),
            project_bin_dir=data.get("project_bin_dir", DEFAULT_PROJECT_BIN_DIR),
            pre_release=data.get("pre_release", False),
            timeout_seconds=data.get("timeout_seconds"),
            cache_file=data.get("cache_file"),
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        return Config(
            version=self.version,
            repository=self.repository if self.repository != DEFAULT_REPOSITORY else other.repository,
            install_dir=self.install_dir or other.install_dir,
            project_bin_dir=self.project_bin_dir if self.project_bin_dir != DEFAULT_PROJECT_BIN_DIR else other.project_bin_dir,
            pre_release=self.pre_release or other.pre_release,
            timeout_seconds=self.timeout_seconds if self.timeout_seconds is not None else other.timeout_seconds,
            cache_file=self.cache_file or other.cache_file,
            source=self.source or other.source,
        )

    def to_settings(self) -> ResolverSettings:
        """Build resolver settings from this config."""
        return ResolverSettings(
            repository=self.repository,
            install_dir=Path(self.install_dir).expanduser() if self.install_dir else None,
            project_bin_dir=self.project_bin_dir,
            pre_release=self.pre_release,
            timeout_seconds=self.timeout_seconds,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if file unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            if data is None:
                return {}
            return data if isinstance(data, dict) else None
    except (OSError, yaml.YAMLError):
        return None


def _load_json(file_path: str) -> dict[str, Any] | None:
    """
    Load JSON configuration file.

    Returns:
        Parsed configuration dictionary, or None if file invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else None
    except (OSError, json.JSONDecodeError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file (.json is parsed as JSON, anything else as YAML)
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    if file_path.endswith(".json"):
        data = _load_json(file_path)
    else:
        data = _load_yaml(file_path)

    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=file_path)
    except (ValueError, TypeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None

    vlog(f"Loaded config successfully: {file_path}", verbose)
    return config


def load_config(
    custom_path: str | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (argument, else $DTLS_RESOLVER_CONFIG)
    2. Project .dtls-resolver.yml
    3. User ~/.config/dtls-resolver/config.yml
    4. Default configuration

    Returns:
        Merged Config object (never None, returns defaults if no config found)

    Raises:
        ConfigurationError: If a custom path is given but cannot be loaded
    """
    configs: list[Config] = []

    custom_path = custom_path or os.environ.get(CONFIG_ENV_VAR)
    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ConfigurationError(
                f"Could not load config from specified path: {custom_path}",
                remediation="check that the file exists and is valid YAML or JSON",
            )
        configs.append(config)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        return Config()

    # First config has highest priority
    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    vlog(f"Merged {len(configs)} config files", verbose)
    return merged
