"""
Configuration file parsing and management.

Supports YAML configuration files, and JSON files for hosts that prefer them.
Merges configurations from multiple sources (custom -> user -> system -> defaults).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from .common import vlog


# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    os.path.expanduser("~/.config/debup/config.yml"),  # User global
    os.path.expanduser("~/.config/debup/config.yaml"),
    "/etc/debup/config.yml",                           # System global
    "/etc/debup/config.yaml",
]

DEFAULT_GO_VERSION_URL = "https://go.dev/VERSION?m=text"
DEFAULT_GO_DOWNLOAD_URL = "https://go.dev/dl/go{version}.{platform}.tar.gz"
DEFAULT_GO_PLATFORM = "linux-amd64"
DEFAULT_GO_ARCHIVE = "/tmp/go.tar.gz"
DEFAULT_GO_SYSTEM_DIRS = ("/usr/local",)
DEFAULT_OS_RELEASE = "/etc/os-release"


def _check_timeout(name: str, value: int | None) -> None:
    if value is not None and value <= 0:
        raise ValueError(f"Invalid {name}: {value}. Must be a positive number of seconds or null")


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Invalid {name} section: expected a mapping, got {type(value).__name__}")
    return value


def _system_dirs(value: Any) -> tuple[str, ...]:
    """Accept a single path or a list of paths, without trailing slashes."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Invalid go system_dirs: {value!r}. Must be a list of paths")
    return tuple(os.path.normpath(str(path)) for path in value)


@dataclass(frozen=True)
class Preferences:
    """
    General execution preferences.

    Attributes:
        use_sudo: Prefix privileged commands (apt) with sudo
        command_timeout: Timeout for external commands, None waits forever
        network_timeout: Timeout for HTTP requests, None waits forever
    """
    use_sudo: bool = True
    command_timeout: int | None = None
    network_timeout: int | None = None

    def __post_init__(self):
        _check_timeout("command_timeout", self.command_timeout)
        _check_timeout("network_timeout", self.network_timeout)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Preferences:
        """Create Preferences from dictionary."""
        return Preferences(
            use_sudo=data.get("use_sudo", True),
            command_timeout=data.get("command_timeout"),
            network_timeout=data.get("network_timeout"),
        )


@dataclass(frozen=True)
class GoConfig:
    """
    Settings for the Go release channel.

    Attributes:
        version_url: Endpoint returning the latest version as text
        download_url: Archive URL template with {version} and {platform}
        platform: Archive platform suffix (e.g. linux-amd64)
        archive_path: Where the downloaded archive is stored
        system_dirs: Install directories that are never touched
    """
    version_url: str = DEFAULT_GO_VERSION_URL
    download_url: str = DEFAULT_GO_DOWNLOAD_URL
    platform: str = DEFAULT_GO_PLATFORM
    archive_path: str = DEFAULT_GO_ARCHIVE
    system_dirs: tuple[str, ...] = DEFAULT_GO_SYSTEM_DIRS

    def __post_init__(self):
        if "{version}" not in self.download_url:
            raise ValueError(
                f"Invalid go download_url: {self.download_url}. "
                "Must contain a {version} placeholder"
            )
        for path in self.system_dirs:
            if not isinstance(path, str) or not os.path.isabs(path):
                raise ValueError(f"Invalid go system_dirs entry: {path!r}. Must be an absolute path")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> GoConfig:
        """Create GoConfig from dictionary."""
        return GoConfig(
            version_url=data.get("version_url", DEFAULT_GO_VERSION_URL),
            download_url=data.get("download_url", DEFAULT_GO_DOWNLOAD_URL),
            platform=data.get("platform", DEFAULT_GO_PLATFORM),
            archive_path=data.get("archive_path", DEFAULT_GO_ARCHIVE),
            system_dirs=_system_dirs(data.get("system_dirs", DEFAULT_GO_SYSTEM_DIRS)),
        )

    def archive_url(self, version: str) -> str:
        """Download URL of the archive for a Go version."""
        return self.download_url.format(version=version, platform=self.platform)


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for debup.

    Attributes:
        version: Config schema version
        preferences: General preferences
        go: Go release channel settings
        os_release: Path to the OS release metadata file
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    preferences: Preferences = field(default_factory=Preferences)
    go: GoConfig = field(default_factory=GoConfig)
    os_release: str = DEFAULT_OS_RELEASE
    source: str = ""

    def __post_init__(self):
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        return Config(
            version=data.get("version", 1),
            preferences=Preferences.from_dict(_section(data, "preferences")),
            go=GoConfig.from_dict(_section(data, "go")),
            os_release=data.get("os_release", DEFAULT_OS_RELEASE),
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring non-default values from this config.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        def pick(mine, theirs, default):
            return mine if mine != default else theirs

        defaults = Config()
        merged_preferences = Preferences(
            use_sudo=pick(self.preferences.use_sudo, other.preferences.use_sudo, defaults.preferences.use_sudo),
            command_timeout=pick(self.preferences.command_timeout, other.preferences.command_timeout, None),
            network_timeout=pick(self.preferences.network_timeout, other.preferences.network_timeout, None),
        )
        merged_go = GoConfig(
            version_url=pick(self.go.version_url, other.go.version_url, defaults.go.version_url),
            download_url=pick(self.go.download_url, other.go.download_url, defaults.go.download_url),
            platform=pick(self.go.platform, other.go.platform, defaults.go.platform),
            archive_path=pick(self.go.archive_path, other.go.archive_path, defaults.go.archive_path),
            system_dirs=pick(self.go.system_dirs, other.go.system_dirs, defaults.go.system_dirs),
        )

        return Config(
            version=self.version,
            preferences=merged_preferences,
            go=merged_go,
            os_release=pick(self.os_release, other.os_release, defaults.os_release),
            source=self.source or other.source,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
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
            return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Files ending in .json are parsed as JSON, everything else as YAML.

    Args:
        file_path: Path to configuration file
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
        vlog(f"Loaded config successfully: {file_path}", verbose)
        return config
    except (ValueError, TypeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None


def load_config(
    custom_path: str | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (argument, or DEBUP_CONFIG)
    2. User ~/.config/debup/config.yml
    3. System /etc/debup/config.yml
    4. Default configuration

    Raises:
        ValueError: If a custom path is given but cannot be loaded
    """
    configs: list[Config] = []

    custom_path = custom_path or os.environ.get("DEBUP_CONFIG") or None
    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)
        vlog(f"Using custom config: {custom_path}", verbose)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)
            vlog(f"Found config at: {location}", verbose)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        return Config()

    # First config has highest priority
    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    vlog(f"Merged {len(configs)} config files", verbose)
    return merged


def validate_config(config: Config) -> list[str]:
    """
    Validate configuration and return list of non-fatal warnings.
    """
    warnings = []

    if "{platform}" not in config.go.download_url:
        warnings.append("Go download_url has no {platform} placeholder; platform setting is ignored")

    if not config.go.system_dirs:
        warnings.append("No system-wide Go directories configured; /usr/local installs will be replaced")

    if not os.path.isabs(config.go.archive_path):
        warnings.append(f"Go archive_path is relative: {config.go.archive_path}")

    if not config.preferences.use_sudo and os.geteuid() != 0:
        warnings.append("use_sudo is disabled and debup is not running as root; apt commands will fail")

    return warnings
