"""
Pending update detection.

Every detector is read-only with respect to installed packages; the only
side effect is refreshing the APT index. Nothing is cached: each call
probes the managers again.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .collectors import collect_go_latest
from .common import nonblank_lines, run_capture, vlog
from .config import Config
from .environment import detect_system
from .installer import InstallStep, execute_step
from .logging_config import get_logger
from .package_managers import PackageManager, get_available_package_managers, get_package_manager


RUSTUP_CURRENT_MARKER = "Up to date"
CARGO_PACKAGE_RE = re.compile(r"^([a-z0-9_-]+) v[0-9.]+:$")
AUTOREMOVE_RE = re.compile(r"Removing:\s*(\d+)")


@dataclass(frozen=True)
class UpdateInfo:
    """
    Pending updates reported by one package manager.

    Attributes:
        name: Display name ("Rust", "Go", "Flatpak", ...)
        count: Number of pending updates, None for version-tracked managers
        local_version: Installed version (version-tracked managers only)
        latest_version: Latest published version (version-tracked managers only)
    """
    name: str
    count: int | None = None
    local_version: str | None = None
    latest_version: str | None = None

    @property
    def version_tracked(self) -> bool:
        return self.count is None

    @property
    def has_updates(self) -> bool:
        """Whether an update is pending.

        Versions are compared as plain strings: any difference counts,
        including a missing latest version.
        """
        if self.version_tracked:
            return self.local_version != self.latest_version
        return self.count > 0

    def summary(self) -> str:
        if self.version_tracked:
            if self.has_updates:
                return f"{self.name} ({self.local_version} -> {self.latest_version})"
            return f"{self.name} (0)"
        return f"{self.name} ({self.count})"


@dataclass(frozen=True)
class SystemReport:
    """
    Everything shown by the update check.

    Attributes:
        system_name: OS pretty name
        apt_version: APT version string
        system_updates: Number of upgradable OS packages
        universal: Universal package manager updates
        toolchain: Developer toolchain updates
    """
    system_name: str
    apt_version: str
    system_updates: int
    universal: tuple[UpdateInfo, ...] = ()
    toolchain: tuple[UpdateInfo, ...] = ()


# System packages

def refresh_package_index(config: Config) -> None:
    """Run ``apt update`` silently; failures are ignored."""
    step = InstallStep(
        description="Refresh package index",
        command=("apt", "update"),
        requires_sudo=True,
        quiet=True,
    )
    result = execute_step(step, config.preferences.use_sudo, config.preferences.command_timeout)
    if not result.success:
        vlog(f"Package index refresh failed: {result.error_message}")


def count_upgradable_packages(config: Config) -> int:
    """Number of upgradable packages; the listing's header line is not counted."""
    apt = get_package_manager("apt")
    output = run_capture(apt.check_command, timeout=config.preferences.command_timeout)
    return len(nonblank_lines(output)[1:])


def check_system_updates(config: Config, refresh: bool = True) -> int:
    """Refresh the index (unless told otherwise) and count upgradable packages."""
    if refresh:
        refresh_package_index(config)
    count = count_upgradable_packages(config)
    vlog(f"Upgradable system packages: {count}")
    return count


def parse_autoremove_count(output: str) -> int:
    """Package count from the ``Removing:`` line of an autoremove simulation."""
    match = AUTOREMOVE_RE.search(output or "")
    return int(match.group(1)) if match else 0


def count_autoremovable_packages(config: Config) -> int:
    """Simulate ``apt autoremove`` and return how many packages it would remove."""
    command = ("apt", "autoremove", "--dry-run", "--assume-no")
    if config.preferences.use_sudo:
        command = ("sudo",) + command
    output = run_capture(command, timeout=config.preferences.command_timeout)
    return parse_autoremove_count(output)


# Universal packages

def check_flatpak_updates(pm: PackageManager, config: Config) -> UpdateInfo:
    output = run_capture(pm.check_command, timeout=config.preferences.command_timeout)
    return UpdateInfo(pm.display_name, count=len(nonblank_lines(output)))


def get_universal_updates(config: Config) -> list[UpdateInfo]:
    """Updates for every installed universal package manager."""
    updates = []
    for pm in get_available_package_managers("universal"):
        if pm.name == "flatpak":
            updates.append(check_flatpak_updates(pm, config))
    return updates


# Developer toolchains

def check_rust_updates(pm: PackageManager, config: Config) -> UpdateInfo:
    """Count toolchain components ``rustup check`` does not report as current."""
    output = run_capture(pm.check_command, timeout=config.preferences.command_timeout)
    pending = [line for line in nonblank_lines(output) if RUSTUP_CURRENT_MARKER not in line]
    return UpdateInfo(pm.display_name, count=len(pending))


def get_go_local_version(pm: PackageManager, config: Config) -> str:
    """Installed Go version from ``go version`` (``go version go1.22.1 linux/amd64``)."""
    output = run_capture(pm.check_command, timeout=config.preferences.command_timeout)
    parts = output.split()
    if len(parts) < 3:
        return ""
    return parts[2].replace("go", "", 1)


def check_go_updates(pm: PackageManager, config: Config) -> UpdateInfo:
    return UpdateInfo(
        pm.display_name,
        local_version=get_go_local_version(pm, config),
        latest_version=collect_go_latest(config.go.version_url, config.preferences.network_timeout),
    )


def get_toolchain_updates(config: Config) -> list[UpdateInfo]:
    """Updates for every installed toolchain manager.

    Cargo has no way to list outdated packages, so it never appears here.
    """
    updates = []
    for pm in get_available_package_managers("toolchain"):
        if pm.name == "rustup":
            updates.append(check_rust_updates(pm, config))
        elif pm.name == "go":
            updates.append(check_go_updates(pm, config))
    return updates


def list_cargo_packages(config: Config) -> list[str]:
    """Names of the packages tracked by ``cargo install``."""
    cargo = get_package_manager("cargo")
    output = run_capture(cargo.check_command, timeout=config.preferences.command_timeout)
    names = []
    for line in output.splitlines():
        match = CARGO_PACKAGE_RE.match(line)
        if match:
            names.append(match.group(1))
    return names


def find_update(updates: list[UpdateInfo], name: str) -> UpdateInfo | None:
    """First entry of a category list with the given display name."""
    for update in updates:
        if update.name == name:
            return update
    return None


def get_updates(config: Config) -> SystemReport:
    """Query every manager and build the report data."""
    logger = get_logger()

    refresh_package_index(config)
    logger.info("Searching for system updates...")

    universal = get_universal_updates(config)
    if universal:
        logger.info("Searching for universal package updates...")

    toolchain = get_toolchain_updates(config)
    if toolchain:
        logger.info("Searching for developer toolchain updates...")

    system = detect_system(config)
    return SystemReport(
        system_name=system.name,
        apt_version=system.apt_version,
        system_updates=check_system_updates(config, refresh=False),
        universal=tuple(universal),
        toolchain=tuple(toolchain),
    )
