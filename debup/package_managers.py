"""
Package manager registry.

Managers are grouped into the three update categories, applied in this order:
1. system    - OS packages (apt)
2. universal - distribution-agnostic packages (flatpak)
3. toolchain - developer toolchains (rustup, cargo, go)
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass

from .common import vlog


CATEGORIES = ("system", "universal", "toolchain")


@dataclass(frozen=True)
class PackageManager:
    """
    Package manager definition.

    Attributes:
        name: Package manager identifier (e.g., "apt", "flatpak")
        display_name: Name used in the update report
        executable: Binary looked up on PATH to decide availability
        category: Update category ("system", "universal", "toolchain")
        check_command: Read-only command listing pending updates
        update_command: Mutating command applying updates
        requires_sudo: Whether update_command needs root privileges
    """
    name: str
    display_name: str
    executable: str
    category: str
    check_command: tuple[str, ...] = ()
    update_command: tuple[str, ...] = ()
    requires_sudo: bool = False

    def which(self) -> str | None:
        """Absolute path of the manager's executable, or None."""
        return shutil.which(self.executable)

    def is_available(self) -> bool:
        """
        Check if this package manager is installed.

        Availability is probed on every call; installing or removing a
        toolchain between two calls is reflected immediately.
        """
        available = self.which() is not None
        vlog(f"{self.display_name} available: {available}")
        return available


PACKAGE_MANAGERS = (
    PackageManager(
        name="apt",
        display_name="APT",
        executable="apt",
        category="system",
        check_command=("apt", "list", "--upgradable"),
        update_command=("apt", "upgrade", "-y"),
        requires_sudo=True,
    ),
    PackageManager(
        name="flatpak",
        display_name="Flatpak",
        executable="flatpak",
        category="universal",
        check_command=("flatpak", "remote-ls", "--updates"),
        update_command=("flatpak", "update", "-y"),
    ),
    PackageManager(
        name="rustup",
        display_name="Rust",
        executable="rustup",
        category="toolchain",
        check_command=("rustup", "check"),
        update_command=("rustup", "update"),
    ),
    PackageManager(
        name="cargo",
        display_name="Cargo",
        executable="cargo",
        category="toolchain",
        check_command=("cargo", "install", "--list"),
        update_command=("cargo", "install"),
    ),
    PackageManager(
        name="go",
        display_name="Go",
        executable="go",
        category="toolchain",
        check_command=("go", "version"),
    ),
)


_PM_BY_NAME = {pm.name: pm for pm in PACKAGE_MANAGERS}


def get_package_manager(name: str) -> PackageManager:
    """
    Get package manager by name.

    Raises:
        KeyError: If no manager with that name is registered
    """
    return _PM_BY_NAME[name]


def get_available_package_managers(category: str | None = None) -> list[PackageManager]:
    """
    List installed package managers in registry order.

    Args:
        category: Optional category filter

    Raises:
        ValueError: If category is not a known category
    """
    if category is not None and category not in CATEGORIES:
        raise ValueError(
            f"Invalid category: {category}. Must be one of: {', '.join(CATEGORIES)}"
        )
    return [
        pm for pm in PACKAGE_MANAGERS
        if (category is None or pm.category == category) and pm.is_available()
    ]
