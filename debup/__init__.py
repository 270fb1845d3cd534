"""
debup - Debian-based system update front-end.

Core Modules:
- Detection: pending updates per package manager, host metadata, report rendering
- Foundation: config, package manager registry, command execution, logging
- Updates: system (APT), universal (Flatpak) and toolchain (Rust, cargo, Go) appliers
"""

__version__ = "1.0.0"

VERSION = __version__

# Detection
from .detection import (
    UpdateInfo,
    SystemReport,
    check_system_updates,
    count_autoremovable_packages,
    get_universal_updates,
    get_toolchain_updates,
    get_updates,
)
from .environment import SystemInfo, detect_system
from .render import format_report, print_report

# Foundation
from .config import Config, GoConfig, Preferences, load_config, load_config_file, validate_config
from .package_managers import PackageManager, get_package_manager, get_available_package_managers
from .installer import InstallStep, StepResult, InstallError, execute_step

# Updates
from .upgrade import (
    UpdateResult,
    update_system_packages,
    update_universal_packages,
    update_toolchain_packages,
)

# Logging configuration
from .logging_config import setup_logging, get_logger

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Detection
    "UpdateInfo",
    "SystemReport",
    "check_system_updates",
    "count_autoremovable_packages",
    "get_universal_updates",
    "get_toolchain_updates",
    "get_updates",
    "SystemInfo",
    "detect_system",
    "format_report",
    "print_report",
    # Foundation
    "Config",
    "GoConfig",
    "Preferences",
    "load_config",
    "load_config_file",
    "validate_config",
    "PackageManager",
    "get_package_manager",
    "get_available_package_managers",
    "InstallStep",
    "StepResult",
    "InstallError",
    "execute_step",
    # Updates
    "UpdateResult",
    "update_system_packages",
    "update_universal_packages",
    "update_toolchain_packages",
    # Logging
    "setup_logging",
    "get_logger",
]
