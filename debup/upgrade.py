"""
Applying updates per category.

Each applier re-detects its managers before mutating anything, so it can
run on its own or as a stage of a full update. Missing managers and
"nothing to update" are successful skips.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from .collectors import NetworkError, download_file
from .config import Config
from .detection import (
    check_system_updates,
    count_autoremovable_packages,
    find_update,
    get_toolchain_updates,
    get_universal_updates,
    list_cargo_packages,
)
from .installer import InstallError, InstallStep, StepResult, execute_step
from .logging_config import get_logger
from .package_managers import get_package_manager


DETAILS_HINT = "Please check the output for details."


@dataclass(frozen=True)
class UpdateResult:
    """
    Outcome of applying one update category.

    Attributes:
        category: "system", "universal" or "toolchain"
        success: False only for hard failures
        skipped: No manager for the category was detected
        updated: Managers that were updated
        steps: Commands that were executed
        error_message: Human-readable error message if failed
    """
    category: str
    success: bool = True
    skipped: bool = False
    updated: tuple[str, ...] = ()
    steps: tuple[StepResult, ...] = ()
    error_message: str | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


def _run(step: InstallStep, config: Config) -> StepResult:
    return execute_step(step, config.preferences.use_sudo, config.preferences.command_timeout)


def update_system_packages(config: Config) -> UpdateResult:
    """Upgrade APT packages and clean up packages nothing depends on anymore."""
    logger = get_logger()
    steps: list[StepResult] = []

    if check_system_updates(config) == 0:
        return UpdateResult("system")

    logger.info("Installing system updates...")
    apt = get_package_manager("apt")
    result = _run(InstallStep("Upgrade system packages", apt.update_command, requires_sudo=True), config)
    steps.append(result)
    if not result.success:
        message = f"Failed to install system updates. {DETAILS_HINT}"
        logger.error(message)
        return UpdateResult("system", success=False, steps=tuple(steps), error_message=message)

    if count_autoremovable_packages(config) > 0:
        logger.info("Cleaning up packages...")
        result = _run(
            InstallStep("Remove unused packages", ("apt", "autoremove", "-y"), requires_sudo=True),
            config,
        )
        steps.append(result)
        if not result.success:
            message = f"Failed to clean up packages. {DETAILS_HINT}"
            logger.error(message)
            return UpdateResult("system", success=False, steps=tuple(steps), error_message=message)

    logger.info("System packages have been updated.")
    return UpdateResult("system", updated=(apt.display_name,), steps=tuple(steps))


def update_universal_packages(config: Config) -> UpdateResult:
    """Update Flatpak packages if any are pending."""
    logger = get_logger()
    universal = get_universal_updates(config)
    if not universal:
        logger.warning("No universal package manager was detected. Skipping updates.")
        return UpdateResult("universal", skipped=True)

    steps: list[StepResult] = []
    updated: list[str] = []

    flatpak = find_update(universal, "Flatpak")
    if flatpak and flatpak.has_updates:
        logger.info("Installing Flatpak updates...")
        pm = get_package_manager("flatpak")
        result = _run(InstallStep("Update Flatpak packages", pm.update_command), config)
        steps.append(result)
        if not result.success:
            logger.warning(f"Flatpak update exited with status {result.exit_code}.")
        logger.info("Flatpak packages have been updated.")
        updated.append(flatpak.name)

    return UpdateResult("universal", updated=tuple(updated), steps=tuple(steps))


def reinstall_cargo_packages(config: Config) -> StepResult | None:
    """Reinstall every package tracked by ``cargo install``.

    Cargo cannot report outdated packages, so all of them are installed
    again; cargo fetches the latest version of each. Output is discarded and
    the exit status is only logged.
    """
    cargo = get_package_manager("cargo")
    if not cargo.is_available():
        return None

    packages = list_cargo_packages(config)
    if not packages:
        return None

    step = InstallStep(
        description="Reinstall cargo packages",
        command=cargo.update_command + tuple(packages),
        quiet=True,
    )
    result = _run(step, config)
    if not result.success:
        get_logger().debug(f"cargo install exited with status {result.exit_code}")
    return result


def resolve_go_install_dir(go_path: str) -> Path:
    """Directory holding the ``go`` tree of an executable.

    ``/home/user/.local/go/bin/go`` resolves to ``/home/user/.local``.
    """
    path = Path(go_path)
    for parent in path.parents:
        if parent.name == "go":
            return parent.parent
    return path.parent


def install_go_release(version: str, install_dir: Path, config: Config) -> StepResult:
    """Replace ``<install_dir>/go`` with the official archive of a release.

    Raises:
        InstallError: If the download or the extraction fails
    """
    url = config.go.archive_url(version)
    try:
        archive = download_file(url, config.go.archive_path, config.preferences.network_timeout)
    except NetworkError as e:
        raise InstallError(
            f"Failed to download the latest Go version. {DETAILS_HINT}",
            remediation=str(e),
        ) from e

    # Previous installations must be removed before extracting over them
    shutil.rmtree(install_dir / "go", ignore_errors=True)

    result = _run(
        InstallStep(
            description=f"Extract Go {version}",
            command=("tar", "-C", str(install_dir), "-xzf", str(archive)),
        ),
        config,
    )
    if not result.success:
        raise InstallError(f"Failed to update Go. {DETAILS_HINT}", remediation=result.error_message)
    return result


def update_toolchain_packages(config: Config) -> UpdateResult:
    """Update Rust, cargo packages and Go."""
    logger = get_logger()
    toolchain = get_toolchain_updates(config)
    if not toolchain:
        logger.warning("No developer toolchains were detected. Skipping updates.")
        return UpdateResult("toolchain", skipped=True)

    steps: list[StepResult] = []
    updated: list[str] = []

    rust = find_update(toolchain, "Rust")
    if rust and rust.has_updates:
        logger.info("Installing Rust updates...")
        rustup = get_package_manager("rustup")
        result = _run(InstallStep("Update Rust toolchains", rustup.update_command), config)
        steps.append(result)
        if not result.success:
            logger.warning(f"rustup update exited with status {result.exit_code}.")
        logger.info("Rust has been updated.")
        updated.append(rust.name)

    cargo_result = reinstall_cargo_packages(config)
    if cargo_result is not None:
        steps.append(cargo_result)

    go = find_update(toolchain, "Go")
    if go and go.has_updates:
        go_path = get_package_manager("go").which()
        if go_path is None:
            logger.warning("Go is no longer on PATH. Skipping updates.")
            return UpdateResult("toolchain", updated=tuple(updated), steps=tuple(steps))

        install_dir = resolve_go_install_dir(go_path)
        if any(install_dir == Path(path) for path in config.go.system_dirs):
            logger.warning(
                "Detected system-wide installation of Go. "
                "These are not supported right now, skipping updates."
            )
            return UpdateResult("toolchain", updated=tuple(updated), steps=tuple(steps))

        logger.info("Installing Go updates...")
        try:
            steps.append(install_go_release(go.latest_version or "", install_dir, config))
        except InstallError as e:
            logger.error(e.message)
            if e.remediation:
                logger.debug(e.remediation)
            return UpdateResult(
                "toolchain",
                success=False,
                updated=tuple(updated),
                steps=tuple(steps),
                error_message=e.message,
            )
        logger.info("Go has been updated.")
        updated.append(go.name)

    return UpdateResult("toolchain", updated=tuple(updated), steps=tuple(steps))
