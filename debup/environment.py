"""
Host metadata for the update report.

Reads the distribution name from the OS release file and the version of
the system package manager.
"""

from __future__ import annotations

from dataclasses import dataclass

from .common import run_capture, vlog
from .config import Config


UNKNOWN = "unknown"


@dataclass(frozen=True)
class SystemInfo:
    """
    Detected host information.

    Attributes:
        name: Human-readable OS name (PRETTY_NAME)
        apt_version: Version reported by ``apt --version``
    """
    name: str
    apt_version: str


def read_os_release(path: str) -> dict[str, str]:
    """
    Parse an os-release style key=value file.

    Values have surrounding quotes removed. Comments and malformed lines are
    skipped. A missing file yields an empty dict.
    """
    fields: dict[str, str] = {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, _, value = line.partition("=")
                fields[key.strip().upper()] = value.strip().strip('"').strip("'")
    except OSError as e:
        vlog(f"Could not read {path}: {e}")
    return fields


def get_pretty_name(path: str) -> str:
    """Return PRETTY_NAME from the OS release file, or 'unknown'."""
    return read_os_release(path).get("PRETTY_NAME") or UNKNOWN


def get_apt_version(timeout: float | None = None) -> str:
    """
    Return the APT version string.

    ``apt --version`` prints e.g. ``apt 2.6.1 (amd64)``; the second field
    is the version.
    """
    output = run_capture(("apt", "--version"), timeout=timeout)
    first_line = output.splitlines()[0] if output.strip() else ""
    parts = first_line.split()
    return parts[1] if len(parts) > 1 else UNKNOWN


def detect_system(config: Config) -> SystemInfo:
    """Collect host information for the report."""
    return SystemInfo(
        name=get_pretty_name(config.os_release),
        apt_version=get_apt_version(config.preferences.command_timeout),
    )
