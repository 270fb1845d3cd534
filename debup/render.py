"""
Update report rendering.
"""

import sys
from typing import TextIO

from .detection import SystemReport, UpdateInfo
from .logging_config import color_enabled


BOLD_GREEN = "\033[1;32m"
RESET = "\033[0m"

LABEL_WIDTH = 16
NO_UPDATES_PLACEHOLDER = "--"

USAGE = """\
DEBUP -- A tool for keeping your Debian-based systems up to date.

Usage: debup [OPTION]

Options:
  -c, --check-updates
          Search for package updates without installing them
  -f, --full, (empty option)
          Perform full system update
  -s, --system
          Update the operating system packages only
  -t, --toolchain
          Update developer toolchain packages only
  -u, --universal
          Update universal package formats only
  -h, --help
          Display this message
"""


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color to text.

    Args:
        text: Text to colorize
        color: ANSI color code
        enabled: Return plain text when False

    Returns:
        Colored text or plain text if colors disabled
    """
    if not enabled or not text:
        return text
    return f"{color}{text}{RESET}"


def join_summaries(updates: tuple[UpdateInfo, ...], placeholder: str = "") -> str:
    """Space-separated manager summaries, or the placeholder if none were detected."""
    if not updates:
        return placeholder
    return " ".join(update.summary() for update in updates)


def format_field(label: str, value: str, color: bool = False) -> str:
    """One report row, label right-aligned in the gutter."""
    padding = " " * max(LABEL_WIDTH - len(label), 0)
    return f"{padding}{colorize(label, BOLD_GREEN, color)} {value}"


def format_report(report: SystemReport, color: bool = False) -> list[str]:
    """Render the report as lines.

    The toolchain row has no label; it continues the "Other Updates" row.
    """
    return [
        "",
        format_field("System", report.system_name, color),
        format_field("APT version", report.apt_version, color),
        format_field("System Updates", str(report.system_updates), color),
        format_field("Other Updates", join_summaries(report.universal, NO_UPDATES_PLACEHOLDER), color),
        format_field("", join_summaries(report.toolchain), color),
    ]


def print_report(report: SystemReport, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    for line in format_report(report, color_enabled(stream)):
        print(line, file=stream)


def print_usage(stream: TextIO | None = None) -> None:
    print(USAGE, end="", file=stream or sys.stdout)
