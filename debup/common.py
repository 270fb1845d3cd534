"""
Common utilities shared across debup modules.
"""

from __future__ import annotations

import os
import re
import subprocess
from typing import Sequence


ANSI_ESCAPE_RE = re.compile(r'\x1b\[[0-9;]*m')


def nonblank_lines(text: str | None) -> list[str]:
    """
    Split command output into lines, dropping blank ones and ANSI colors.

    Args:
        text: Raw command output (may be None)

    Returns:
        List of stripped, non-empty lines
    """
    if not text:
        return []
    lines = (ANSI_ESCAPE_RE.sub('', line).strip() for line in text.splitlines())
    return [line for line in lines if line]


def debug_enabled() -> bool:
    """Whether DEBUP_DEBUG=1 is set."""
    return os.environ.get("DEBUP_DEBUG", "0") == "1"


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log a debug trace message.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or debug_enabled():
        from .logging_config import get_logger
        get_logger().debug(msg)


def run_capture(
    args: Sequence[str],
    timeout: float | None = None,
    discard_stderr: bool = True,
) -> str:
    """
    Run a read-only command and return its stdout.

    Missing executables, timeouts and non-zero exits all degrade to
    whatever output was produced (possibly the empty string).

    Args:
        args: Command and arguments
        timeout: Timeout in seconds, None waits forever
        discard_stderr: Drop stderr instead of merging it into the output

    Returns:
        Captured standard output
    """
    vlog(f"Querying: {' '.join(args)}")
    try:
        proc = subprocess.run(
            list(args),
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL if discard_stderr else subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            timeout=timeout,
            check=False,
        )
        return proc.stdout or ""
    except (OSError, subprocess.SubprocessError) as e:
        vlog(f"Command failed to run: {args[0]}: {e}")
        return ""
