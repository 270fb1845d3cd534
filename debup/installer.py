"""
Execution of mutating update commands.

Update steps run attached to the terminal so package managers can show
their own progress and sudo can prompt for a password.
"""

from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass

from .common import vlog


@dataclass(frozen=True)
class InstallStep:
    """
    Single command run while applying updates.

    Attributes:
        description: Human-readable description of the step
        command: Command tuple to execute
        requires_sudo: Whether this step requires root privileges
        quiet: Discard the command's output instead of showing it
    """
    description: str
    command: tuple[str, ...]
    requires_sudo: bool = False
    quiet: bool = False


@dataclass(frozen=True)
class StepResult:
    """
    Result of executing a single step.

    Attributes:
        step: The step that was executed
        success: Whether the step exited with status 0
        exit_code: Process exit code (-1 if it could not be started)
        duration_seconds: Time taken to execute step
        error_message: Human-readable error message if failed
    """
    step: InstallStep
    success: bool
    exit_code: int
    duration_seconds: float
    error_message: str | None = None


class InstallError(Exception):
    """
    Raised when an update cannot be applied.

    Attributes:
        message: Human-readable error message
        remediation: Suggested fix for the error
    """
    def __init__(self, message: str, remediation: str | None = None):
        self.message = message
        self.remediation = remediation
        super().__init__(message)


def build_command(step: InstallStep, use_sudo: bool = True) -> list[str]:
    """Full command line for a step, with sudo prepended when needed."""
    command = list(step.command)
    if step.requires_sudo and use_sudo:
        command = ["sudo"] + command
    return command


def execute_step(
    step: InstallStep,
    use_sudo: bool = True,
    timeout: int | None = None,
) -> StepResult:
    """
    Execute a single step.

    Args:
        step: Step to execute
        use_sudo: Prefix privileged steps with sudo
        timeout: Command timeout in seconds, None waits forever

    Returns:
        StepResult with execution outcome
    """
    start_time = time.time()
    command = build_command(step, use_sudo)

    vlog(f"Executing: {' '.join(command)}")

    output = subprocess.DEVNULL if step.quiet else None
    try:
        result = subprocess.run(
            command,
            stdout=output,
            stderr=output,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return StepResult(
            step=step,
            success=False,
            exit_code=-1,
            duration_seconds=time.time() - start_time,
            error_message=f"Command timed out after {timeout}s",
        )
    except FileNotFoundError:
        return StepResult(
            step=step,
            success=False,
            exit_code=-1,
            duration_seconds=time.time() - start_time,
            error_message=f"Command not found: {command[0]}",
        )

    success = result.returncode == 0
    error_msg = None
    if not success:
        error_msg = f"Command failed with exit code {result.returncode}"

    return StepResult(
        step=step,
        success=success,
        exit_code=result.returncode,
        duration_seconds=time.time() - start_time,
        error_message=error_msg,
    )
