"""
debup - keep a Debian-based system up to date.

Command-line front-end over APT, Flatpak, rustup/cargo and Go.

Usage:
    debup                      # Full update (same as --full)
    debup --check-updates      # Report pending updates only
    debup --system             # Update OS packages
    debup --universal          # Update Flatpak packages
    debup --toolchain          # Update Rust, cargo packages and Go
"""

from __future__ import annotations

import argparse
import enum
import sys
from typing import Callable, Sequence

from .config import Config, load_config, validate_config
from .detection import get_updates
from .logging_config import setup_logging_from_env
from .render import print_report, print_usage
from .upgrade import (
    UpdateResult,
    update_system_packages,
    update_toolchain_packages,
    update_universal_packages,
)


class Command(enum.Enum):
    HELP = "help"
    CHECK = "check"
    SYSTEM = "system"
    TOOLCHAIN = "toolchain"
    UNIVERSAL = "universal"
    FULL = "full"


class InvalidCommand(Exception):
    """Raised for any token outside the supported option set."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid command: {token}")


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise InvalidCommand(message)


OPTIONS: tuple[tuple[tuple[str, str], Command], ...] = (
    (("-h", "--help"), Command.HELP),
    (("-c", "--check-updates"), Command.CHECK),
    (("-s", "--system"), Command.SYSTEM),
    (("-t", "--toolchain"), Command.TOOLCHAIN),
    (("-u", "--universal"), Command.UNIVERSAL),
    (("-f", "--full"), Command.FULL),
)
OPTION_TOKENS = frozenset(flag for flags, _ in OPTIONS for flag in flags)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="debup", add_help=False, allow_abbrev=False)
    parser.set_defaults(command=Command.FULL)
    group = parser.add_mutually_exclusive_group()
    for flags, command in OPTIONS:
        group.add_argument(*flags, dest="command", action="store_const", const=command)
    return parser


def parse_command(argv: Sequence[str]) -> Command:
    """
    Map the first command-line token to a Command.

    Tokens after the first are ignored. No token, or an empty token, means
    a full update.

    Raises:
        InvalidCommand: If the token is not a supported option
    """
    if not argv or argv[0] == "":
        return Command.FULL

    token = argv[0]
    try:
        args, extras = build_parser().parse_known_args([token])
    except InvalidCommand:
        raise InvalidCommand(token) from None
    # Grouped short flags such as -cc parse, but are not options of their own
    if extras or token not in OPTION_TOKENS:
        raise InvalidCommand(token)
    return args.command


def check_updates(config: Config) -> int:
    print_report(get_updates(config))
    return 0


def full_update(config: Config) -> int:
    """
    Report, then apply system, universal and toolchain updates in that order.

    Stops at the first stage that fails and returns its exit code.
    """
    status = check_updates(config)
    if status != 0:
        return status

    stages: tuple[Callable[[Config], UpdateResult], ...] = (
        update_system_packages,
        update_universal_packages,
        update_toolchain_packages,
    )
    for stage in stages:
        result = stage(config)
        if result.exit_code != 0:
            return result.exit_code
    return 0


def run(command: Command, config: Config) -> int:
    if command is Command.HELP:
        print_usage()
        return 0
    if command is Command.CHECK:
        return check_updates(config)
    if command is Command.SYSTEM:
        return update_system_packages(config).exit_code
    if command is Command.UNIVERSAL:
        return update_universal_packages(config).exit_code
    if command is Command.TOOLCHAIN:
        return update_toolchain_packages(config).exit_code
    return full_update(config)


def main(argv: Sequence[str] | None = None) -> int:
    logger = setup_logging_from_env()
    argv = list(sys.argv[1:] if argv is None else argv)

    try:
        command = parse_command(argv)
    except InvalidCommand as e:
        # Reported, but not treated as a failure
        logger.error(f"Invalid command: {e.token}")
        logger.error("Run 'debup --help' for available commands.")
        return 0

    if command is Command.HELP:
        return run(command, Config())

    try:
        config = load_config()
    except ValueError as e:
        logger.error(str(e))
        return 1
    for warning in validate_config(config):
        logger.warning(warning)

    logger.debug(f"Running {command.value} (config: {config.source or 'defaults'})")
    try:
        return run(command, config)
    except KeyboardInterrupt:
        logger.error("Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
