"""Shared utility functions."""

import getpass
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import NoReturn, Protocol

from rich.console import Console
from rich.logging import RichHandler

from .types import CommandResult

logger = logging.getLogger("gcloudssh")


def setup_logging(level: int | str = logging.WARNING) -> None:
    """Set up logging with Rich handler to stderr."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    rich_handler = RichHandler(
        console=Console(stderr=True),
        log_time_format="[%X]",
        show_path=False,
        markup=False,
    )
    rich_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.addHandler(rich_handler)

    for name, lvl in [("httpx", logging.WARNING), ("httpcore", logging.WARNING)]:
        lg = logging.getLogger(name)
        for h in lg.handlers[:]:
            lg.removeHandler(h)
        lg.setLevel(lvl)
        lg.propagate = True


def log(msg: str) -> None:
    """Log info message."""
    logger.info(msg)


def warn(msg: str) -> None:
    """Log warning message."""
    logger.warning(msg)


def error(msg: str) -> NoReturn:
    """Log error message and exit."""
    logger.error(msg)
    sys.exit(1)


class CommandRunner(Protocol):
    def run(self, program: str, args: list[str]) -> CommandResult: ...


class SubprocessRunner:
    """Run external programs to completion, capturing stdout and stderr.

    There is no timeout: a hung program hangs the caller. stderr is decoded
    lossily. stdout keeps undecodable bytes as surrogate escapes so consumers
    can reject output that is not valid UTF-8.
    """

    def run(self, program: str, args: list[str]) -> CommandResult:
        logger.debug("Running: %s %s", program, " ".join(args))
        try:
            result = subprocess.run(
                [program, *args], capture_output=True
            )
        except FileNotFoundError:
            return CommandResult(
                127, "", f"'{program}' not found. Is it installed and on PATH?"
            )
        logger.debug("'%s' exited with %d", program, result.returncode)
        return CommandResult(
            result.returncode,
            result.stdout.decode("utf-8", errors="surrogateescape"),
            result.stderr.decode("utf-8", errors="replace"),
        )


def restrict_to_owner(path: Path) -> None:
    """Restrict a directory to owner-only access (0700).

    No-op on platforms without POSIX permissions. When supported, a failing
    chmod raises OSError.
    """
    if os.name != "posix":
        return
    os.chmod(path, 0o700)


def get_local_username() -> str:
    """:return: Login name of the local operator"""
    return getpass.getuser()
