#!/usr/bin/env python3
"""Set up SSH access to a Google Cloud VM.

Prerequisites: gcloud CLI installed and authenticated, active project set.

Usage: gcloud-ssh [options]

Examples:
    gcloud-ssh
    gcloud-ssh --no-animations
    gcloud-ssh --update
    gcloud-ssh --version
"""

from typing import Annotated, Literal

import cyclopts
from cyclopts import Parameter
from rich import print

from . import __version__
from .config import load_settings
from .providers import GCloudProvider
from .ui import TerminalPresenter
from .update import UpdateCheckFailed, check_for_update
from .utils import error, log, setup_logging
from .workflow import run_workflow

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

app = cyclopts.App(
    name="gcloud-ssh",
    help="Set up SSH access to a Google Cloud VM",
    version=__version__,
    version_flags=["--version", "-v"],
    help_flags=["--help", "-h"],
)


def check_update() -> None:
    """Print whether a newer release is published; exit 1 if the check fails."""
    try:
        status = check_for_update(__version__)
    except UpdateCheckFailed as e:
        error(str(e))
    if status.available:
        print(f"[yellow]A new version is available: {status.latest} (installed: {status.current})")
        print("  Upgrade with: pip install --upgrade gcloud-ssh")
    else:
        print(f"[green]gcloud-ssh {status.current} is up to date.")


@app.default
def main(
    *,
    update: Annotated[bool, Parameter(negative="")] = False,
    no_animations: Annotated[bool, Parameter(negative="")] = False,
    log_level: LogLevel | None = None,
):
    """Ensure an SSH key, pick a VM, install the key on it and print the ssh command.

    :param update: Check for a newer release and exit
    :param no_animations: Disable spinners, typing and progress effects
    :param log_level: Log level (default: GCLOUD_SSH_LOG_LEVEL or WARNING)
    """
    settings = load_settings()
    if no_animations:
        settings = settings.without_animations()
    setup_logging(log_level or settings.log_level)

    if update:
        check_update()
        return

    presenter = TerminalPresenter(settings.animations, settings.help)
    presenter.banner()
    presenter.welcome()

    provider = GCloudProvider(gcloud_bin=settings.gcloud_bin)
    outcome = run_workflow(provider, presenter)
    if not outcome.completed:
        error(f"{outcome.stage.label} failed: {outcome.error}")
    log(f"Connection command: {outcome.connection.command}")


if __name__ == "__main__":
    app()
