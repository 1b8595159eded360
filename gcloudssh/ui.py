"""Terminal presentation: banner, section headers, spinners and the VM menu.

Nothing here affects the workflow's data flow. Animations are skipped when
disabled in the settings or when output is not a terminal.
"""

import time
from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.prompt import Prompt
from rich.text import Text

from . import __version__
from .config import (
    APP_TAGLINE,
    APP_TITLE,
    DEFAULT_FRAME_WIDTH,
    KEYBOARD_SHORTCUTS,
    TUTORIAL_TEXT,
    AnimationSettings,
    HelpSettings,
)
from .errors import SelectionAborted
from .types import ConnectionInfo

QUIT_CHOICE = "q"


class Presenter(Protocol):
    def section(self, title: str) -> None: ...

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def spinner(self, message: str) -> ContextManager[None]: ...

    def progress(self, message: str) -> None: ...

    def select(self, items: list[str]) -> int: ...

    def connection(self, info: ConnectionInfo) -> None: ...


class TerminalPresenter:
    """Rich-backed presenter used by the CLI."""

    def __init__(
        self,
        animations: AnimationSettings | None = None,
        help: HelpSettings | None = None,
        console: Console | None = None,
    ):
        self.animations = animations or AnimationSettings()
        self.help = help or HelpSettings()
        self.console = console or Console()

    @property
    def animated(self) -> bool:
        return self.animations.enabled and self.console.is_terminal

    def width(self) -> int:
        """Best-effort terminal width."""
        try:
            return self.console.size.width or DEFAULT_FRAME_WIDTH
        except OSError:
            return DEFAULT_FRAME_WIDTH

    def banner(self) -> None:
        title = Text(APP_TITLE, style="bold bright_cyan", justify="center")
        title.append(f"\nv{__version__}", style="bright_white")
        title.append(f"\n{APP_TAGLINE}", style="italic bright_white")
        self.console.print(
            Panel(title, box=box.DOUBLE, border_style="bright_blue", width=min(self.width(), 64))
        )

    def welcome(self) -> None:
        self.type_text(f"Welcome to {APP_TITLE}! Let's set up your SSH access.")
        if self.help.tutorial_mode:
            self.framed(TUTORIAL_TEXT)
        if self.help.show_tips:
            self.console.print(f"\n{escape(KEYBOARD_SHORTCUTS)}", style="dim")

    def type_text(self, text: str) -> None:
        if not self.animated:
            self.console.print(text, markup=False, highlight=False)
            return
        delay = self.animations.typing_speed_ms / 1000
        for ch in text:
            self.console.print(ch, end="", markup=False, highlight=False)
            time.sleep(delay)
        self.console.print()

    def framed(self, text: str) -> None:
        self.console.print(
            Panel(escape(text), box=box.ROUNDED, border_style="blue", width=self.width())
        )

    def section(self, title: str) -> None:
        self.console.print()
        self.console.rule(f"[bold bright_white]{escape(title)}", style="bright_blue")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]ℹ  {escape(message)}")

    def success(self, message: str) -> None:
        self.console.print(f"[bold green]✅ {escape(message)}")

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Show a spinner while the wrapped block runs.

        The spinner stays up for at least ``spinner_duration_ms`` when the
        block succeeds quickly.
        """
        if not self.animated:
            self.info(message)
            yield
            return
        start = time.monotonic()
        with self.console.status(f"[blue]{escape(message)}", spinner="dots"):
            yield
            remaining = self.animations.spinner_duration_ms / 1000 - (time.monotonic() - start)
            if remaining > 0:
                time.sleep(remaining)

    def progress(self, message: str) -> None:
        if not self.animated:
            return
        steps = self.animations.progress_steps
        step_delay = self.animations.progress_duration_ms / 1000 / steps
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=30),
            TaskProgressColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task(escape(message), total=steps)
            for _ in range(steps):
                time.sleep(step_delay)
                progress.advance(task)

    def select(self, items: list[str]) -> int:
        """Print a numbered menu and return the zero-based choice.

        :param items: Display lines in menu order
        :return: Index into ``items``
        :raises SelectionAborted: On q or Q, Ctrl-C or end of input
        """
        self.console.print("[blue]Please select a VM to connect to:")
        for i, item in enumerate(items, start=1):
            self.console.print(f"  [bold yellow]{escape(f'[{i}]')}[/] {escape(item)}")

        choices = [str(i) for i in range(1, len(items) + 1)] + [QUIT_CHOICE, QUIT_CHOICE.upper()]
        try:
            answer = Prompt.ask(
                "VM number",
                choices=choices,
                default="1",
                show_choices=False,
                console=self.console,
            )
        except (KeyboardInterrupt, EOFError) as e:
            self.console.print()
            raise SelectionAborted("interrupted") from e

        if answer.lower() == QUIT_CHOICE:
            raise SelectionAborted("cancelled by operator")
        return int(answer) - 1

    def connection(self, info: ConnectionInfo) -> None:
        self.console.print("\n[yellow]=== CONNECTION INFORMATION ===")
        self.console.print(f"[yellow]VM Name:[/] {escape(info.name)}")
        self.console.print(f"[yellow]Zone:[/] {escape(info.zone)}")
        self.console.print(f"[yellow]External IP:[/] {escape(info.ip)}")
        self.console.print("\n[green]To connect to your VM, run:")
        self.console.print(
            Panel(
                Text(info.command, style="bold bright_white"),
                box=box.SQUARE,
                border_style="bright_blue",
                expand=False,
                padding=(0, 3),
            )
        )
