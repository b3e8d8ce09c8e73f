"""Pacman-style console messages (``==>``, `` ->``, ``==> WARNING:``).

These are user-facing output, separate from diagnostic logging.
"""
from __future__ import annotations

import os
from typing import IO, Optional

from rich.console import Console
from rich.markup import escape


def use_color() -> Optional[bool]:
    """Colour preference from the environment.

    Returns False when ``CLICOLOR=0``, True when ``CLICOLOR_FORCE=1`` and
    None to let rich decide from the terminal.
    """
    if os.environ.get("CLICOLOR") == "0":
        return False
    if os.environ.get("CLICOLOR_FORCE") == "1":
        return True
    return None


def make_console(file: Optional[IO[str]] = None, stderr: bool = False) -> Console:
    color = use_color()
    if color is False:
        return Console(file=file, stderr=stderr, no_color=True, highlight=False)
    return Console(file=file, stderr=stderr, force_terminal=color, highlight=False)


_console: Optional[Console] = None


def get_console() -> Console:
    """Shared console; messages go to stderr so stdout stays machine-readable."""
    global _console  # pylint: disable=global-statement
    if _console is None:
        _console = make_console(stderr=True)
    return _console


def set_console(console: Optional[Console]) -> None:
    """Replace the shared console (None resets it to the default)."""
    global _console  # pylint: disable=global-statement
    _console = console


def msg(text: str) -> None:
    get_console().print(f"[bold green]==>[/] [bold]{escape(text)}[/]", soft_wrap=True)


def msg2(text: str) -> None:
    get_console().print(f" [bold blue] ->[/] [bold]{escape(text)}[/]", soft_wrap=True)


def warning(text: str) -> None:
    get_console().print(f"[bold yellow]==> WARNING:[/] [bold]{escape(text)}[/]", soft_wrap=True)


def error(text: str) -> None:
    get_console().print(f"[bold red]==> ERROR:[/] [bold]{escape(text)}[/]", soft_wrap=True)
