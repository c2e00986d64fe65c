"""Output utilities for CLI commands with clear intent.

Human-readable messages go to stderr via user_output(); structured data for
scripts and agents goes to stdout via machine_output(). Keeping the streams
separate lets `--json` output be piped without status chatter mixed in.
"""

from typing import Any

import click
from rich.console import Console

_stderr_console = Console(stderr=True, highlight=False, soft_wrap=True)


def user_output(message: Any = "", nl: bool = True) -> None:
    """Print a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Print machine-readable output to stdout."""
    click.echo(message, nl=nl)


def rich_output(renderable: Any) -> None:
    """Render a rich object (table, panel) to stderr alongside user_output()."""
    _stderr_console.print(renderable)


def format_change_line(change_id: str, title: str) -> str:
    """Format "<short id> <title>" with a placeholder for undescribed changes."""
    return f"{click.style(change_id[:8], fg='magenta')} {title or '(no description)'}"
