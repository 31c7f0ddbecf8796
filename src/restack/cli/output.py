"""Output helpers for CLI commands.

user_output goes to stderr (progress, status, errors); machine_output goes to
stdout (data meant for piping).
"""

import click
from rich.console import Console
from rich.table import Table


def user_output(message: str = "") -> None:
    click.echo(message, err=True)


def machine_output(message: str = "") -> None:
    click.echo(message)


def print_table(table: Table) -> None:
    """Render a rich table to stdout through click so CliRunner captures it."""
    console = Console(width=200, force_terminal=False)
    with console.capture() as capture:
        console.print(table)
    click.echo(capture.get(), nl=False)
