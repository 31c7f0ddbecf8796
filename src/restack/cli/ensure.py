"""CLI error handling utilities with styled output.

All errors use a red "Error:" prefix on stderr and exit with code 1.
"""

from typing import NoReturn, TypeVar

import click

from restack.cli.output import user_output

T = TypeVar("T")


def fail(error_message: str) -> NoReturn:
    """Output a styled error and exit.

    Raises:
        SystemExit: Always (with exit code 1)
    """
    user_output(click.style("Error: ", fg="red") + error_message)
    raise SystemExit(1)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        if not condition:
            fail(error_message)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Narrows `T | None` to `T` for the type checker.
        """
        if value is None:
            fail(error_message)
        return value
