"""
Console Output Helpers.

Shared error reporting and formatting for the camsole commands. Command
output goes to stdout; errors go to stderr as "camsole: <message>".
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import NoReturn

import httpx
import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clccam.core.exceptions import CamError

PROG_NAME = "camsole"

err_console = Console(stderr=True)

# Failures of a CAM call that a command reports instead of crashing.
CLIENT_ERRORS = (CamError, httpx.HTTPError)


def warn(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]{PROG_NAME}:[/red] {escape(message)}", highlight=False, soft_wrap=True)


def die(message: str) -> NoReturn:
    """Print an error message to stderr and exit with status 1."""
    warn(message)
    raise typer.Exit(1)


@contextmanager
def failure(action: str) -> Iterator[None]:
    """
    Turn client errors into a fatal console error.

    Usage:
        with failure("failed to query box list"):
            boxes = BoxService(client).list_boxes()
    """
    try:
        yield
    except CLIENT_ERRORS as e:
        die(f"{action}: {e}")


def humanize(when: datetime | None, missing: str = "n/a") -> str:
    """Relative description of a UTC time, e.g. "3 hours ago"."""
    if when is None:
        return missing
    return pendulum.instance(when, tz="UTC").diff_for_humans()


def new_table(*columns: str, title: str | None = None) -> Table:
    """Create a table with the given column headers."""
    table = Table(title=title, show_header=True, header_style="bold")
    for column in columns:
        table.add_column(column)
    return table


def label(value: object, missing: str = "") -> str:
    """String form of an optional value; enum members with value 0 are still shown."""
    return missing if value is None else str(value)
