"""
Box Commands.

Commands for listing, inspecting and removing boxes.
"""

from typing import List, Optional

import typer
from rich.console import Console

from clccam.cli.output import CLIENT_ERRORS, failure, humanize, new_table, warn
from clccam.cli.state import get_state
from clccam.schemas.boxes import Box
from clccam.services.boxes import BoxService

app = typer.Typer(help="Manage boxes")
console = Console()


@app.command("ls")
def list_boxes(
    ctx: typer.Context,
    box_ids: Optional[List[str]] = typer.Argument(None, help="Box IDs; all boxes if omitted"),
) -> None:
    """
    List box(es).

    Without arguments, lists all boxes of the personal workspace.
    """
    state = get_state(ctx)
    service = BoxService(state.client)

    if not box_ids:
        with failure("failed to query box list"):
            boxes = service.list_boxes()
        if not state.json:
            _display_boxes(boxes)
        return

    failed = False
    for box_id in box_ids:
        try:
            box = service.get(box_id)
        except CLIENT_ERRORS as e:
            warn(f"failed to query box {box_id}: {e}")
            failed = True
            continue
        if not state.json:
            _display_boxes([box])
    if failed:
        raise typer.Exit(1)


@app.command()
def stack(
    ctx: typer.Context,
    box_id: str = typer.Argument(..., help="Box ID"),
) -> None:
    """List the stack of a box (if any)."""
    state = get_state(ctx)
    with failure(f"failed to query {box_id} box stack"):
        boxes = BoxService(state.client).stack(box_id)
    if state.json:
        return
    # The stack is unsorted; the box in question goes first.
    boxes.sort(key=lambda box: str(box.id) != box_id)
    _display_boxes(boxes)


@app.command()
def versions(
    ctx: typer.Context,
    box_id: str = typer.Argument(..., help="Box ID"),
) -> None:
    """List the versions of a box."""
    state = get_state(ctx)
    with failure(f"failed to query {box_id} box versions"):
        boxes = BoxService(state.client).versions(box_id)
    if state.json:
        return
    if not boxes:
        console.print("No versions available.")
        return

    table = new_table("Name", "Version", "ID", "Owner", "Visibility", "Created", "Updated")
    for box in sorted(boxes, key=lambda b: b.version.as_tuple()):
        table.add_row(
            box.name,
            str(box.version),
            str(box.id),
            box.owner,
            str(box.visibility),
            humanize(box.created),
            humanize(box.updated),
        )
    console.print(table)


@app.command()
def diff(
    ctx: typer.Context,
    box_id: str = typer.Argument(..., help="Box ID"),
) -> None:
    """Print the differences of a box."""
    state = get_state(ctx)
    with failure(f"failed to query {box_id} box differences"):
        changes = BoxService(state.client).diff(box_id)
    if not state.json:
        console.print_json(data=changes)


@app.command()
def bindings(
    ctx: typer.Context,
    box_id: str = typer.Argument(..., help="Box ID"),
) -> None:
    """List the bindings of a box."""
    state = get_state(ctx)
    with failure(f"failed to query {box_id} box bindings"):
        found = BoxService(state.client).bindings(box_id)
    if state.json:
        return

    table = new_table("Name", "ID", "Icon")
    for binding in found:
        table.add_row(binding.name, str(binding.id), binding.icon)
    console.print(table)


@app.command("rm")
def remove(
    ctx: typer.Context,
    box_ids: List[str] = typer.Argument(..., help="IDs of the boxes to remove"),
) -> None:
    """Remove box(es)."""
    service = BoxService(get_state(ctx).client)

    failed = False
    for box_id in box_ids:
        try:
            service.delete(box_id)
        except CLIENT_ERRORS as e:
            warn(f"failed to delete box {box_id}: {e}")
            failed = True
        else:
            console.print(f"Deleted box {box_id}.", highlight=False)
    if failed:
        raise typer.Exit(1)


def _display_boxes(boxes: list[Box]) -> None:
    """Print a subset of the box information as a table."""
    if not boxes:
        console.print("No boxes.")
        return

    table = new_table("Name", "ID", "Owner", "Visibility", "Created", "Updated")
    for box in boxes:
        table.add_row(
            box.name,
            str(box.id),
            box.owner,
            str(box.visibility),
            humanize(box.created, "Not set"),
            humanize(box.updated, "Not set"),
        )
    console.print(table)
