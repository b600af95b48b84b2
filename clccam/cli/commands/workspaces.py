"""
Workspace Commands.
"""

from typing import List, Optional

import typer
from rich.console import Console

from clccam.cli.output import failure, humanize, new_table
from clccam.cli.state import get_state
from clccam.services.workspaces import WorkspaceService

app = typer.Typer(help="Query workspaces")
console = Console()


@app.command("ls")
def list_workspaces(
    ctx: typer.Context,
    workspace_ids: Optional[List[str]] = typer.Argument(None, help="Workspace IDs; all workspaces if omitted"),
) -> None:
    """List accessible workspaces."""
    state = get_state(ctx)
    service = WorkspaceService(state.client)

    if workspace_ids:
        workspaces = []
        for workspace_id in workspace_ids:
            with failure(f"failed to query workspace {workspace_id}"):
                workspaces.append(service.get(workspace_id))
    else:
        with failure("failed to query workspace list"):
            workspaces = service.list_workspaces()
    if state.json:
        return
    if not workspaces:
        console.print("No workspaces.")
        return

    table = new_table("ID", "Name", "Type", "Organization", "Email", "Last Login")
    for workspace in workspaces:
        table.add_row(
            workspace.id,
            workspace.name,
            workspace.type,
            workspace.organization,
            workspace.email,
            humanize(workspace.last_login),
        )
    console.print(table)
