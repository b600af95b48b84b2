"""
Provider Commands.
"""

from typing import List, Optional

import typer
from rich.console import Console

from clccam.cli.output import failure, humanize, new_table
from clccam.cli.state import get_state
from clccam.schemas.providers import Provider
from clccam.services.providers import ProviderService

app = typer.Typer(help="Manage providers")
console = Console()


@app.command("ls")
def list_providers(
    ctx: typer.Context,
    provider_ids: Optional[List[str]] = typer.Argument(None, help="Provider IDs; all providers if omitted"),
) -> None:
    """List providers."""
    state = get_state(ctx)
    service = ProviderService(state.client)

    if not provider_ids:
        with failure("failed to query provider list"):
            providers = service.list_providers()
        if not state.json:
            _display_providers(providers)
        return

    for provider_id in provider_ids:
        with failure(f"failed to query provider {provider_id}"):
            provider = service.get(provider_id)
        if state.json:
            continue
        _display_providers([provider])
        if provider.services:
            console.print(f"\n{provider.name} available services:", highlight=False)
            for srv in provider.services:
                console.print(f"  - {srv.name}", highlight=False)


@app.command("rm")
def remove(
    ctx: typer.Context,
    provider_id: str = typer.Argument(..., help="Provider ID"),
) -> None:
    """Remove a provider."""
    with failure(f"failed to delete provider {provider_id}"):
        ProviderService(get_state(ctx).client).delete(provider_id)
    console.print(f"Deleted provider {provider_id}.", highlight=False)


def _display_providers(providers: list[Provider]) -> None:
    if not providers:
        console.print("No providers.")
        return

    table = new_table("Name", "Type", "ID", "Owner", "Created", "Updated", "State")
    for provider in providers:
        table.add_row(
            provider.name,
            provider.type,
            str(provider.id),
            provider.owner,
            humanize(provider.created),
            humanize(provider.updated),
            provider.state,
        )
    console.print(table)
