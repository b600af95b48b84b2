"""
Blob Commands.
"""

from pathlib import Path
from typing import List

import typer
from rich.console import Console

from clccam.cli.output import die, failure
from clccam.cli.state import get_state
from clccam.services.blobs import BlobService

app = typer.Typer(help="Manage blobs")
console = Console()


@app.command()
def upload(
    ctx: typer.Context,
    files: List[Path] = typer.Argument(..., help="Files to upload"),
) -> None:
    """Upload file(s) as new blobs."""
    state = get_state(ctx)
    service = BlobService(state.client)

    for i, path in enumerate(files):
        try:
            data = path.read_bytes()
        except OSError as e:
            die(f"failed to read {path}: {e}")
        with failure(f"failed to upload {path}"):
            blob = service.upload_file(path.name, data)
        if state.json:
            continue
        if i > 0:
            console.print()
        console.print(f"UUID:  {blob.url}", highlight=False, soft_wrap=True)
        console.print(f"URL:   {state.client.base_url}{blob.url}", highlight=False, soft_wrap=True)
