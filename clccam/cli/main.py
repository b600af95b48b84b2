"""
camsole - CAM Console.

Command-line client for Cloud Application Manager.
Built with Typer for commands and Rich for formatted output.

Usage:
    camsole --help                          # Show help
    camsole token ~/.clc/cam.token          # Print token details

    camsole box ls                          # List boxes
    camsole box versions <boxId>            # List box versions
    camsole instance ls <instanceId>        # Show an instance and its machines
    camsole instance shutdown <instanceId>  # Shut down an instance
    camsole provider ls                     # List providers
    camsole blob upload script.sh           # Upload a file

Options:
    --token, -t     Path or contents of CAM token (cached for later runs)
    --url, -u       REST API endpoint URL
    --debug, -d     Print request/response debug output to stderr
    --insecure      Disable TLS validation
    --json          Print JSON responses to stdout
"""

from typing import Optional

import typer

from clccam.cli.commands import (
    blob_app,
    box_app,
    dump_token,
    instance_app,
    provider_app,
    workspace_app,
)
from clccam.cli.output import PROG_NAME, die
from clccam.cli.state import ConsoleState
from clccam.core.config import get_app_config, get_settings
from clccam.core.logging import setup_logging

app = typer.Typer(
    name=PROG_NAME,
    help="CAM Console - manage Cloud Application Manager boxes, instances and providers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("token")(dump_token)
app.add_typer(box_app, name="box")
app.add_typer(instance_app, name="instance")
app.add_typer(provider_app, name="provider")
app.add_typer(workspace_app, name="workspace")
app.add_typer(blob_app, name="blob")


@app.callback()
def main(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(
        None, "--token", "-t",
        help="Path or contents of CAM token [default: $CAM_TOKEN or cached token]",
    ),
    url: Optional[str] = typer.Option(
        None, "--url", "-u",
        help="REST API endpoint URL [default: $CAM_URL or cam.ctl.io]",
    ),
    debug_output: bool = typer.Option(
        False, "--debug", "-d",
        help="Print request/response debug output to stderr",
    ),
    insecure: bool = typer.Option(
        False, "--insecure",
        help="Disable TLS validation (use with caution)",
    ),
    json_output: bool = typer.Option(
        False, "--json",
        help="Print JSON response to stdout",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout",
        help="Client timeout in seconds",
        hidden=True,
    ),
) -> None:
    """
    CAM Console.

    Every command except token needs a valid, unexpired CAM token.
    """
    try:
        policy = get_app_config().client
    except ValueError as e:
        die(str(e))

    setup_logging(level="DEBUG" if debug_output else None)

    settings = get_settings()
    state = ConsoleState(
        token=token,
        url=url or settings.host,
        debug=debug_output,
        insecure=insecure or settings.insecure_tls,
        json=json_output,
        timeout=timeout if timeout is not None else policy.timeout,
        max_retries=policy.max_retries,
        step_delay=policy.step_delay,
    )
    ctx.obj = state
    ctx.call_on_close(state.close)


def run() -> None:
    """Console script entry point."""
    app(prog_name=PROG_NAME)


if __name__ == "__main__":
    run()
