"""
Token Command.

Prints the details of a CAM user or service token.
"""

from datetime import datetime

import typer
from rich.console import Console

from clccam.auth.token import token_from_string_or_file
from clccam.cli.output import die, new_table
from clccam.core.exceptions import TokenError

console = Console()

TIME_FORMAT = "%a %b %d %H:%M:%S UTC %Y"


def _format_time(when: datetime) -> str:
    return when.strftime(TIME_FORMAT)


def dump_token(
    value: str = typer.Argument(..., help="Token contents or /path/to/token.file"),
) -> None:
    """
    Print details of a CAM token.

    Works with expired tokens, and does not contact CAM.
    """
    try:
        claims = token_from_string_or_file(value).claims()
    except TokenError as e:
        die(f"invalid CAM token: {e}")

    expires = claims.expires()
    table = new_table("Field", "Token Value")
    table.add_row("exp", _format_time(expires) if expires else "never (permanent token)")
    table.add_row("iat", _format_time(claims.issued()))
    table.add_row("jti", str(claims.jti) if claims.jti else "")
    if claims.type == "user":
        table.add_row("sub", claims.subject)
        table.add_row("name", claims.name)
        table.add_row("organization", claims.organization)
    else:
        table.add_row("instance", claims.instance_id)
        table.add_row("machine", claims.machine_id)
        table.add_row("service", claims.service_id)

    console.print(f"{claims}:", highlight=False, soft_wrap=True)
    console.print(table)
