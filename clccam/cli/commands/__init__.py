"""
Console Commands.

Organized by CAM resource.
"""

from clccam.cli.commands.blobs import app as blob_app
from clccam.cli.commands.boxes import app as box_app
from clccam.cli.commands.instances import app as instance_app
from clccam.cli.commands.providers import app as provider_app
from clccam.cli.commands.token import dump_token
from clccam.cli.commands.workspaces import app as workspace_app

__all__ = [
    "blob_app",
    "box_app",
    "dump_token",
    "instance_app",
    "provider_app",
    "workspace_app",
]
