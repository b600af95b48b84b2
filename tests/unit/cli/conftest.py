"""
Console Test Fixtures.

Commands run through typer's CliRunner. The console client is replaced by
the FakeCam-backed client, so no token or network access is needed.
"""

from collections.abc import Generator
from unittest.mock import MagicMock, PropertyMock, patch

import pytest

from clccam.cli.state import ConsoleState
from clccam.client.client import Client


@pytest.fixture(autouse=True)
def _skip_logging_setup() -> Generator[MagicMock, None, None]:
    """Keep the root callback from reconfiguring the root logger."""
    with patch("clccam.cli.main.setup_logging") as mock_setup:
        yield mock_setup


@pytest.fixture
def console_client(cam_client: Client) -> Generator[Client, None, None]:
    """
    Make every command use cam_client.

    Usage:
        def test_ls(fake_cam, console_client):
            fake_cam.reply(200, json=[])
            result = runner.invoke(app, ["box", "ls"])
    """
    with patch.object(ConsoleState, "client", new_callable=PropertyMock, return_value=cam_client):
        yield cam_client
