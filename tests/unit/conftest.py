"""
Unit Test Fixtures.

Fixtures for unit tests - the CAM API is replaced by an in-process fake.
Unit tests should be fast and isolated, never touching the network.
"""

from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from clccam.client.client import Client


# =============================================================================
# Fake CAM API
# =============================================================================


class FakeCam:
    """
    Canned CAM API served through httpx.MockTransport.

    Responses are returned in the order they were queued; the last one is
    repeated for any further request. Every request is recorded.

    Usage:
        def test_list(fake_cam, cam_client):
            fake_cam.reply(200, json=[])
            cam_client.get("/services/boxes", list[Box])
            assert fake_cam.last_request.url.path == "/services/boxes"
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._replies: list[dict[str, Any]] = []

    def reply(self, status_code: int = 200, **kwargs: Any) -> "FakeCam":
        """Queue a response; kwargs are passed to httpx.Response (json, content, headers)."""
        self._replies.append({"status_code": status_code, **kwargs})
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._replies:
            return httpx.Response(204)
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        return httpx.Response(**reply)

    def install(self, client: Client) -> None:
        """Client option routing all requests of client to the fake."""
        client.transport = httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def fake_cam() -> FakeCam:
    """A fresh fake CAM API for the test."""
    return FakeCam()


@pytest.fixture
def cam_client(fake_cam: FakeCam) -> Generator[Client, None, None]:
    """Client wired to the fake CAM API, with no retries."""
    client = Client(fake_cam.install)
    yield client
    client.close()


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            service._logger = mock_logger
            # Test code that logs
            mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger


# =============================================================================
# Sample Payloads
# =============================================================================


@pytest.fixture
def box_payload() -> dict[str, Any]:
    """A script box as returned by GET /services/boxes/{id}."""
    return {
        "id": "8f1a2b3c-4d5e-4f60-8a7b-9c0d1e2f3a4b",
        "name": "nginx",
        "visibility": "workspace",
        "owner": "jdoe",
        "organization": "acme",
        "schema": "http://elasticbox.net/schemas/boxes/script",
        "created": "2018-01-26 19:50:49.131726",
        "updated": "2019-01-12T00:15:09.026751Z",
        "deleted": None,
        "uri": "/services/boxes/8f1a2b3c-4d5e-4f60-8a7b-9c0d1e2f3a4b",
        "requirements": ["linux"],
        "variables": [
            {"name": "port", "type": "Port", "value": "80", "required": True, "visibility": "public"},
        ],
        "events": {
            "install": {
                "url": "/services/blobs/download/57e1/install",
                "length": 120,
                "content_type": "text/x-shellscript",
                "upload_date": "2018-01-26 19:50:49",
                "destination_path": "scripts",
            },
        },
        "version": {
            "box": "8f1a2b3c-4d5e-4f60-8a7b-9c0d1e2f3a4b",
            "number": {"major": 1, "minor": 2, "patch": 3},
            "workspace": "jdoe",
            "description": "First release",
        },
        "unknown_field": {"ignored": True},
    }


@pytest.fixture
def instance_payload() -> dict[str, Any]:
    """An instance as returned by GET /services/instances/{id}."""
    return {
        "id": "i-z48wub",
        "name": "web-frontend",
        "owner": "jdoe",
        "uri": "/services/instances/i-z48wub",
        "created": "2018-01-26 19:50:49.131726",
        "updated": "2018-01-27 08:00:00",
        "state": "done",
        "box": "8f1a2b3c-4d5e-4f60-8a7b-9c0d1e2f3a4b",
        "operation": {"created": "2018-01-27 08:00:00", "event": "deploy", "workspace": "jdoe"},
        "service": {
            "id": "eb-1cm83",
            "type": "Linux Compute",
            "machines": [{"name": "eb-1cm83-1", "state": "processing", "workflow": []}],
        },
        "tags": ["web"],
        "schema": "http://elasticbox.net/schemas/instance",
    }
