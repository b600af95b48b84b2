"""
CAM REST client.

Generic request engine plus the option functions that configure it.
"""

from clccam.client.client import Client
from clccam.client.options import (
    CancelContext,
    debug,
    headers,
    host_url,
    insecure_tls,
    json_response,
    query,
    request_options,
    retryer,
    with_context,
)
from clccam.client.targets import JsonTarget, LinesTarget, ResponseTarget, TextTarget, as_target

__all__ = [
    "CancelContext",
    "Client",
    "JsonTarget",
    "LinesTarget",
    "ResponseTarget",
    "TextTarget",
    "as_target",
    "debug",
    "headers",
    "host_url",
    "insecure_tls",
    "json_response",
    "query",
    "request_options",
    "retryer",
    "with_context",
]
