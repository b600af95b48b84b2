"""
CAM client library.

Typed access to the Cloud Application Manager REST API.

Usage:
    from clccam import load_token
    from clccam.services import BoxService

    client = load_token().new_client()
    boxes = BoxService(client).list_boxes()
"""

from clccam.auth.claims import Claims
from clccam.auth.token import Token, load_token
from clccam.client.client import Client
from clccam.core.exceptions import (
    APIError,
    CamError,
    ConfigurationError,
    DecodeError,
    RequestCancelledError,
    TokenError,
)

__version__ = "0.3.0"

__all__ = [
    "APIError",
    "CamError",
    "Claims",
    "Client",
    "ConfigurationError",
    "DecodeError",
    "RequestCancelledError",
    "Token",
    "TokenError",
    "load_token",
]
