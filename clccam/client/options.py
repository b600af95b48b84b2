"""
Client and Request Options.

Functional options: each option is a callable that applies one change to a
Client (ClientOption) or to an outgoing httpx.Request (RequestOption).
Options are applied left to right, so a later option overrides whatever an
earlier one set for the same field.

Usage:
    client = Client(
        host_url("cam.ctl.io"),
        retryer(3, 1.0, 180.0),
        request_options(headers({"Authorization": "Bearer ..."})),
    )
"""

import threading
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit, urlunsplit

import httpx

from clccam.core.exceptions import ConfigurationError
from clccam.core.resilience import RetryTransport

if TYPE_CHECKING:
    from clccam.client.client import Client

ClientOption = Callable[["Client"], None]

RequestOption = Callable[[httpx.Request], None]


class CancelContext:
    """
    Cancellation signal shared between a caller and a client.

    Setting it makes the next request check, or the next retry decision,
    abort with RequestCancelledError.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Signal cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def normalize_base_url(host: str) -> str:
    """
    Turn a host name or URL into an https base URL without trailing slash.

    Bare host names ("cam.ctl.io") and full URLs are both accepted; the
    scheme is always forced to https.
    """
    raw = host.strip().rstrip("/")
    if "://" not in raw:
        raw = "https://" + raw

    parts = urlsplit(raw)
    if not parts.netloc:
        raise ConfigurationError(f"invalid URL {host!r}: missing host")
    return urlunsplit(("https", parts.netloc, parts.path.rstrip("/"), "", ""))


# =============================================================================
# Client options
# =============================================================================


def host_url(host: str) -> ClientOption:
    """Set the base URL of the client if host is non-empty."""

    def apply(client: "Client") -> None:
        if host:
            client.base_url = normalize_base_url(host)

    return apply


def retryer(max_retries: int, step_delay: float, max_timeout: float) -> ClientOption:
    """
    Install the retry policy on the client transport.

    Args:
        max_retries: Maximum number of attempts per request
        step_delay: Base value (seconds) of the exponential backoff with jitter
        max_timeout: Overall client timeout (seconds), also the backoff cap
    """

    def apply(client: "Client") -> None:
        transport = client.transport
        if isinstance(transport, RetryTransport):
            transport = transport.transport
        client.transport = RetryTransport(
            transport,
            max_retries=max_retries,
            step_delay=step_delay,
            max_timeout=max_timeout,
        )
        # The overall client timeout moves in lock-step with the retryer.
        client.timeout = max_timeout

    return apply


def with_context(ctx: CancelContext | None) -> ClientOption:
    """Attach cancellation context ctx to the client."""

    def apply(client: "Client") -> None:
        client.ctx = ctx

    return apply


def debug(enabled: bool) -> ClientOption:
    """Enable logging of requests and responses at DEBUG level."""

    def apply(client: "Client") -> None:
        client.request_debug = enabled

    return apply


def json_response(enabled: bool) -> ClientOption:
    """Enable printing JSON responses to stdout."""

    def apply(client: "Client") -> None:
        client.json_response = enabled

    return apply


def insecure_tls(enable: bool) -> ClientOption:
    """
    Disable TLS certificate validation. Use with caution.

    Only a plain httpx.HTTPTransport exposes its TLS configuration. When
    retryer() has wrapped one, the wrapped transport is replaced in place.

    Raises:
        ConfigurationError: If there is no HTTPTransport to reconfigure
    """

    def apply(client: "Client") -> None:
        transport = client.transport
        if isinstance(transport, RetryTransport) and type(transport.transport) is httpx.HTTPTransport:
            replaced = transport.transport
            transport.transport = httpx.HTTPTransport(verify=not enable)
            replaced.close()
            return
        if type(transport) is not httpx.HTTPTransport:
            raise ConfigurationError(
                "unable to access http client transport attributes - not using httpx.HTTPTransport?"
            )
        client.transport = httpx.HTTPTransport(verify=not enable)

    return apply


def request_options(*options: RequestOption) -> ClientOption:
    """Append request options to the per-request options of the client."""

    def apply(client: "Client") -> None:
        client.request_options.extend(options)

    return apply


# =============================================================================
# Request options
# =============================================================================


def headers(values: Mapping[str, str]) -> RequestOption:
    """Set the specified names and values as headers on a request."""

    def apply(request: httpx.Request) -> None:
        for name, value in values.items():
            request.headers[name] = value

    return apply


def query(params: Mapping[str, Any]) -> RequestOption:
    """Merge params into the query string of a request."""

    def apply(request: httpx.Request) -> None:
        request.url = request.url.copy_merge_params(dict(params))

    return apply
