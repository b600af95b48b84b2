"""
CAM REST Client.

Generic request engine for the CAM API. Every resource call funnels through
Client.get_response(), which performs exactly one logical request/response
cycle: build the request, apply the configured options, send it through the
(possibly retrying) transport and turn the response into a value or an error.

Usage:
    client = Client(host_url("cam.ctl.io"), retryer(3, 1.0, 180.0))
    boxes = client.get("/services/boxes", list[Box])
    client.get_response("/services/boxes/" + box_id, "DELETE")

Response bodies are decoded according to the requested target (see
clccam.client.targets). Non-success statuses raise APIError carrying the
best message that could be extracted from the body.
"""

import json
import sys
from types import TracebackType
from typing import Any, TextIO

import httpx
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_json

from clccam.client.options import (
    CancelContext,
    ClientOption,
    RequestOption,
    debug,
    json_response,
    normalize_base_url,
    with_context,
)
from clccam.client.targets import ResponseTarget, as_target
from clccam.core.config import DEFAULT_HOST
from clccam.core.exceptions import (
    APIError,
    ConfigurationError,
    DecodeError,
    RequestCancelledError,
)
from clccam.core.logging import get_logger
from clccam.core.resilience import CANCEL_EXTENSION, RetryTransport
from clccam.core.utils import collapse_newlines, detect_content_type, is_html

logger = get_logger(__name__)

SUCCESS_STATUS = frozenset({200, 201, 202, 204})

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

_RAW_TYPES = (bytes, bytearray, memoryview)


def encode_body(body: Any) -> tuple[bytes, str]:
    """
    Serialize a request payload.

    Raw byte buffers are sent as-is with a sniffed content type; any other
    value is encoded as JSON.

    Returns:
        Tuple of (content, content_type)

    Raises:
        ConfigurationError: If the value cannot be encoded as JSON
    """
    if isinstance(body, _RAW_TYPES):
        content = bytes(body)
        return content, detect_content_type(content)
    try:
        if isinstance(body, BaseModel):
            content = body.model_dump_json(by_alias=True, exclude_none=True).encode()
        else:
            content = to_json(body, by_alias=True, exclude_none=True)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise ConfigurationError(
            f"failed to encode request model {type(body).__name__}: {e}"
        ) from e
    return content, JSON_CONTENT_TYPE


def error_from_response(response: httpx.Response) -> APIError:
    """
    Build an APIError from a non-success response.

    The message is taken from the first body shape that matches:
    1) HTML page: ignored, the bare status line is used
    2) JSON object with a "message" (trailing dots/spaces stripped)
       or an "error" key
    3) bare JSON string
    4) the trimmed body, line breaks collapsed to "; "
    """
    body = response.content
    if not body or is_html(body):
        return APIError(response.status_code, None, response.reason_phrase)

    text = body.decode("utf-8", errors="replace").strip()
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        message = text
        if "message" in payload:
            if isinstance(payload["message"], str):
                # CAM sometimes ends error messages in '.'
                message = payload["message"].rstrip(" .")
        elif "error" in payload:
            if isinstance(payload["error"], str):
                message = f"Error - {payload['error']}"
    elif isinstance(payload, str):
        message = payload
    else:
        message = collapse_newlines(text)
    return APIError(response.status_code, message, response.reason_phrase)


def _innermost(transport: httpx.BaseTransport) -> httpx.BaseTransport:
    """Return the transport doing the I/O, unwrapping retry layers."""
    while isinstance(transport, RetryTransport):
        transport = transport.transport
    return transport


def _redact(headers: httpx.Headers) -> dict[str, str]:
    redacted = dict(headers)
    for name in list(redacted):
        if name.lower() == "authorization":
            redacted[name] = "<redacted>"
    return redacted


class Client:
    """
    Reusable REST client for CAM API calls.

    Attributes:
        transport: Low-level httpx transport (wrapped by retryer())
        base_url: Base URL that request paths are resolved against
        request_options: Options applied to every outgoing request
        ctx: Optional cancellation context
        request_debug: Log requests and responses at DEBUG level
        json_response: Echo JSON response bodies to stdout
        timeout: Overall request timeout in seconds, None for no limit
        out: Stream for the JSON echo (defaults to sys.stdout)

    Configure a client before sharing it; applying options while requests
    are in flight on the same client is not supported.
    """

    def __init__(self, *options: ClientOption) -> None:
        self.transport: httpx.BaseTransport = httpx.HTTPTransport()
        self.base_url = normalize_base_url(DEFAULT_HOST)
        self.request_options: list[RequestOption] = []
        self.ctx: CancelContext | None = None
        self.request_debug = False
        self.json_response = False
        self.timeout: float | None = None
        self.out: TextIO | None = None

        self._http: httpx.Client | None = None
        self._http_config: tuple[httpx.BaseTransport, float | None] | None = None
        self.with_options(*options)

    def with_options(self, *options: ClientOption) -> "Client":
        """Apply options to the client, in order, and return it."""
        for set_option in options:
            set_option(self)
        return self

    def with_debug(self, enabled: bool = True) -> "Client":
        """Enable or disable request/response debugging."""
        return self.with_options(debug(enabled))

    def with_context(self, ctx: CancelContext | None) -> "Client":
        """Set the cancellation context."""
        return self.with_options(with_context(ctx))

    def with_json_response(self, enabled: bool = True) -> "Client":
        """Enable or disable printing JSON responses to stdout."""
        return self.with_options(json_response(enabled))

    def _http_client(self) -> httpx.Client:
        """Get or create the HTTP client; rebuilt only if transport or timeout changed."""
        if self._http is None or self._http_config != (self.transport, self.timeout):
            if self._http is not None and _innermost(self._http_config[0]) is not _innermost(self.transport):
                # Closing the client closes its transport; only do so once nothing uses it.
                self._http.close()
            self._http = httpx.Client(transport=self.transport, timeout=self.timeout)
            self._http_config = (self.transport, self.timeout)
        return self._http

    def close(self) -> None:
        """Close the HTTP client and its transport."""
        if self._http is not None:
            stale = _innermost(self._http_config[0]) is not _innermost(self.transport)
            self._http.close()
            self._http = None
            if not stale:
                return
        self.transport.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def url(self, path: str) -> str:
        """Resolve a request path against the base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str, target: Any = None, *options: RequestOption) -> Any:
        """Perform GET path, decoding the response into target."""
        return self.get_response(path, "GET", None, target, *options)

    def post(self, path: str, body: Any = None, target: Any = None, *options: RequestOption) -> Any:
        """Perform POST path with body."""
        return self.get_response(path, "POST", body, target, *options)

    def put(self, path: str, body: Any = None, target: Any = None, *options: RequestOption) -> Any:
        """Perform PUT path with body."""
        return self.get_response(path, "PUT", body, target, *options)

    def delete(self, path: str, target: Any = None, *options: RequestOption) -> Any:
        """Perform DELETE path."""
        return self.get_response(path, "DELETE", None, target, *options)

    def get_response(
        self,
        url_path: str,
        verb: str,
        body: Any = None,
        target: Any = None,
        *options: RequestOption,
    ) -> Any:
        """
        Perform a generic request.

        Args:
            url_path: Request path relative to the base URL
            verb: HTTP method
            body: Payload; bytes are sent verbatim, anything else as JSON
            target: Result type or ResponseTarget, None if no result is expected
            *options: Per-call request options, applied after the client's

        Returns:
            The decoded response, or None if no target was given

        Raises:
            ConfigurationError: Invalid target or payload (before any I/O),
                or a non-empty response without a target, echoed or not
            APIError: Non-success status
            DecodeError: Empty or undecodable success response
            RequestCancelledError: The cancellation context was signalled
            httpx.TransportError: Network failure after all retries
        """
        response_target = as_target(target)

        content: bytes | None = None
        request_headers: dict[str, str] = {}
        if body is not None:
            content, request_headers["Content-Type"] = encode_body(body)

        http = self._http_client()
        request = http.build_request(
            verb,
            self.url(url_path),
            content=content,
            headers=request_headers,
        )

        for set_option in (*self.request_options, *options):
            set_option(request)
        request.headers["Accept"] = "application/json"

        if self.ctx is not None:
            self._check_cancelled(request)
            request.extensions[CANCEL_EXTENSION] = self.ctx

        if self.request_debug:
            self._dump_request(request)

        response = http.send(request)

        if self.ctx is not None:
            self._check_cancelled(request)

        if self.request_debug:
            self._dump_response(response)

        if response.status_code not in SUCCESS_STATUS:
            raise error_from_response(response)
        return self._decode(response, response_target)

    def _check_cancelled(self, request: httpx.Request) -> None:
        if self.ctx is not None and self.ctx.cancelled:
            raise RequestCancelledError(f"{request.method} {request.url.path} cancelled")

    def _decode(self, response: httpx.Response, target: ResponseTarget | None) -> Any:
        body = response.content
        status = f"{response.status_code} {response.reason_phrase}"

        if self.json_response and body:
            self._print_json(body)

        if target is not None:
            if not body:
                raise DecodeError(
                    f"cannot populate {target!r} from empty response ({status})"
                )
            return target.decode(body)

        if body:
            raise ConfigurationError(
                f"unable to decode non-empty {status!r} response ({len(body)} bytes) without a response target"
            )
        return None

    def _print_json(self, body: bytes) -> None:
        """Pretty-print a JSON body with tab indentation; other bodies are echoed as-is."""
        try:
            text = json.dumps(json.loads(body), indent="\t", ensure_ascii=False)
        except ValueError:
            text = body.decode("utf-8", errors="replace")
        out = self.out if self.out is not None else sys.stdout
        print(text, file=out)

    def _dump_request(self, request: httpx.Request) -> None:
        content = request.content
        logger.debug(
            f"{request.method} {request.url}",
            extra={
                "headers": _redact(request.headers),
                "body": content.decode("utf-8", errors="replace")
                if content and "text" in detect_content_type(content) else None,
                "body_bytes": len(content),
            },
        )

    def _dump_response(self, response: httpx.Response) -> None:
        content = response.content
        logger.debug(
            f"{response.status_code} {response.reason_phrase} {response.request.url.path}",
            extra={
                "headers": dict(response.headers),
                "body": content.decode("utf-8", errors="replace")
                if content and not is_html(content) else None,
                "body_bytes": len(content),
            },
        )
