"""
Console State.

Global options of a camsole invocation and the client built from them. The
client is only created when a command first needs it, so commands that do
not talk to CAM (token, --help) work without a valid token.
"""

from dataclasses import dataclass, field

import typer

from clccam.auth.token import Token, load_token, token_from_string_or_file
from clccam.cli.output import die
from clccam.client.client import Client
from clccam.client.options import debug, host_url, insecure_tls, json_response, retryer
from clccam.core.exceptions import TokenError
from clccam.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ConsoleState:
    """
    Attributes:
        token: Token contents or path given on the command line, if any
        url: CAM host or URL
        debug: Log requests and responses
        insecure: Disable TLS validation
        json: Echo JSON responses to stdout
        timeout: Overall client timeout in seconds
        max_retries: Attempts per request
        step_delay: Base backoff delay in seconds
    """

    token: str | None
    url: str
    debug: bool = False
    insecure: bool = False
    json: bool = False
    timeout: float = 180.0
    max_retries: int = 3
    step_delay: float = 1.0
    _client: Client | None = field(default=None, repr=False)

    @property
    def client(self) -> Client:
        """Client for this invocation; exits if there is no usable token."""
        if self._client is None:
            self._client = self._connect()
        return self._client

    def _load_token(self) -> Token:
        if not self.token:
            try:
                return load_token()
            except TokenError as e:
                die(f"failed to load token: {e}")

        try:
            token = token_from_string_or_file(self.token)
        except TokenError as e:
            die(str(e))
        try:
            token.save()
        except OSError as e:
            logger.warning("Unable to cache CAM token", extra={"error": str(e)})
        return token

    def _connect(self) -> Client:
        token = self._load_token()
        try:
            claims = token.claims()
        except TokenError as e:
            die(f"token failed to decode: {e}")
        if claims.expired():
            die(f"{claims} -- get a new one from {self.url}")

        return token.new_client(
            host_url(self.url),
            insecure_tls(self.insecure),
            retryer(self.max_retries, self.step_delay, self.timeout),
            debug(self.debug),
            json_response(self.json),
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


def get_state(ctx: typer.Context) -> ConsoleState:
    """Return the state set up by the root callback."""
    return ctx.obj
