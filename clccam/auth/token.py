"""
CAM Bearer Token.

CAM tokens are RS256-signed JWTs. The signature is verified against the
public key CAM signs its tokens with; the payload is exposed as Claims.

The last token used is cached in $CLC_HOME/cam.token, the same directory
clc-go-cli uses. $CAM_TOKEN takes precedence over the cached file.

Usage:
    from clccam.auth.token import load_token

    token = load_token()
    if token.expired():
        ...
    client = token.new_client(host_url("cam.ctl.io"))
"""

import os
from pathlib import Path

from jose import jws
from jose.exceptions import JOSEError
from pydantic import ValidationError

from clccam.auth.claims import Claims
from clccam.client.client import Client
from clccam.client.options import ClientOption, headers, request_options, retryer
from clccam.core.config import get_app_config, get_clc_home, get_settings
from clccam.core.exceptions import TokenError
from clccam.core.logging import get_logger

logger = get_logger(__name__)

# Name of the file caching the last-used bearer token.
TOKEN_FILE = "cam.token"

ALGORITHMS = ["RS256", "RS384", "RS512"]

CAM_JWT_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAvfXAptp4XtBpIlXPzu0i
Y7trJ5XOlgFpIw742q56AMXi1s9M1KS3qbZwz1Bkk7UX3SS+ZdyXvb1M23jzu7Ji
lenUBBEea974eNm3mIdwTcuVeuVf3Xn7plU59eJNTzMCgz/OV9Zo6YNsHpHnBGVE
mBfstcNCuufbNC80zzE1YEthkIsPcoJgl4imUH6nl3sHx8ndMsz4MBnLkHsz0pXG
53bmwKJF7kh/gYL/5+WJmzwsh1tsGWKkDr1pPedW0oNJLADy3MfmA/kFaa7NRL0z
p7w9pVV/CO5J6XrtVoaVJz1A31pAc85qez8qZluGJ9SqZhM2XgmBiaDEvYSOvCED
7QIDAQAB
-----END PUBLIC KEY-----
"""


def cam_jwt_public_key() -> str:
    """Return the PEM-encoded RSA key that validates CAM-issued token signatures."""
    return CAM_JWT_PUBLIC_KEY


class Token(str):
    """CAM JWT bearer token."""

    def decode(self) -> bytes:
        """
        Verify the token signature and return the raw payload.

        Raises:
            TokenError: If the token is malformed or the signature does not verify
        """
        try:
            return jws.verify(str(self), cam_jwt_public_key(), algorithms=ALGORITHMS)
        except JOSEError as e:
            raise TokenError(f"invalid CAM token: {e}") from e

    def claims(self) -> Claims:
        """
        Extract the claims from the verified payload.

        Raises:
            TokenError: If verification fails or the payload is not a CAM claims set
        """
        payload = self.decode()
        try:
            return Claims.model_validate_json(payload)
        except ValidationError as e:
            raise TokenError(f"unable to extract CAM token claims payload: {e}") from e

    def expired(self) -> bool:
        return self.claims().expired()

    def describe(self) -> str:
        """Human-readable summary of the token."""
        try:
            return str(self.claims())
        except TokenError as e:
            return f"invalid CAM token ({e})"

    def new_client(self, *options: ClientOption) -> Client:
        """
        Return a client that authenticates with this token.

        The client talks to cam.ctl.io with the retry policy of the client
        section of camsole.yaml; options are applied after these defaults.
        """
        policy = get_app_config().client
        return Client(
            request_options(headers({"Authorization": f"Bearer {self}"})),
            retryer(policy.max_retries, policy.step_delay, policy.timeout),
        ).with_options(*options)

    def save(self) -> Path:
        """
        Cache the token in the CLC configuration directory.

        The directory is created owner-only if missing; the file is written
        owner read/write only.

        Returns:
            Path of the token file
        """
        clc_home = get_clc_home()
        clc_home.mkdir(mode=0o700, parents=True, exist_ok=True)

        path = clc_home / TOKEN_FILE
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(str(self))
        path.chmod(0o600)

        logger.debug("Saved CAM token", extra={"path": str(path)})
        return path


def load_token() -> Token:
    """
    Load the CAM token from $CAM_TOKEN or the cached token file.

    Raises:
        TokenError: If neither source provides a token
    """
    env_token = get_settings().cam_token
    if env_token:
        return Token(env_token)

    clc_home = get_clc_home()
    path = clc_home / TOKEN_FILE
    if path.exists():
        try:
            return Token(path.read_text(encoding="utf-8").strip())
        except OSError as e:
            raise TokenError(f"failed to read {path}: {e}") from e
    raise TokenError(f"no valid token configuration found in {clc_home}")


def token_from_string_or_file(value: str) -> Token:
    """
    Load a token given either as its contents or as the path of a file holding it.

    Tokens given by content are verified; tokens read from a file are not.

    Raises:
        TokenError: If the file cannot be read, value is empty, or the token does not decode
    """
    if os.path.exists(value):
        try:
            return Token(Path(value).read_text(encoding="utf-8").strip())
        except OSError as e:
            raise TokenError(f"failed to read {value}: {e}") from e
    if not value:
        raise TokenError("empty token string")

    token = Token(value)
    try:
        token.decode()
    except TokenError as e:
        raise TokenError(f"failed to decode {value!r}: {e}") from e
    return token
