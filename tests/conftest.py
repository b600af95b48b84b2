"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Environment Isolation:
    Every test runs with CLC_HOME pointing at a fresh temporary directory and
    without CAM_TOKEN / CAM_URL / CAM_INSECURE_TLS, so a developer's real
    token cache and settings are never read or overwritten.

Token Signing:
    CAM tokens are verified against a fixed public key. Tests sign their own
    tokens with a throw-away RSA key pair and patch the verification key.
"""

import time
import uuid
from collections.abc import Callable, Generator
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jws

from clccam.core.config import get_app_config, get_settings


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point CLC_HOME at a temporary directory and clear cached settings."""
    for name in ("CAM_TOKEN", "CAM_URL", "CAM_INSECURE_TLS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CLC_HOME", str(tmp_path / "clc"))

    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


@pytest.fixture
def clc_home(tmp_path):
    """The (not yet created) CLC configuration directory of the test."""
    return tmp_path / "clc"


# =============================================================================
# Token Fixtures
# =============================================================================


def _generate_key_pair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture(scope="session")
def signing_keys() -> tuple[str, str]:
    """RSA key pair (private PEM, public PEM) trusted by the tests."""
    return _generate_key_pair()


@pytest.fixture(scope="session")
def foreign_keys() -> tuple[str, str]:
    """RSA key pair that is never trusted."""
    return _generate_key_pair()


def _user_claims(**overrides: Any) -> dict[str, Any]:
    """Claims of a user token valid for one more hour."""
    now = int(time.time())
    claims = {
        "type": "user",
        "sub": "jdoe",
        "name": "Jane Doe",
        "organization": "acme",
        "iat": now - 60,
        "exp": now + 3600,
        "jti": str(uuid.uuid4()),
    }
    claims.update(overrides)
    return claims


def _service_claims(**overrides: Any) -> dict[str, Any]:
    """Claims of a service token valid for one more hour."""
    now = int(time.time())
    claims = {
        "type": "service",
        "instance": "i-z48wub",
        "service": "eb-1cm83",
        "machine": "eb-1cm83-1",
        "iat": now - 60,
        "exp": now + 3600,
        "jti": str(uuid.uuid4()),
    }
    claims.update(overrides)
    return claims


@pytest.fixture
def user_claims() -> Callable[..., dict[str, Any]]:
    """Factory of user token claims; keyword arguments override single claims."""
    return _user_claims


@pytest.fixture
def service_claims() -> Callable[..., dict[str, Any]]:
    """Factory of service token claims; keyword arguments override single claims."""
    return _service_claims


@pytest.fixture
def make_token(signing_keys, monkeypatch) -> Callable[[dict[str, Any]], str]:
    """
    Sign claims into a token that verifies for the duration of the test.

    Usage:
        def test_something(make_token):
            token = make_token(user_claims(exp=0))
    """
    private_pem, public_pem = signing_keys
    monkeypatch.setattr("clccam.auth.token.cam_jwt_public_key", lambda: public_pem)

    def _make(claims: dict[str, Any], algorithm: str = "RS256") -> str:
        return jws.sign(claims, private_pem, algorithm=algorithm)

    return _make


@pytest.fixture
def user_token(make_token) -> str:
    """A valid, unexpired user token."""
    return make_token(_user_claims())


@pytest.fixture
def service_token(make_token) -> str:
    """A valid, unexpired service token."""
    return make_token(_service_claims())


@pytest.fixture
def expired_token(make_token) -> str:
    """A correctly signed user token that expired an hour ago."""
    now = int(time.time())
    return make_token(_user_claims(iat=now - 7200, exp=now - 3600))
