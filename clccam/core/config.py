"""
Configuration Management.

Loads overrides from the environment and client settings from an optional
camsole.yaml in the CLC configuration directory.

Environment:
    CAM_TOKEN         - Bearer token contents (takes precedence over the cache file)
    CAM_URL           - Target service host
    CLC_HOME          - Alternate configuration directory
    CAM_INSECURE_TLS  - Any non-empty value disables TLS validation by default

Settings (YAML, optional):
    $CLC_HOME/camsole.yaml - client retry/timeout policy and logging
"""

import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from clccam.core.config_schema import CamsoleSchema, ClientSchema, LoggingSchema

DEFAULT_HOST = "cam.ctl.io"

SETTINGS_FILE = "camsole.yaml"


class Settings(BaseSettings):
    """Environment overrides. All fields are optional."""

    cam_token: str = ""
    cam_url: str = ""
    clc_home: str = ""
    cam_insecure_tls: str = ""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def host(self) -> str:
        """Service host, falling back to the public CAM endpoint."""
        return self.cam_url or DEFAULT_HOST

    @property
    def insecure_tls(self) -> bool:
        """Whether TLS validation should be disabled by default (also on private 10.x hosts)."""
        return self.cam_insecure_tls != "" or self.cam_url.startswith("10.")


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings."""
    return Settings()


def get_clc_home() -> Path:
    """
    Return the CLC configuration directory.

    Same location as used by clc-go-cli, including the CLC_HOME override.
    """
    clc_home = get_settings().clc_home
    if clc_home:
        return Path(clc_home)
    if sys.platform.startswith("win"):
        return Path.home() / "clc"
    return Path.home() / ".clc"


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from the CLC configuration directory."""
    config_path = get_clc_home() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. A missing file yields the defaults."""
    try:
        raw = load_yaml_config(filename)
    except FileNotFoundError:
        raw = {}
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Client configuration loaded from camsole.yaml.

    The file is validated against CamsoleSchema at load time.
    Each section is exposed as its validated schema model.
    """

    def __init__(self) -> None:
        self._config = _load_validated(CamsoleSchema, SETTINGS_FILE)

    @property
    def client(self) -> ClientSchema:
        """Retry and timeout policy."""
        return self._config.client

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._config.logging


@lru_cache
def get_app_config() -> AppConfig:
    """Return the camsole.yaml settings, loaded once per process."""
    return AppConfig()
