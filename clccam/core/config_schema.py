"""
Configuration Schemas.

Pydantic models defining the expected structure of camsole.yaml.
Used by AppConfig to validate configuration at load time. If the YAML file
has wrong types or unknown fields, a clear ValidationError is raised at
startup instead of a cryptic failure deep in request handling.

Sections:
    client   → retry and timeout policy of the REST client
    logging  → log level, format and optional JSONL file
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Rejects keys that camsole does not know, e.g. misspelled settings."""

    model_config = ConfigDict(extra="forbid")


class ClientSchema(_StrictBase):
    max_retries: int = Field(default=3, ge=1, le=20)
    step_delay: float = Field(default=1.0, ge=0)
    timeout: float = Field(default=180.0, gt=0)


class LogFileSchema(_StrictBase):
    path: str
    max_bytes: int = 10485760
    backup_count: int = 5


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json"] = "console"
    file: LogFileSchema | None = None


class CamsoleSchema(_StrictBase):
    client: ClientSchema = Field(default_factory=ClientSchema)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)
