"""
Response Targets.

A response target decides how a successful response body becomes a Python
value. Three strategies exist:

    TextTarget   - the body as a single string
    LinesTarget  - the body split on newline characters
    JsonTarget   - the body validated as JSON into a given type

Callers usually pass a type and let as_target() pick the strategy:

    client.get("/services/boxes", list[Box])         # JsonTarget
    client.get("/services/instances/i-1/logs", str)  # TextTarget
"""

from abc import ABC, abstractmethod
from typing import Any, get_origin

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from clccam.core.exceptions import ConfigurationError, DecodeError


class ResponseTarget(ABC):
    """Strategy turning a non-empty response body into a value."""

    @abstractmethod
    def decode(self, body: bytes) -> Any:
        """Decode the body; raise DecodeError if it does not fit."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TextTarget(ResponseTarget):
    def decode(self, body: bytes) -> str:
        return body.decode("utf-8", errors="replace")


class LinesTarget(ResponseTarget):
    def decode(self, body: bytes) -> list[str]:
        return body.decode("utf-8", errors="replace").split("\n")


class JsonTarget(ResponseTarget):
    """Validate the body as JSON against a type (model, list of models, dict, ...)."""

    def __init__(self, type_: Any) -> None:
        self.type_ = type_
        self._adapter = TypeAdapter(type_)

    def decode(self, body: bytes) -> Any:
        try:
            return self._adapter.validate_json(body)
        except PydanticValidationError as e:
            raise DecodeError(f"failed to decode response into {self!r}: {e}") from e

    def __repr__(self) -> str:
        if get_origin(self.type_) is None:
            name = getattr(self.type_, "__name__", repr(self.type_))
        else:
            name = repr(self.type_)
        return f"JsonTarget({name})"


def as_target(target: Any) -> ResponseTarget | None:
    """
    Select the response strategy for a target.

    Args:
        target: None, a ResponseTarget, or a type / generic alias

    Returns:
        The matching ResponseTarget, or None if no decoding is wanted

    Raises:
        ConfigurationError: If target is a plain value rather than a type
    """
    if target is None or isinstance(target, ResponseTarget):
        return target
    if target is str:
        return TextTarget()
    if target == list[str]:
        return LinesTarget()
    if isinstance(target, type) or get_origin(target) is not None:
        return JsonTarget(target)
    raise ConfigurationError(
        f"expecting a result type or ResponseTarget, got {type(target).__name__} value {target!r}"
    )
